"""
Bindings and scope queries.

- model: type, variable and method bindings and their signatures
- visibility: Java access rules
- scopes: ScopeFlags selecting what a query reports
- requests: BindingRequestBySignature and BindingRequestByValue
- environment: BindingEnvironment, the bindings of one parsed unit
- scope_visitors: walks offering local and later declarations to a request
- analyser: ScopeAnalyser, declarations available at a position
"""

from .analyser import ScopeAnalyser
from .environment import BindingEnvironment, ImportDeclaration
from .model import (
    Binding,
    BindingKind,
    MethodBinding,
    Modifier,
    TypeBinding,
    TypeKind,
    VariableBinding,
    declaration_of,
    method_signature,
    signature_of,
)
from .requests import (
    BindingRequest,
    BindingRequestBySignature,
    BindingRequestByValue,
    SignatureAccumulator,
    ValueAccumulator,
    feed,
)
from .scopes import ALL_DECLARATIONS, ScopeFlags
from .visibility import is_visible

__all__ = [
    "Binding",
    "BindingKind",
    "TypeBinding",
    "TypeKind",
    "VariableBinding",
    "MethodBinding",
    "Modifier",
    "declaration_of",
    "method_signature",
    "signature_of",
    "is_visible",
    "ScopeFlags",
    "ALL_DECLARATIONS",
    "BindingRequest",
    "BindingRequestBySignature",
    "BindingRequestByValue",
    "SignatureAccumulator",
    "ValueAccumulator",
    "feed",
    "ImportDeclaration",
    "BindingEnvironment",
    "ScopeAnalyser",
]
