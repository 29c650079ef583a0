"""
Binding model.

Bindings are the resolved symbols of a parsed unit: types, variables
(fields, enum constants, parameters, locals) and methods. They are plain
objects compared by identity; two bindings for the same declaration are
the same object within one BindingEnvironment.
"""

from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import Any, ClassVar, Iterable, List, Optional

from ..constants import OBJECT_TYPE
from ..errors import BindingError


class BindingKind(Enum):
    """Symbol kinds a binding can have."""
    TYPE = "type"
    VARIABLE = "variable"
    METHOD = "method"


class Modifier(IntFlag):
    """Java modifiers, using the JVM's flag values."""
    NONE = 0
    PUBLIC = 0x0001
    PRIVATE = 0x0002
    PROTECTED = 0x0004
    STATIC = 0x0008
    FINAL = 0x0010
    SYNCHRONIZED = 0x0020
    VOLATILE = 0x0040
    TRANSIENT = 0x0080
    NATIVE = 0x0100
    ABSTRACT = 0x0400
    STRICTFP = 0x0800
    DEFAULT = 0x10000
    SEALED = 0x20000
    NON_SEALED = 0x40000

    @classmethod
    def from_keywords(cls, keywords: Iterable[str]) -> 'Modifier':
        result = cls.NONE
        for keyword in keywords:
            member = cls.__members__.get(keyword.upper().replace('-', '_'))
            if member is not None:
                result |= member
        return result


class TypeKind(Enum):
    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"
    RECORD = "record"
    ANNOTATION = "annotation"
    TYPE_PARAMETER = "type_parameter"
    PRIMITIVE = "primitive"
    ARRAY = "array"
    PARAMETERIZED = "parameterized"
    WILDCARD = "wildcard"


@dataclass(eq=False)
class Binding:
    """Base class for bindings. Equality is identity."""
    kind: ClassVar[BindingKind]

    name: str
    modifiers: Modifier = Modifier.NONE
    node: Any = field(default=None, repr=False)
    offset: int = field(default=-1, repr=False)

    @property
    def key(self) -> str:
        raise NotImplementedError

    @property
    def is_public(self) -> bool:
        return Modifier.PUBLIC in self.modifiers

    @property
    def is_protected(self) -> bool:
        return Modifier.PROTECTED in self.modifiers

    @property
    def is_private(self) -> bool:
        return Modifier.PRIVATE in self.modifiers

    @property
    def is_static(self) -> bool:
        return Modifier.STATIC in self.modifiers

    def declaration(self) -> 'Binding':
        """Canonical declaration form of this binding."""
        return self


@dataclass(eq=False, repr=False)
class TypeBinding(Binding):
    kind: ClassVar[BindingKind] = BindingKind.TYPE

    qualified_name: str = ''
    package: str = ''
    type_kind: TypeKind = TypeKind.CLASS
    declaring_class: Optional['TypeBinding'] = None
    declaring_method: Optional['MethodBinding'] = None
    superclass: Optional['TypeBinding'] = None
    interfaces: List['TypeBinding'] = field(default_factory=list)
    declared_fields: List['VariableBinding'] = field(default_factory=list)
    declared_methods: List['MethodBinding'] = field(default_factory=list)
    declared_types: List['TypeBinding'] = field(default_factory=list)
    type_parameters: List['TypeBinding'] = field(default_factory=list)
    type_arguments: List['TypeBinding'] = field(default_factory=list)
    bounds: List['TypeBinding'] = field(default_factory=list)
    generic_type: Optional['TypeBinding'] = None
    element_type: Optional['TypeBinding'] = None
    dimensions: int = 0
    is_local: bool = False
    is_anonymous: bool = False
    recovered: bool = False

    @property
    def is_interface(self) -> bool:
        return self.type_declaration.type_kind in (TypeKind.INTERFACE, TypeKind.ANNOTATION)

    @property
    def is_enum(self) -> bool:
        return self.type_declaration.type_kind is TypeKind.ENUM

    @property
    def is_type_variable(self) -> bool:
        return self.type_kind is TypeKind.TYPE_PARAMETER

    @property
    def is_primitive(self) -> bool:
        return self.type_kind is TypeKind.PRIMITIVE

    @property
    def is_array(self) -> bool:
        return self.type_kind is TypeKind.ARRAY

    @property
    def is_parameterized(self) -> bool:
        return self.generic_type is not None

    @property
    def is_member(self) -> bool:
        return self.declaring_class is not None and not self.is_local

    @property
    def type_declaration(self) -> 'TypeBinding':
        """The generic declaration of a parameterized type; the type itself otherwise."""
        return self.generic_type if self.generic_type is not None else self

    def declaration(self) -> 'TypeBinding':
        return self.type_declaration

    @property
    def erasure_name(self) -> str:
        """Qualified name of this type's erasure."""
        if self.type_kind in (TypeKind.TYPE_PARAMETER, TypeKind.WILDCARD):
            return self.bounds[0].erasure_name if self.bounds else OBJECT_TYPE
        if self.is_array:
            return self.element_type.erasure_name + '[]' * self.dimensions
        if self.generic_type is not None:
            return self.generic_type.erasure_name
        return self.qualified_name or self.name

    @property
    def key(self) -> str:
        if self.is_primitive or self.type_kind is TypeKind.WILDCARD:
            return self.name
        if self.is_array:
            return self.element_type.key + '[]' * self.dimensions
        if self.generic_type is not None:
            arguments = ','.join(argument.key for argument in self.type_arguments)
            return f"{self.generic_type.key}<{arguments}>"
        if self.is_type_variable:
            owner = self.declaring_method or self.declaring_class
            return f"{owner.key if owner else ''}:T{self.name}"
        if self.is_local or self.is_anonymous:
            owner = self.declaring_method or self.declaring_class
            return f"{owner.key if owner else ''}${self.name}@{self.offset}"
        return 'L' + (self.qualified_name or self.name).replace('.', '/') + ';'

    def __repr__(self) -> str:
        return f"TypeBinding({self.qualified_name or self.name or '<anonymous>'})"


@dataclass(eq=False, repr=False)
class VariableBinding(Binding):
    kind: ClassVar[BindingKind] = BindingKind.VARIABLE

    type: Optional[TypeBinding] = None
    declaring_class: Optional[TypeBinding] = None
    declaring_method: Optional['MethodBinding'] = None
    is_field: bool = False
    is_parameter: bool = False
    is_enum_constant: bool = False

    @property
    def variable_declaration(self) -> 'VariableBinding':
        return self

    @property
    def key(self) -> str:
        if self.is_field and self.declaring_class is not None:
            return f"{self.declaring_class.key}.{self.name}"
        owner = self.declaring_method.key if self.declaring_method is not None else ''
        return f"{owner}#{self.name}@{self.offset}"

    def __repr__(self) -> str:
        return f"VariableBinding({self.name})"


@dataclass(eq=False, repr=False)
class MethodBinding(Binding):
    kind: ClassVar[BindingKind] = BindingKind.METHOD

    declaring_class: Optional[TypeBinding] = None
    return_type: Optional[TypeBinding] = None
    parameter_types: List[TypeBinding] = field(default_factory=list)
    parameter_names: List[str] = field(default_factory=list)
    type_parameters: List[TypeBinding] = field(default_factory=list)
    is_constructor: bool = False
    is_varargs: bool = False

    @property
    def method_declaration(self) -> 'MethodBinding':
        return self

    @property
    def key(self) -> str:
        owner = self.declaring_class.key if self.declaring_class is not None else ''
        parameters = ','.join(each.key for each in self.parameter_types)
        return f"{owner}.{self.name}({parameters})"

    def __repr__(self) -> str:
        return f"MethodBinding({self.name}({', '.join(t.name for t in self.parameter_types)}))"


def declaration_of(binding: Binding) -> Binding:
    """Canonical declaration form: a parameterized type resolves to its generic declaration."""
    return binding.declaration()


def method_signature(binding: Binding) -> str:
    """
    Signature of a method: ``M<name>(<erased qualified parameter types>)``.

    Raises:
        BindingError: if the binding is not a method binding
    """
    if not isinstance(binding, MethodBinding):
        raise BindingError(f"Not a method binding: {binding!r}")

    parameters = ','.join(each.erasure_name for each in binding.parameter_types)
    return f"M{binding.name}({parameters})"


def signature_of(binding: Optional[Binding]) -> Optional[str]:
    """Signature used to tell bindings apart; None for a missing binding."""
    if binding is None:
        return None
    if binding.kind is BindingKind.METHOD:
        return method_signature(binding)
    if binding.kind is BindingKind.VARIABLE:
        return 'V' + binding.name
    return 'T' + binding.name
