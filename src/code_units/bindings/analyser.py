"""
Scope analysis.

Evaluates the fields, methods and types declared (available) at a given
position of a parsed unit, and answers whether one declaration is visible
and not hidden there.

Candidates are offered to a BindingRequest in this order:

1. local declarations, walking backwards from the position (nearest first)
2. the enclosing type, its type parameters, its members and hierarchy
3. the enclosing types, outwards, the same way
4. the top-level types of the unit
"""

import logging
from typing import Callable, List, Optional, Set, Union

import tree_sitter

from ..constants import (
    BLOCKS, BODY_DECLARATIONS, FIELD_DECLARATIONS, METHOD_DECLARATIONS,
    STATEMENT_TYPES, TYPE_BODIES, TYPE_DECLARATIONS
)
from ..locations.location import Location
from ..utils.nodes import find_ancestor, is_same_node, node_text
from ..visitors.base import accept
from ..visitors.selection import CoveredNodesVisitor
from .model import Binding, BindingKind, MethodBinding, TypeBinding, VariableBinding
from .requests import BindingRequest, BindingRequestBySignature, BindingRequestByValue
from .scope_visitors import (
    ScopeVisitor, UsedDeclarationsVisitor, enum_constants, is_switch_label_name
)
from .scopes import ScopeFlags

logger = logging.getLogger(__name__)

Selector = Union[tree_sitter.Node, Location]

OBJECT_NAME = 'Object'

MEMBER_DECLARATIONS = (
    METHOD_DECLARATIONS | TYPE_DECLARATIONS | FIELD_DECLARATIONS
    | {'static_initializer', 'enum_constant'}
)

LITERAL_TYPES = {
    'string_literal': 'java.lang.String',
    'text_block': 'java.lang.String',
    'character_literal': 'char',
    'true': 'boolean',
    'false': 'boolean',
    'decimal_integer_literal': 'int',
    'hex_integer_literal': 'int',
    'octal_integer_literal': 'int',
    'binary_integer_literal': 'int',
    'decimal_floating_point_literal': 'double',
    'hex_floating_point_literal': 'double',
}


class ScopeAnalyser:
    """
    Answers scope queries over one bound context.

    Args:
        context: A bound Context; its binding environment is built on demand
    """

    def __init__(self, context):
        self.context = context
        self.environment = context.bindings
        self.unit = context.unit

    # ------------------------------------------------------------ public API

    def declarations_in_scope(self, selector: Selector, flags: int) -> List[Binding]:
        """
        Declarations available at a name, or within a located unit.

        Args:
            selector: An identifier node, or a Location selecting a unit
            flags: ScopeFlags selecting the declarations to report

        Returns:
            The declarations, nearest first; empty if none
        """
        flags = ScopeFlags(flags)
        if isinstance(selector, Location):
            return self._declarations_at_location(selector, flags)
        return self._declarations_at_name(selector, flags)

    def is_element_declared_in_scope(self, declaration: Binding, selector: Selector, flags: int) -> bool:
        """
        Evaluate whether a declaration is reachable, unqualified, at a name.

        Args:
            declaration: The binding to look for
            selector: The identifier the declaration would be referenced by
            flags: ScopeFlags; CHECK_VISIBILITY also requires the declaration
                to be accessible and not hidden

        Returns:
            True if the declaration is found (and visible, when checked)
        """
        flags = ScopeFlags(flags)
        if isinstance(selector, Location):
            selector = self._select_node(selector)
            if selector is None:
                return False

        if is_switch_label_name(selector):
            switch_type = self._switch_type(selector)
            if switch_type is not None and switch_type.is_enum:
                return any(each is declaration for each in switch_type.type_declaration.declared_fields)

        parent_type = self.environment.parent_type_context(selector)
        if parent_type is None:
            return False

        request = BindingRequestByValue(declaration, parent_type, flags)
        qualifier = self._qualifier_of(selector)
        if qualifier is None:
            stopped = self._collect_local_declarations(selector, self.unit.char_start(selector), flags, request)
            if request.found:
                return request.visible
            if stopped:
                # A local declaration hides it
                return False

            self._collect_type_declarations(parent_type, flags, request, set())
        elif qualifier is not False:
            self._collect_inherited_elements(qualifier, flags, request, set())

        return request.found and request.visible

    def resolve(self, name: Optional[tree_sitter.Node]) -> Optional[Binding]:
        """
        Binding an identifier refers to, or None if it cannot be resolved.

        Declaration names resolve to their own binding. A member name after
        a qualifier is looked up in the qualifier's type; a simple name is
        looked up among the variables, then the types, in scope.
        """
        if name is None:
            return None

        declared = self.environment.binding_of(name)
        if declared is not None:
            return declared

        parent = name.parent
        if parent is not None and parent.type == 'method_invocation' \
                and is_same_node(parent.child_by_field_name('name'), name):
            return self.resolve_method(parent)

        text = node_text(name)
        qualifier = self._qualifier_of(name)
        if qualifier is False:
            return None
        if qualifier is not None:
            return self._find_member(qualifier, lambda each: each.kind is BindingKind.VARIABLE
                                     and each.name == text)

        for each in self.declarations_in_scope(name, ScopeFlags.VARIABLES):
            if each.name == text:
                return each

        return self._resolve_type_name(name)

    def resolve_method(self, invocation: tree_sitter.Node) -> Optional[MethodBinding]:
        """Method a ``method_invocation`` calls, matched by name and arity."""
        name = node_text(invocation.child_by_field_name('name'))
        arguments = invocation.child_by_field_name('arguments')
        arity = len(arguments.named_children) if arguments is not None else 0

        def matches(each: Binding) -> bool:
            return (isinstance(each, MethodBinding) and each.name == name and not each.is_constructor
                    and (len(each.parameter_types) == arity or each.is_varargs))

        qualifier = self._qualifier_of(invocation.child_by_field_name('name'))
        if qualifier is False:
            return None
        if qualifier is not None:
            return self._find_member(qualifier, matches)

        current = self.environment.enclosing_type(invocation)
        while current is not None:
            found = self._find_member(current, matches)
            if found is not None:
                return found
            current = current.declaring_class
        return None

    def type_of_expression(self, expression: Optional[tree_sitter.Node]) -> Optional[TypeBinding]:
        """Static type of an expression, where it can be told from the unit alone."""
        if expression is None:
            return None

        environment = self.environment
        node_type = expression.type

        if node_type == 'parenthesized_expression':
            inner = expression.named_children
            return self.type_of_expression(inner[0]) if inner else None
        if node_type == 'this':
            return environment.enclosing_type(expression)
        if node_type == 'super':
            enclosing = environment.enclosing_type(expression)
            return enclosing.superclass if enclosing is not None else None
        if node_type in ('identifier', 'field_access'):
            name = expression if node_type == 'identifier' else expression.child_by_field_name('field')
            binding = self.resolve(name)
            if isinstance(binding, VariableBinding):
                return binding.type
            return binding if isinstance(binding, TypeBinding) else None
        if node_type == 'method_invocation':
            method = self.resolve_method(expression)
            return method.return_type if method is not None else None
        if node_type in ('object_creation_expression', 'cast_expression', 'array_creation_expression'):
            resolved = environment.resolve_type(expression.child_by_field_name('type'), expression)
            if node_type == 'array_creation_expression':
                dimensions = sum(node_text(each).count('[') for each in expression.children_by_field_name('dimensions'))
                return environment.array_of(resolved, dimensions)
            return resolved
        if node_type == 'array_access':
            array = self.type_of_expression(expression.child_by_field_name('array'))
            if array is None or not array.is_array:
                return None
            return environment.array_of(array.element_type, array.dimensions - 1)
        if node_type in LITERAL_TYPES:
            name = LITERAL_TYPES[node_type]
            if '.' in name:
                return environment.external_type(name)
            return environment.primitive_type(name)
        return None

    def used_field_names(self, location: Location) -> Set[str]:
        """
        Names of the fields in use within a location: declared in scope,
        declared or used after it, or statically imported by name.
        """
        result = {each.name for each in self.declarations_in_scope(location, ScopeFlags.VARIABLES)}
        result.update(each.name for each in self.used_field_declarations(location, ScopeFlags.VARIABLES))
        result.update(
            each.simple_name for each in self.environment.imports
            if each.is_static and not each.is_on_demand
        )
        return result

    def used_field_declarations(self, location: Location, flags: int = ScopeFlags.VARIABLES) -> List[Binding]:
        """Declarations used after the start of the statement a location selects."""
        node = self._select_node(location)
        if node is None:
            return []
        return self._declarations_after(node, ScopeFlags(flags), focus_on_fields=True)

    def declarations_in_compilation_unit(self, location: Location, flags: int,
                                         node: Optional[tree_sitter.Node] = None) -> List[Binding]:
        """
        Declarations available at the start of a location: locals first, then
        the members of the enclosing type and its hierarchy and outer types.
        """
        flags = ScopeFlags(flags)
        if node is None:
            node = self._select_node(location) or self.context.root

        parent_type = self.environment.enclosing_type(node)
        request = BindingRequestBySignature(parent_type, flags)
        self._collect_local_declarations(node, location.start.offset, flags, request)
        if parent_type is not None:
            self._collect_type_declarations(parent_type, flags, request, set())
        return request.requested_bindings()

    def all_bindings(self, location: Location, node: Optional[tree_sitter.Node] = None) -> Set[Binding]:
        """Variables, methods and types available in a location, without those of ``Object``."""
        variables = self.declarations_in_compilation_unit(location, ScopeFlags.VARIABLES, node)
        methods = self.declarations_in_compilation_unit(location, ScopeFlags.METHODS, node)
        types = self.declarations_in_compilation_unit(location, ScopeFlags.TYPES, node)

        owner_name = self._outer_type_name()
        result = {each for each in variables if _owner_name(each, owner_name) != OBJECT_NAME}
        result.update(each for each in methods if _owner_name(each, owner_name) != OBJECT_NAME)
        result.update(each for each in types if _owner_name(each, owner_name) != OBJECT_NAME)
        return result

    def declarations_within_scope(self, location: Location, only_local: bool = False) -> Set[Binding]:
        """
        Methods, variables and types in scope or used within a location.

        Args:
            location: Location of a unit (typically a method)
            only_local: Leave out declarations of ``java.lang.Object``

        Returns:
            The set of bindings
        """
        owner_name = self._outer_type_name()

        def keep(binding: Binding) -> bool:
            return not only_local or _owner_name(binding, owner_name) != OBJECT_NAME

        result: Set[Binding] = set()
        for flags in (ScopeFlags.TYPES, ScopeFlags.METHODS, ScopeFlags.VARIABLES):
            result.update(each for each in self.declarations_in_scope(location, flags) if keep(each))
        return result

    def used_declarations_in_scope(self, location: Location) -> Set[Binding]:
        return self.declarations_within_scope(location, only_local=False)

    def used_local_declarations_in_scope(self, location: Location) -> Set[Binding]:
        return self.declarations_within_scope(location, only_local=True)

    # -------------------------------------------------------------- queries

    def _declarations_at_name(self, name: tree_sitter.Node, flags: ScopeFlags) -> List[Binding]:
        if is_switch_label_name(name):
            switch_type = self._switch_type(name)
            if switch_type is not None and switch_type.is_enum:
                return enum_constants(switch_type)

        parent_type = self.environment.enclosing_type(name)
        if parent_type is None:
            return []

        request = BindingRequestBySignature(parent_type, flags)
        qualifier = self._qualifier_of(name)
        if qualifier is None:
            self._collect_local_declarations(name, self.unit.char_start(name), flags, request)
            self._collect_type_declarations(parent_type, flags, request, set())
        elif qualifier is not False:
            self._collect_inherited_elements(qualifier, flags, request, set())

        return request.requested_bindings()

    def _declarations_at_location(self, location: Location, flags: ScopeFlags) -> List[Binding]:
        node = self._select_node(location)
        if node is None:
            return []

        if node.type == 'identifier':
            return self._declarations_at_name(node, flags)

        if node.type in METHOD_DECLARATIONS or node.type in STATEMENT_TYPES:
            result: List[Binding] = []
            if node.type in METHOD_DECLARATIONS and flags.methods:
                _add_unique(result, [self.environment.binding_of(node)])
            _add_unique(result, self._declarations_after(node, flags, focus_on_fields=False))
            _add_unique(result, self._declarations_after(node, flags, focus_on_fields=True))
            return result

        if node.type == 'program' or node.type in TYPE_DECLARATIONS:
            return self.declarations_in_compilation_unit(location, flags, node)

        return []

    def _declarations_after(self, node: tree_sitter.Node, flags: ScopeFlags,
                            focus_on_fields: bool) -> List[Binding]:
        declaration = _parent_statement(node)
        if declaration is None and not focus_on_fields:
            declaration = next((each for each in node.children if each.type in BLOCKS), None)

        while declaration is not None and declaration.type in STATEMENT_TYPES \
                and declaration.type not in BLOCKS:
            declaration = declaration.parent

        if declaration is None or declaration.type not in BLOCKS:
            return []

        request = BindingRequestBySignature()
        visitor = UsedDeclarationsVisitor(self, self.unit.char_start(node), flags, request)
        accept(declaration, visitor)
        return request.requested_bindings()

    # ----------------------------------------------------------- collectors

    def _collect_local_declarations(self, node: tree_sitter.Node, position: int,
                                    flags: ScopeFlags, request: BindingRequest) -> bool:
        if not (flags.variables or flags.types):
            return False

        declaration = _body_declaration_of(node)
        if declaration is None:
            return False

        visitor = ScopeVisitor(self, position, flags, request)
        accept(declaration, visitor)
        return visitor.is_break_statement

    def _collect_type_declarations(self, binding: TypeBinding, flags: ScopeFlags,
                                   request: BindingRequest, visited: Set[TypeBinding]) -> bool:
        if flags.types and not binding.is_anonymous:
            if request.accept(binding):
                return True
            for each in binding.type_parameters:
                if request.accept(each):
                    return True

        self._collect_inherited_elements(binding, flags, request, visited)

        if binding.is_local:
            return self._collect_outer_declarations_for_local_type(binding, flags, request, visited)

        declaring = binding.declaring_class
        if declaring is not None:
            return self._collect_type_declarations(declaring, flags, request, visited)

        if flags.types and binding.node is not None:
            for each in self.environment.types:
                if request.accept(each):
                    return True
        return False

    def _collect_outer_declarations_for_local_type(self, binding: TypeBinding, flags: ScopeFlags,
                                                   request: BindingRequest,
                                                   visited: Set[TypeBinding]) -> bool:
        node = binding.node
        if node is None or node.parent is None:
            return False

        # Locals declared before the type (or the instance creation) are visible in it
        anchor = node.parent if binding.is_anonymous else node
        if self._collect_local_declarations(node.parent, self.unit.char_start(anchor), flags, request):
            return True

        parent_type = self.environment.enclosing_type(node.parent)
        if parent_type is not None:
            return self._collect_type_declarations(parent_type, flags, request, visited)
        return False

    def _collect_inherited_elements(self, binding: TypeBinding, flags: ScopeFlags,
                                    request: BindingRequest, visited: Set[TypeBinding]) -> bool:
        declaration = binding.type_declaration
        if declaration in visited:
            return False
        visited.add(declaration)

        if flags.variables:
            for each in declaration.declared_fields:
                if request.accept(each):
                    return True

        if flags.methods:
            for each in declaration.declared_methods:
                if not each.is_constructor and request.accept(each):
                    return True

        if flags.types:
            for each in declaration.declared_types:
                if request.accept(each):
                    return True

        for each in self._supertypes(declaration):
            if self._collect_inherited_elements(each, flags, request, visited):
                return True

        return False

    # -------------------------------------------------------------- helpers

    def _supertypes(self, binding: TypeBinding) -> List[TypeBinding]:
        if binding.is_type_variable:
            return list(binding.bounds) or [self.environment.object_type]

        supertypes = []
        if binding.superclass is not None:
            supertypes.append(binding.superclass)
        elif binding.is_array:
            supertypes.append(self.environment.object_type)
        supertypes.extend(binding.interfaces)
        return supertypes

    def _find_member(self, binding: TypeBinding, matches: Callable[[Binding], bool]) -> Optional[Binding]:
        """First member of a type or its supertypes accepted by ``matches``."""
        pending = [binding]
        visited: Set[TypeBinding] = set()
        while pending:
            current = pending.pop(0).type_declaration
            if current in visited:
                continue
            visited.add(current)

            for each in (*current.declared_fields, *current.declared_methods, *current.declared_types):
                if matches(each):
                    return each
            pending.extend(self._supertypes(current))
        return None

    def _qualifier_of(self, name: Optional[tree_sitter.Node]):
        """
        Type a member name is accessed through.

        Returns:
            None for an unqualified name; False when a qualifier exists but
            its type cannot be told; the qualifier's type otherwise
        """
        if name is None or name.parent is None:
            return None

        parent = name.parent
        if parent.type == 'method_invocation' and is_same_node(parent.child_by_field_name('name'), name):
            target = parent.child_by_field_name('object')
        elif parent.type == 'field_access' and is_same_node(parent.child_by_field_name('field'), name):
            target = parent.child_by_field_name('object')
        else:
            return None

        if target is None:
            return None

        qualifier = self.type_of_expression(target)
        if qualifier is None:
            logger.debug(f"Untyped qualifier '{node_text(target)}' for '{node_text(name)}'")
            return False
        return qualifier

    def _resolve_type_name(self, name: tree_sitter.Node) -> Optional[TypeBinding]:
        binding = self.environment.resolve_type_name(node_text(name), name)
        # Unknown names come back recovered and unqualified
        if binding.recovered and binding.qualified_name == binding.name:
            return None
        return binding

    def _switch_type(self, name: tree_sitter.Node) -> Optional[TypeBinding]:
        switch = find_ancestor(name, ('switch_expression', 'switch_statement'))
        if switch is None:
            return None
        return self.type_of_expression(switch.child_by_field_name('condition'))

    def _select_node(self, location: Location) -> Optional[tree_sitter.Node]:
        visitor = CoveredNodesVisitor(self.unit, location)
        self.context.accept(visitor)
        return visitor.first_selected_node

    def _outer_type_name(self) -> str:
        types = self.environment.types
        return types[0].name if types else self.context.source.name


def _body_declaration_of(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    """Method or initializer holding a node; None for nodes outside one."""
    current = node
    while current is not None:
        if current.type in BODY_DECLARATIONS:
            return current
        if current.type == 'block' and current.parent is not None and current.parent.type in TYPE_BODIES:
            return current
        if current.type in TYPE_DECLARATIONS or current.type in FIELD_DECLARATIONS \
                or current.type == 'enum_constant':
            return None
        current = current.parent
    return None


def _parent_statement(node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
    """Nearest statement holding a node (or the node itself), within its member declaration."""
    current = node
    while current is not None and current.type not in STATEMENT_TYPES:
        current = current.parent
        if current is not None and current.type in MEMBER_DECLARATIONS:
            return None
    return current


def _owner_name(binding: Binding, default: str) -> str:
    """Simple name of the type a binding belongs to, for filtering out ``Object``'s members."""
    if isinstance(binding, VariableBinding):
        if binding.declaring_method is not None:
            owner = binding.declaring_method.declaring_class
            return owner.name if owner is not None else default
        if binding.is_field:
            owner = binding.declaring_class
            return owner.name if owner is not None else default
        return default

    owner = getattr(binding, 'declaring_class', None)
    return owner.name if owner is not None else ''


def _add_unique(result: List[Binding], bindings) -> None:
    for each in bindings:
        if each is not None and not any(each is seen for seen in result):
            result.append(each)
