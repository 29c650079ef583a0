"""
Binding environment.

tree-sitter produces syntax only, so bindings are derived here from one
parsed unit. The environment is built in two passes:

1. Declare: walk the whole tree and create a binding for every type
   (classes, interfaces, enums, records, annotation types, anonymous
   classes, type parameters), field, enum constant, method, constructor,
   parameter and local variable.
2. Complete: resolve the type references of every declaration
   (supertypes, field and variable types, return and parameter types,
   type parameter bounds) now that all declared types are known.

Types that are not declared in the unit are recovered: qualified through
a single-type import or ``java.lang``, or left unqualified.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

import tree_sitter

from ..constants import (
    BLOCKS, FIELD_DECLARATIONS, JAVA_LANG_TYPES, METHOD_DECLARATIONS,
    OBJECT_TYPE, TYPE_BODIES, TYPE_DECLARATIONS
)
from ..utils.nodes import (
    declared_name, find_child_by_type, is_same_node, modifier_keywords, name_node_of,
    node_key, node_text
)
from .model import (
    Binding, MethodBinding, Modifier, TypeBinding, TypeKind, VariableBinding
)

logger = logging.getLogger(__name__)

PRIMITIVE_TYPE_NODES = frozenset({
    'integral_type', 'floating_point_type', 'boolean_type', 'void_type',
})

TYPE_KINDS = {
    'class_declaration': TypeKind.CLASS,
    'interface_declaration': TypeKind.INTERFACE,
    'enum_declaration': TypeKind.ENUM,
    'record_declaration': TypeKind.RECORD,
    'annotation_type_declaration': TypeKind.ANNOTATION,
}

ANONYMOUS_OWNERS = frozenset({'object_creation_expression', 'enum_constant'})

LOCAL_SCOPES = BLOCKS | {'switch_block_statement_group', 'switch_rule'}


@dataclass(frozen=True)
class ImportDeclaration:
    name: str
    is_static: bool = False
    is_on_demand: bool = False

    @property
    def simple_name(self) -> str:
        return self.name.rsplit('.', 1)[-1]


class BindingEnvironment:
    """Bindings of every declaration in one bound context."""

    def __init__(self, context):
        self.context = context
        self.unit = context.unit
        self.package = ''
        self.imports: List[ImportDeclaration] = []
        self.types: List[TypeBinding] = []
        self._declarations: Dict[tuple, Binding] = {}
        self._pending: List[Tuple[Binding, tree_sitter.Node]] = []
        self._external: Dict[str, TypeBinding] = {}
        self._derived: Dict[str, TypeBinding] = {}

        root = self.unit.tree.root_node
        self._read_header(root)
        self._declare(root, None, None, False)
        for binding, node in self._pending:
            self._complete(binding, node)
        self._pending = []

        logger.debug(
            f"Built {len(self._declarations)} binding(s) for {context.source.name} "
            f"({len(self.types)} top-level type(s))"
        )

    # ----------------------------------------------------------------- queries

    @property
    def object_type(self) -> TypeBinding:
        return self.external_type(OBJECT_TYPE)

    def bindings(self) -> Iterator[Binding]:
        """Every declared binding, in declaration order."""
        return iter(self._declarations.values())

    def binding_of(self, node: Optional[tree_sitter.Node]) -> Optional[Binding]:
        """
        Binding declared by a node.

        Accepts the declaration node itself (type, method, type parameter,
        anonymous class body) or a variable's name identifier / declarator.
        """
        if node is None:
            return None

        binding = self._declarations.get(node_key(node))
        if binding is not None:
            return binding

        name = name_node_of(node)
        if name is not None:
            return self._declarations.get(node_key(name))

        # The name of a type or method declaration
        parent = node.parent
        if parent is not None and is_same_node(name_node_of(parent), node):
            return self._declarations.get(node_key(parent))
        return None

    def enclosing_type(self, node: Optional[tree_sitter.Node]) -> Optional[TypeBinding]:
        """Binding of the nearest type declaration enclosing a node (or declared by it)."""
        current = node
        while current is not None:
            if current.type in TYPE_DECLARATIONS or self._is_anonymous_body(current):
                return self._declarations.get(node_key(current))
            if current.type == 'program':
                return self.types[0] if self.types else None
            current = current.parent
        return None

    def parent_type_context(self, node: Optional[tree_sitter.Node]) -> Optional[TypeBinding]:
        """
        Type whose body holds a node; None for nodes of a top-level type
        header (annotations, type parameters, supertypes).
        """
        last = None
        current = node
        while current is not None:
            if current.type in TYPE_DECLARATIONS:
                body = current.child_by_field_name('body')
                if last is not None and body is not None and node_key(body) == node_key(last):
                    return self._declarations.get(node_key(current))
            elif self._is_anonymous_body(current):
                return self._declarations.get(node_key(current))
            last = current
            current = current.parent
        return None

    def enclosing_method(self, node: Optional[tree_sitter.Node]) -> Optional[MethodBinding]:
        current = node
        while current is not None:
            if current.type in METHOD_DECLARATIONS:
                return self._declarations.get(node_key(current))
            if current.type in TYPE_DECLARATIONS or self._is_anonymous_body(current):
                return None
            current = current.parent
        return None

    def external_type(self, qualified_name: str) -> TypeBinding:
        """Recovered binding for a type not declared in the unit."""
        binding = self._external.get(qualified_name)
        if binding is None:
            package, _, simple = qualified_name.rpartition('.')
            binding = TypeBinding(
                name=simple,
                qualified_name=qualified_name,
                package=package,
                modifiers=Modifier.PUBLIC,
                recovered=True,
            )
            self._external[qualified_name] = binding
        return binding

    def find_type(self, qualified_name: str) -> Optional[TypeBinding]:
        for binding in self._declarations.values():
            if isinstance(binding, TypeBinding) and binding.qualified_name == qualified_name:
                if not binding.is_local and not binding.is_type_variable:
                    return binding
        return None

    def resolve_type(self, type_node: Optional[tree_sitter.Node],
                     context_node: Optional[tree_sitter.Node] = None) -> Optional[TypeBinding]:
        """
        Resolve a type reference node to a binding.

        Args:
            type_node: A tree-sitter type node (type_identifier, generic_type, ...)
            context_node: Node whose position decides which declarations are in scope

        Returns:
            The type binding; None if ``type_node`` is None
        """
        if type_node is None:
            return None

        scope_node = context_node if context_node is not None else type_node
        node_type = type_node.type

        if node_type in PRIMITIVE_TYPE_NODES:
            return self.primitive_type(node_text(type_node))
        if node_type == 'array_type':
            element = self.resolve_type(type_node.child_by_field_name('element'), scope_node)
            dimensions = node_text(type_node.child_by_field_name('dimensions')).count('[')
            return self.array_of(element, dimensions)
        if node_type == 'generic_type':
            base = self.resolve_type(type_node.named_children[0], scope_node)
            arguments_node = find_child_by_type(type_node, 'type_arguments')
            arguments = []
            if arguments_node is not None:
                arguments = [self.resolve_type(each, scope_node) for each in arguments_node.named_children]
            return self.parameterized(base, [each for each in arguments if each is not None])
        if node_type == 'type_identifier':
            return self.resolve_type_name(node_text(type_node), scope_node)
        if node_type == 'scoped_type_identifier':
            return self.resolve_qualified_type(_scoped_name(type_node), scope_node)
        if node_type == 'annotated_type':
            return self.resolve_type(type_node.named_children[-1], scope_node)
        if node_type == 'wildcard':
            return self._wildcard(type_node, scope_node)

        return self.external_type(node_text(type_node))

    def resolve_type_name(self, name: str, context_node: tree_sitter.Node) -> TypeBinding:
        """Resolve a simple type name as seen from ``context_node``."""
        current = context_node
        while current is not None:
            found = self._type_in_scope_of(current, name)
            if found is not None:
                return found
            current = current.parent

        for each in self.types:
            if each.name == name:
                return each

        for each in self.imports:
            if not each.is_static and not each.is_on_demand and each.simple_name == name:
                return self.find_type(each.name) or self.external_type(each.name)

        if name in JAVA_LANG_TYPES:
            return self.external_type(f"java.lang.{name}")

        return self.external_type(name)

    def resolve_qualified_type(self, dotted: str, context_node: tree_sitter.Node) -> TypeBinding:
        declared = self.find_type(dotted)
        if declared is not None:
            return declared

        first, *rest = dotted.split('.')
        current = self.resolve_type_name(first, context_node)
        if current.recovered:
            return self.external_type(dotted)

        for segment in rest:
            member = next((each for each in current.declared_types if each.name == segment), None)
            if member is None:
                return self.external_type(dotted)
            current = member
        return current

    def array_of(self, element: Optional[TypeBinding], dimensions: int) -> Optional[TypeBinding]:
        if element is None or dimensions <= 0:
            return element
        if element.is_array:
            dimensions += element.dimensions
            element = element.element_type

        key = element.key + '[]' * dimensions
        binding = self._derived.get(key)
        if binding is None:
            binding = TypeBinding(
                name=element.name + '[]' * dimensions,
                qualified_name=(element.qualified_name or element.name) + '[]' * dimensions,
                package=element.package,
                type_kind=TypeKind.ARRAY,
                element_type=element,
                dimensions=dimensions,
                modifiers=Modifier.PUBLIC,
            )
            self._derived[key] = binding
        return binding

    def parameterized(self, generic: TypeBinding, arguments: List[TypeBinding]) -> TypeBinding:
        if not arguments:
            return generic

        key = f"{generic.key}<{','.join(each.key for each in arguments)}>"
        binding = self._derived.get(key)
        if binding is None:
            names = ','.join(each.name for each in arguments)
            binding = TypeBinding(
                name=f"{generic.name}<{names}>",
                qualified_name=f"{generic.qualified_name or generic.name}<{names}>",
                package=generic.package,
                type_kind=TypeKind.PARAMETERIZED,
                generic_type=generic,
                type_arguments=list(arguments),
                declaring_class=generic.declaring_class,
                modifiers=generic.modifiers,
            )
            self._derived[key] = binding
        return binding

    # ------------------------------------------------------------------ header

    def _read_header(self, root: tree_sitter.Node) -> None:
        for child in root.children:
            if child.type == 'package_declaration':
                name = find_child_by_type(child, 'scoped_identifier') or find_child_by_type(child, 'identifier')
                self.package = node_text(name)
            elif child.type == 'import_declaration':
                name = find_child_by_type(child, 'scoped_identifier') or find_child_by_type(child, 'identifier')
                tokens = {each.type for each in child.children}
                self.imports.append(ImportDeclaration(
                    name=node_text(name),
                    is_static='static' in tokens,
                    is_on_demand='asterisk' in tokens,
                ))

    # ------------------------------------------------------------ declaration

    def _declare(self, node: tree_sitter.Node, owner: Optional[TypeBinding],
                 method: Optional[MethodBinding], in_body: bool) -> None:
        for child in node.children:
            if not child.is_named:
                continue
            self._declare_node(child, owner, method, in_body)

    def _declare_node(self, node, owner, method, in_body) -> None:
        node_type = node.type

        if node_type in TYPE_DECLARATIONS:
            binding = self._declare_type(node, owner, method, in_body)
            self._declare_type_parameters(node, binding, None)
            if node_type == 'record_declaration':
                self._declare_record_components(node, binding)
            body = node.child_by_field_name('body')
            if body is not None:
                self._declare(body, binding, None, False)
            return

        if self._is_anonymous_body(node):
            binding = self._declare_anonymous(node, owner, method)
            self._declare(node, binding, None, False)
            return

        if node_type in METHOD_DECLARATIONS:
            binding = self._declare_method(node, owner)
            self._declare_type_parameters(node, owner, binding)
            parameters = node.child_by_field_name('parameters')
            if parameters is not None:
                for each in parameters.named_children:
                    if each.type in ('formal_parameter', 'spread_parameter'):
                        self._declare_variable(each, None, binding, is_parameter=True)
                    self._declare(each, owner, binding, True)
            body = node.child_by_field_name('body')
            if body is not None:
                self._declare(body, owner, binding, True)
            return

        if node_type in FIELD_DECLARATIONS:
            for declarator in node.children_by_field_name('declarator'):
                self._declare_field(node, declarator, owner)
                self._declare(declarator, owner, None, True)
            return

        if node_type == 'enum_constant':
            self._declare_enum_constant(node, owner)
            self._declare(node, owner, method, True)
            return

        if node_type == 'static_initializer' or (node_type == 'block' and node.parent is not None
                                                 and node.parent.type in TYPE_BODIES):
            self._declare(node, owner, None, True)
            return

        if node_type == 'variable_declarator' and node.parent is not None \
                and node.parent.type == 'local_variable_declaration':
            self._declare_variable(node, None, method)
        elif node_type in ('catch_formal_parameter', 'enhanced_for_statement', 'resource'):
            self._declare_variable(node, None, method)
        elif node_type == 'formal_parameter' and node.parent is not None \
                and node.parent.type == 'formal_parameters' and node.parent.parent is not None \
                and node.parent.parent.type == 'lambda_expression':
            self._declare_variable(node, None, method, is_parameter=True)
        elif node_type == 'lambda_expression':
            self._declare_lambda_parameters(node, method)

        self._declare(node, owner, method, in_body)

    def _declare_type(self, node, owner, method, in_body) -> TypeBinding:
        name = declared_name(node) or ''
        is_local = in_body
        modifiers = Modifier.from_keywords(modifier_keywords(node))
        if owner is not None and owner.is_interface and not is_local:
            modifiers |= Modifier.PUBLIC | Modifier.STATIC

        if is_local:
            qualified_name = name
        elif owner is not None:
            qualified_name = f"{owner.qualified_name}.{name}" if owner.qualified_name else name
        else:
            qualified_name = f"{self.package}.{name}" if self.package else name

        binding = TypeBinding(
            name=name,
            qualified_name=qualified_name,
            package=self.package,
            type_kind=TYPE_KINDS[node.type],
            modifiers=modifiers,
            declaring_class=owner,
            declaring_method=method if is_local else None,
            is_local=is_local,
            node=node,
            offset=self.unit.char_start(node),
        )
        if owner is not None and not is_local:
            owner.declared_types.append(binding)
        if owner is None:
            self.types.append(binding)

        self._register(node, binding)
        self._pending.append((binding, node))
        return binding

    def _declare_anonymous(self, body, owner, method) -> TypeBinding:
        binding = TypeBinding(
            name='',
            qualified_name='',
            package=self.package,
            declaring_class=owner,
            declaring_method=method,
            is_local=True,
            is_anonymous=True,
            node=body,
            offset=self.unit.char_start(body),
        )
        self._register(body, binding)
        self._pending.append((binding, body))
        return binding

    def _declare_type_parameters(self, node, owner: Optional[TypeBinding],
                                 method: Optional[MethodBinding]) -> None:
        parameters = find_child_by_type(node, 'type_parameters')
        if parameters is None:
            return

        target = method if method is not None else owner
        for each in parameters.named_children:
            if each.type != 'type_parameter':
                continue
            binding = TypeBinding(
                name=declared_name(each) or '',
                qualified_name=declared_name(each) or '',
                package=self.package,
                type_kind=TypeKind.TYPE_PARAMETER,
                declaring_class=owner if method is None else None,
                declaring_method=method,
                node=each,
                offset=self.unit.char_start(each),
            )
            target.type_parameters.append(binding)
            self._register(each, binding)
            self._pending.append((binding, each))

    def _declare_method(self, node, owner: Optional[TypeBinding]) -> MethodBinding:
        modifiers = Modifier.from_keywords(modifier_keywords(node))
        if owner is not None and owner.is_interface and Modifier.PRIVATE not in modifiers:
            modifiers |= Modifier.PUBLIC
            if node.child_by_field_name('body') is None:
                modifiers |= Modifier.ABSTRACT

        binding = MethodBinding(
            name=declared_name(node) or '',
            modifiers=modifiers,
            declaring_class=owner,
            is_constructor=node.type != 'method_declaration',
            node=node,
            offset=self.unit.char_start(node),
        )
        if owner is not None:
            owner.declared_methods.append(binding)
        self._register(node, binding)
        self._pending.append((binding, node))
        return binding

    def _declare_field(self, declaration, declarator, owner: Optional[TypeBinding]) -> None:
        modifiers = Modifier.from_keywords(modifier_keywords(declaration))
        if declaration.type == 'constant_declaration' or (owner is not None and owner.is_interface):
            modifiers |= Modifier.PUBLIC | Modifier.STATIC | Modifier.FINAL

        name = name_node_of(declarator)
        binding = VariableBinding(
            name=node_text(name),
            modifiers=modifiers,
            declaring_class=owner,
            is_field=True,
            node=declarator,
            offset=self.unit.char_start(name),
        )
        if owner is not None:
            owner.declared_fields.append(binding)
        self._register(name, binding)
        self._pending.append((binding, declarator))

    def _declare_enum_constant(self, node, owner: Optional[TypeBinding]) -> None:
        name = name_node_of(node)
        binding = VariableBinding(
            name=node_text(name),
            modifiers=Modifier.PUBLIC | Modifier.STATIC | Modifier.FINAL,
            type=owner,
            declaring_class=owner,
            is_field=True,
            is_enum_constant=True,
            node=node,
            offset=self.unit.char_start(name),
        )
        if owner is not None:
            owner.declared_fields.append(binding)
        self._register(name, binding)

    def _declare_record_components(self, node, owner: TypeBinding) -> None:
        components = node.child_by_field_name('parameters')
        if components is None:
            return
        for each in components.named_children:
            if each.type != 'formal_parameter':
                continue
            name = name_node_of(each)
            binding = VariableBinding(
                name=node_text(name),
                modifiers=Modifier.PRIVATE | Modifier.FINAL,
                declaring_class=owner,
                is_field=True,
                node=each,
                offset=self.unit.char_start(name),
            )
            owner.declared_fields.append(binding)
            self._register(name, binding)
            self._pending.append((binding, each))

    def _declare_variable(self, node, owner, method, is_parameter: bool = False) -> None:
        name = name_node_of(node)
        if name is None:
            return
        binding = VariableBinding(
            name=node_text(name),
            modifiers=Modifier.from_keywords(modifier_keywords(node)),
            declaring_class=owner,
            declaring_method=method,
            is_parameter=is_parameter,
            node=node,
            offset=self.unit.char_start(name),
        )
        self._register(name, binding)
        self._pending.append((binding, node))

    def _declare_lambda_parameters(self, node, method) -> None:
        parameters = node.child_by_field_name('parameters')
        if parameters is None:
            return
        names = [parameters] if parameters.type == 'identifier' else [
            each for each in parameters.named_children if each.type == 'identifier'
        ]
        for name in names:
            binding = VariableBinding(
                name=node_text(name),
                declaring_method=method,
                is_parameter=True,
                node=name,
                offset=self.unit.char_start(name),
            )
            self._register(name, binding)

    def _register(self, node, binding: Binding) -> None:
        self._declarations[node_key(node)] = binding

    # ------------------------------------------------------------- completion

    def _complete(self, binding: Binding, node: tree_sitter.Node) -> None:
        if isinstance(binding, TypeBinding):
            if binding.is_type_variable:
                bound = find_child_by_type(node, 'type_bound')
                if bound is not None:
                    binding.bounds = [self.resolve_type(each, node) for each in bound.named_children]
            elif binding.is_anonymous:
                self._complete_anonymous(binding, node)
            else:
                self._complete_supertypes(binding, node)
        elif isinstance(binding, MethodBinding):
            self._complete_method(binding, node)
        elif isinstance(binding, VariableBinding):
            binding.type = self._variable_type(node)

    def _complete_supertypes(self, binding: TypeBinding, node) -> None:
        superclass = find_child_by_type(node, 'superclass')
        if superclass is not None and superclass.named_children:
            binding.superclass = self.resolve_type(superclass.named_children[0], node)
        elif binding.type_kind is TypeKind.CLASS and binding.qualified_name != OBJECT_TYPE:
            binding.superclass = self.object_type
        elif binding.type_kind is TypeKind.ENUM:
            binding.superclass = self.external_type('java.lang.Enum')
        elif binding.type_kind is TypeKind.RECORD:
            binding.superclass = self.external_type('java.lang.Record')

        for clause in ('super_interfaces', 'extends_interfaces'):
            interfaces = find_child_by_type(node, clause)
            type_list = find_child_by_type(interfaces, 'type_list') if interfaces is not None else None
            if type_list is not None:
                binding.interfaces.extend(
                    self.resolve_type(each, node) for each in type_list.named_children
                )

    def _complete_anonymous(self, binding: TypeBinding, body) -> None:
        creation = body.parent
        if creation.type == 'enum_constant':
            binding.superclass = binding.declaring_class
            return

        instantiated = self.resolve_type(creation.child_by_field_name('type'), creation)
        if instantiated is None:
            binding.superclass = self.object_type
        elif instantiated.is_interface:
            binding.superclass = self.object_type
            binding.interfaces.append(instantiated)
        else:
            binding.superclass = instantiated

    def _complete_method(self, binding: MethodBinding, node) -> None:
        if binding.is_constructor:
            binding.return_type = self.primitive_type('void')
        else:
            binding.return_type = self.resolve_type(node.child_by_field_name('type'), node)

        parameters = node.child_by_field_name('parameters')
        if parameters is None:
            return
        for each in parameters.named_children:
            if each.type not in ('formal_parameter', 'spread_parameter'):
                continue
            binding.parameter_types.append(self._variable_type(each))
            binding.parameter_names.append(node_text(name_node_of(each)))
            if each.type == 'spread_parameter':
                binding.is_varargs = True

    def _variable_type(self, node) -> Optional[TypeBinding]:
        """Declared type of a declarator, parameter or other variable declaration."""
        extra = 0
        declaration = node
        if node.type == 'variable_declarator':
            extra = node_text(node.child_by_field_name('dimensions')).count('[')
            declaration = node.parent

        if declaration.type == 'catch_formal_parameter':
            catch_type = find_child_by_type(declaration, 'catch_type')
            type_node = catch_type.named_children[0] if catch_type is not None and catch_type.named_children else None
        elif declaration.type == 'spread_parameter':
            type_node = next((each for each in declaration.named_children
                              if each.type not in ('modifiers', 'variable_declarator')), None)
            extra += 1
        else:
            type_node = declaration.child_by_field_name('type')

        if node.type in ('formal_parameter', 'catch_formal_parameter', 'enhanced_for_statement', 'resource'):
            extra += node_text(node.child_by_field_name('dimensions')).count('[')

        return self.array_of(self.resolve_type(type_node, declaration), extra)

    # ---------------------------------------------------------------- helpers

    def _type_in_scope_of(self, node, name: str) -> Optional[TypeBinding]:
        """Type named ``name`` declared by, or directly visible in, one scope node."""
        binding = self._declarations.get(node_key(node))

        if isinstance(binding, (TypeBinding, MethodBinding)):
            for each in binding.type_parameters:
                if each.name == name:
                    return each
        if isinstance(binding, TypeBinding) and not binding.is_type_variable:
            if binding.name == name:
                return binding
            for each in binding.declared_types:
                if each.name == name:
                    return each

        if node.type in LOCAL_SCOPES:
            for child in node.named_children:
                if child.type in TYPE_DECLARATIONS and declared_name(child) == name:
                    return self._declarations.get(node_key(child))
        return None

    def primitive_type(self, name: str) -> TypeBinding:
        binding = self._derived.get(name)
        if binding is None:
            binding = TypeBinding(name=name, qualified_name=name, type_kind=TypeKind.PRIMITIVE)
            self._derived[name] = binding
        return binding

    def _wildcard(self, node, scope_node) -> TypeBinding:
        bounds = [self.resolve_type(each, scope_node) for each in node.named_children
                  if each.type not in ('annotation', 'marker_annotation')]
        return TypeBinding(
            name=node_text(node),
            qualified_name=node_text(node),
            type_kind=TypeKind.WILDCARD,
            bounds=[each for each in bounds if each is not None],
        )

    @staticmethod
    def _is_anonymous_body(node) -> bool:
        return (node.type == 'class_body' and node.parent is not None
                and node.parent.type in ANONYMOUS_OWNERS)


def _scoped_name(node) -> str:
    """Dotted name of a (possibly nested, possibly generic) scoped type identifier."""
    if node.type == 'type_identifier':
        return node_text(node)
    if node.type == 'generic_type':
        return _scoped_name(node.named_children[0])
    if node.type == 'scoped_type_identifier':
        parts = [each for each in node.named_children
                 if each.type in ('type_identifier', 'scoped_type_identifier', 'generic_type')]
        return '.'.join(_scoped_name(each) for each in parts)
    return node_text(node)
