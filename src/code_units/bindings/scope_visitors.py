"""
Visitors feeding binding requests from a method body.

ScopeVisitor walks from a body declaration towards a position and offers
the local declarations visible there, nearest first. Statements are
walked backwards, so a declaration that hides another one is offered
before it.

UsedDeclarationsVisitor offers the declarations and references that
appear after a position inside one block.
"""

import logging
from typing import List, Optional

import tree_sitter

from ..constants import (
    BLOCKS, FIELD_DECLARATIONS, METHOD_DECLARATIONS, TYPE_DECLARATIONS
)
from ..utils.nodes import find_ancestor, find_child_by_type, is_same_node, node_text
from ..visitors.base import TreeVisitor, accept
from .requests import BindingRequest
from .scopes import ScopeFlags

logger = logging.getLogger(__name__)

LOCAL_VARIABLES = frozenset({
    'variable_declarator',
    'formal_parameter',
    'spread_parameter',
    'catch_formal_parameter',
    'resource',
})


class ScopeVisitor(TreeVisitor):
    """
    Offers the local declarations in scope at a position.

    A node is in scope when it contains the position. Inside such a node,
    only declarations starting before the position are offered.

    Args:
        analyser: ScopeAnalyser providing bindings and expression types
        position: Character offset the scope is evaluated at
        flags: ScopeFlags; VARIABLES and TYPES select what is offered
        request: The request receiving candidates
    """

    def __init__(self, analyser, position: int, flags: int, request: BindingRequest):
        super().__init__()
        self.analyser = analyser
        self.environment = analyser.environment
        self.unit = analyser.environment.unit
        self.position = position
        self.flags = ScopeFlags(flags)
        self.request = request

    @property
    def is_break_statement(self) -> bool:
        """True if the request asked to stop."""
        return self.done

    def visit(self, node: tree_sitter.Node) -> bool:
        if self.done or not node.is_named:
            return False

        node_type = node.type
        handler = getattr(self, f"_visit_{node_type}", None)
        if handler is not None:
            return handler(node)

        if node_type in METHOD_DECLARATIONS:
            return self._visit_method(node)
        if node_type in TYPE_DECLARATIONS:
            return self._visit_type(node)
        if node_type in BLOCKS:
            return self._visit_block(node)
        if node_type in LOCAL_VARIABLES:
            return self._visit_variable(node)
        if node_type in FIELD_DECLARATIONS:
            return False

        return self._inside(node)

    # ----------------------------------------------------------------- nodes

    def _visit_method(self, node) -> bool:
        if self._inside(node):
            body = node.child_by_field_name('body')
            if body is not None:
                accept(body, self)

            parameters = node.child_by_field_name('parameters')
            if parameters is not None:
                self._walk_backwards(parameters.named_children)

            type_parameters = find_child_by_type(node, 'type_parameters')
            if type_parameters is not None:
                self._walk_backwards(type_parameters.named_children)
        return False

    def _visit_block(self, node) -> bool:
        if self._inside(node):
            self._walk_backwards(node.named_children)
        return False

    def _visit_switch_block(self, node) -> bool:
        return self._visit_block(node)

    def _visit_switch_block_statement_group(self, node) -> bool:
        self._walk_backwards(node.named_children)
        return False

    def _visit_local_variable_declaration(self, node) -> bool:
        self._walk_backwards(node.children_by_field_name('declarator'))
        return False

    def _visit_variable(self, node) -> bool:
        if self.flags.variables and self._starts_before(node):
            self._offer(self.environment.binding_of(node))
        return not self.done

    def _visit_type_parameter(self, node) -> bool:
        if self.flags.types and self._starts_before(node):
            self._offer(self.environment.binding_of(node))
        return False

    def _visit_type(self, node) -> bool:
        if self.flags.types and self.unit.char_range(node)[1] < self.position:
            self._offer(self.environment.binding_of(node))
            return False
        return not self.done and self._inside(node)

    def _visit_catch_clause(self, node) -> bool:
        if self._inside(node):
            body = node.child_by_field_name('body')
            if body is not None:
                accept(body, self)
            for each in node.named_children:
                if each.type == 'catch_formal_parameter' and not self.done:
                    accept(each, self)
        return False

    def _visit_for_statement(self, node) -> bool:
        if self._inside(node):
            body = node.child_by_field_name('body')
            if body is not None:
                accept(body, self)
            self._walk_backwards(node.children_by_field_name('init'))
        return False

    def _visit_enhanced_for_statement(self, node) -> bool:
        if self._inside(node):
            body = node.child_by_field_name('body')
            if body is not None:
                accept(body, self)
            value = node.child_by_field_name('value')
            if value is not None and not self.done:
                accept(value, self)
            name = node.child_by_field_name('name')
            if self.flags.variables and not self.done and self._starts_before(name):
                self._offer(self.environment.binding_of(node))
        return False

    def _visit_try_with_resources_statement(self, node) -> bool:
        if self._inside(node):
            resources = None
            for each in node.named_children:
                if each.type == 'resource_specification':
                    resources = each
                elif not self.done:
                    accept(each, self)
            if resources is not None:
                self._walk_backwards(resources.named_children)
        return False

    def _visit_lambda_expression(self, node) -> bool:
        if self._inside(node):
            body = node.child_by_field_name('body')
            if body is not None:
                accept(body, self)

            parameters = node.child_by_field_name('parameters')
            if parameters is not None and self.flags.variables:
                names = [parameters] if parameters.type == 'identifier' else parameters.named_children
                for each in reversed(names):
                    if self.done:
                        break
                    if each.type == 'identifier':
                        self._offer(self.environment.binding_of(each))
                    else:
                        accept(each, self)
        return False

    def _visit_switch_label(self, node) -> bool:
        # Enum constants are used unqualified in case labels
        if not self.flags.variables or not self._inside(node):
            return False

        switch = find_ancestor(node, ('switch_expression', 'switch_statement'))
        if switch is None:
            return False

        switch_type = self.analyser.type_of_expression(switch.child_by_field_name('condition'))
        if switch_type is not None and switch_type.is_enum:
            for constant in enum_constants(switch_type):
                if self._offer(constant):
                    break
        return False

    # --------------------------------------------------------------- helpers

    def _inside(self, node: tree_sitter.Node) -> bool:
        start, end = self.unit.char_range(node)
        return start <= self.position < end

    def _starts_before(self, node: Optional[tree_sitter.Node]) -> bool:
        return node is not None and self.unit.char_start(node) < self.position

    def _walk_backwards(self, nodes: List[tree_sitter.Node]) -> None:
        for each in reversed(nodes):
            if self.done:
                return
            if each.is_named and self._starts_before(each):
                accept(each, self)

    def _offer(self, binding) -> bool:
        if self.request.accept(binding):
            self.done = True
        return self.done


class UsedDeclarationsVisitor(TreeVisitor):
    """
    Offers declarations made, and members used, after a position.

    Local variables declared after the position, methods invoked after
    it, names returned after it and local types declared after it are
    offered. A qualifier such as ``Config`` in ``Config.CODE`` is offered
    as a type. Anonymous class bodies are not entered.

    Args:
        analyser: ScopeAnalyser resolving names and invocations
        position: Character offset declarations must follow
        flags: ScopeFlags selecting what is offered
        request: The request receiving candidates
    """

    def __init__(self, analyser, position: int, flags: int, request: BindingRequest):
        super().__init__()
        self.analyser = analyser
        self.environment = analyser.environment
        self.unit = analyser.environment.unit
        self.position = position
        self.flags = ScopeFlags(flags)
        self.request = request

    def visit(self, node: tree_sitter.Node) -> bool:
        if self.done or not node.is_named:
            return False

        node_type = node.type
        after = self.position < self.unit.char_start(node)

        if node_type == 'variable_declarator':
            if after and self.flags.types:
                self._offer_qualifier_type(node.child_by_field_name('value'))
            if after and self.flags.variables and not self.done:
                self._offer(self.environment.binding_of(node))
            return False

        if node_type in ('formal_parameter', 'catch_formal_parameter', 'resource'):
            if after and self.flags.variables:
                self._offer(self.environment.binding_of(node))
            return False

        if node_type == 'enhanced_for_statement':
            if after and self.flags.variables:
                self._offer(self.environment.binding_of(node))
            return not self.done

        if node_type == 'method_invocation':
            if after and self.flags.methods:
                self._offer(self.analyser.resolve_method(node))
            return False

        if node_type == 'return_statement':
            expression = node.named_children[0] if node.named_children else None
            if after and self.flags.variables:
                if expression is not None and expression.type == 'identifier':
                    self._offer(self.analyser.resolve(expression))
            elif after and self.flags.methods:
                if expression is not None and expression.type == 'method_invocation':
                    self._offer(self.analyser.resolve_method(expression))
            return False

        if node_type == 'class_body' and self.environment.binding_of(node) is not None:
            return False

        if node_type in TYPE_DECLARATIONS:
            if after and self.flags.types:
                self._offer(self.environment.binding_of(node))
            return False

        return True

    def _offer_qualifier_type(self, value: Optional[tree_sitter.Node]) -> None:
        # An upper-case member name after a qualifier: the qualifier names a class
        if value is None or value.type != 'field_access':
            return

        member = node_text(value.child_by_field_name('field'))
        qualifier = value.child_by_field_name('object')
        if member[:1].isupper() and qualifier is not None:
            self._offer(self.analyser.resolve(qualifier))

    def _offer(self, binding) -> bool:
        if self.request.accept(binding):
            self.done = True
        return self.done


def enum_constants(enum_type) -> list:
    """Enum constants declared by an enum type, in declaration order."""
    return [each for each in enum_type.type_declaration.declared_fields if each.is_enum_constant]


def is_switch_label_name(node: tree_sitter.Node) -> bool:
    """True if ``node`` is the expression of a ``case`` label."""
    parent = node.parent
    return parent is not None and parent.type == 'switch_label' and any(
        is_same_node(each, node) for each in parent.named_children
    )
