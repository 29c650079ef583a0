"""
Parsed units.

A ParsedUnit is the result of parsing one Source under one ParseMode. It
owns the tree-sitter tree, the node standing for the unit (the root of the
mode), and the translation from parser byte offsets back to character
offsets of the Source.

Fragment modes parse the text inside a synthetic wrapper declaration.
Nodes of the wrapper are *synthetic*: they are clamped to the Source
bounds when located and are never reported by unit queries.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

import tree_sitter

from .constants import DEFAULT_NAME, ERROR_NODE, TYPE_DECLARATIONS
from .errors import AlreadyBoundError
from .locations.location import Location, create_location
from .modes import ParseMode
from .source import Source
from .utils.nodes import declared_name, error_nodes, is_same_node, node_text

if TYPE_CHECKING:
    from .context import Context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyntaxIssue:
    """A syntax problem reported by the parser, anchored in the source."""
    message: str
    location: Location

    def __str__(self) -> str:
        return f"{self.message} (line {self.location.start.line + 1})"


class ParsedUnit:
    """One Source parsed under one ParseMode."""

    def __init__(self, source: Source, tree: tree_sitter.Tree,
                 node: Optional[tree_sitter.Node], mode: ParseMode,
                 tolerate_errors: bool = True):
        self.source = source
        self.tree = tree
        self.node = node
        self.mode = mode
        self.tolerate_errors = tolerate_errors
        self._prefix_bytes = len(mode.prefix.encode('utf-8'))
        self._context: Optional['Context'] = None

    @property
    def prefix(self) -> str:
        return self.mode.prefix

    @property
    def context(self) -> Optional['Context']:
        return self._context

    @property
    def is_partial(self) -> bool:
        return self.mode.is_fragment

    @property
    def is_code_snippet(self) -> bool:
        return self.mode is ParseMode.STATEMENTS

    @property
    def is_empty_unit(self) -> bool:
        """True if the unit root holds no declaration or statement of its own."""
        if self.node is None:
            return True
        if self.mode is ParseMode.TYPE_BODY:
            body = self.node.child_by_field_name('body')
            return body is None or body.named_child_count == 0
        return self.node.named_child_count == 0

    def is_well_formed(self) -> bool:
        content_end = self._prefix_bytes + self.source.byte_length
        return is_well_formed_root(self.node, self.mode, self.tolerate_errors, content_end)

    def bind(self, context: 'Context') -> 'Context':
        """Attach this unit to a context; a unit binds at most once."""
        if self._context is not None:
            raise AlreadyBoundError(f"{self} is already bound to {self._context}")
        context.bind(self)
        return context

    def attach(self, context: 'Context') -> None:
        if self._context is not None and self._context is not context:
            raise AlreadyBoundError(f"{self} is already bound to {self._context}")
        self._context = context

    def char_offset(self, byte_offset: int) -> int:
        """Map a parser byte offset to a character offset of the Source, clamped to its bounds."""
        shifted = byte_offset - self._prefix_bytes
        shifted = min(max(shifted, 0), self.source.byte_length)
        return self.source.char_offset(shifted)

    def char_range(self, node: tree_sitter.Node) -> Tuple[int, int]:
        """Character range ``(start, end)`` of a node. A compilation unit root spans the whole source."""
        if self.mode is ParseMode.COMPILATION_UNIT and is_same_node(node, self.tree.root_node):
            return 0, len(self.source.content)
        return self.char_offset(node.start_byte), self.char_offset(node.end_byte)

    def char_start(self, node: tree_sitter.Node) -> int:
        return self.char_range(node)[0]

    def is_synthetic(self, node: tree_sitter.Node) -> bool:
        """True if the node belongs to the wrapper a fragment mode adds around the source."""
        if not self.mode.is_fragment:
            return False
        content_end = self._prefix_bytes + self.source.byte_length
        return node.start_byte < self._prefix_bytes or node.end_byte > content_end

    def locate(self, node: tree_sitter.Node) -> Location:
        start, end = self.char_range(node)
        return create_location(self.source, start, end)

    def syntax_issues(self) -> List[SyntaxIssue]:
        """SyntaxIssues for every ERROR and MISSING node of the tree."""
        issues = []
        for node in error_nodes(self.tree.root_node):
            location = self.locate(node)
            if node.is_missing:
                message = f"Missing '{node.type}'"
            else:
                snippet = location.text.strip().splitlines()[0][:40] if location.text.strip() else ''
                message = f"Syntax error at '{snippet}'" if snippet else "Syntax error at end of input"
            issues.append(SyntaxIssue(message=message, location=location))
        return issues

    def __repr__(self) -> str:
        root = self.node.type if self.node is not None else None
        return f"ParsedUnit(source={self.source.name}, mode={self.mode.value}, root={root})"


def locate_root(tree: tree_sitter.Tree, mode: ParseMode) -> Optional[tree_sitter.Node]:
    """
    Find the node standing for a unit of the given mode.

    Returns:
        The program node, the synthetic wrapper class, or the synthetic
        method body; None when the wrapper could not be recovered.
    """
    program = tree.root_node
    if mode is ParseMode.COMPILATION_UNIT:
        return program

    wrapper = _missing_declaration(program.children, 'class_declaration')
    if wrapper is None or mode is ParseMode.TYPE_BODY:
        return wrapper

    body = wrapper.child_by_field_name('body')
    if body is None:
        return None
    method = _missing_declaration(body.children, 'method_declaration')
    if method is None:
        return None
    return method.child_by_field_name('body')


def _missing_declaration(nodes, node_type: str) -> Optional[tree_sitter.Node]:
    for node in nodes:
        if node.type == node_type and declared_name(node) == DEFAULT_NAME:
            return node
    return None


def _tree_root(node: tree_sitter.Node) -> tree_sitter.Node:
    while node.parent is not None:
        node = node.parent
    return node


def is_well_formed_root(node: Optional[tree_sitter.Node], mode: ParseMode,
                        tolerate_errors: bool = True, content_end: Optional[int] = None) -> bool:
    """
    Decide whether a unit root fits its parse mode, without re-parsing.

    Args:
        node: Root node of the unit, as returned by ``locate_root``
        mode: The mode the unit was parsed with
        tolerate_errors: Accept statement fragments holding syntax errors
        content_end: Byte offset where the wrapped text ends; a fragment root
            must close after it, in the wrapper suffix

    Returns:
        True if the root is a genuine unit of the mode
    """
    if node is None:
        return False

    if mode is ParseMode.COMPILATION_UNIT:
        if node.type != 'program':
            return False
        children = node.children
        has_type = any(child.type in TYPE_DECLARATIONS for child in children)
        has_error = any(child.type == ERROR_NODE for child in children)
        return has_type and not has_error

    if mode is ParseMode.TYPE_BODY:
        return (node.type == 'class_declaration'
                and declared_name(node) == DEFAULT_NAME
                and _closes_after(node.child_by_field_name('body'), content_end)
                and not _tree_root(node).has_error)

    method = node.parent
    if node.type != 'block' or method is None or method.type != 'method_declaration':
        return False
    if node_text(method.child_by_field_name('name')) != DEFAULT_NAME:
        return False
    if not _closes_after(node, content_end):
        return False
    return tolerate_errors or not _tree_root(node).has_error


def _closes_after(node: Optional[tree_sitter.Node], content_end: Optional[int]) -> bool:
    # The wrapper closes in its suffix, after all of the wrapped text
    if node is None:
        return False
    return content_end is None or node.end_byte > content_end
