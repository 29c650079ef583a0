"""
Java parser front end.

Wraps tree-sitter's Java grammar. A source is tried against unit matchers
in the configured order (compilation unit, type body, statements by
default); the first mode yielding a well-formed unit is bound to the
returned Context.
"""

import logging
from typing import List, Optional, Union

import tree_sitter
from tree_sitter_java import language

from .config import ParserConfiguration
from .context import Context
from .errors import AlreadyBoundError, MalformedUnitError, ParseError
from .modes import ParseMode
from .source import Source
from .unit import ParsedUnit, locate_root

logger = logging.getLogger(__name__)


class UnitMatcher:
    """Parses a source under one mode and accepts the result if it is well-formed."""

    def __init__(self, mode: ParseMode):
        self.mode = mode

    def match(self, parser: 'JavaParser', source: Source) -> Optional[ParsedUnit]:
        unit = parser.parse(source, self.mode)
        if unit.is_well_formed():
            return unit

        logger.debug(f"{source.name} is not a well-formed {self.mode.value}")
        return None

    def __repr__(self) -> str:
        return f"UnitMatcher({self.mode.value})"


class JavaParser:
    """Parses Java sources into bound contexts."""

    def __init__(self, configuration: Optional[ParserConfiguration] = None):
        self.configuration = configuration or ParserConfiguration()
        self.java_language = tree_sitter.Language(language())
        self._parser = tree_sitter.Parser(self.java_language)
        self.matchers: List[UnitMatcher] = [
            UnitMatcher(mode) for mode in self.configuration.parse_modes
        ]

    def parse(self, source: Union[Source, Context], mode: ParseMode) -> ParsedUnit:
        """
        Parse a source under one mode, without binding it.

        Args:
            source: The Source, or a Context holding it
            mode: Grammar entry point to use

        Returns:
            ParsedUnit whose root may or may not be well-formed

        Raises:
            ParseError: if the source has no content
        """
        if isinstance(source, Context):
            source = source.source

        if not source.content.strip():
            raise ParseError(f"{source.name} has no content to parse")

        text = f"{mode.prefix}{source.content}{mode.suffix}"
        tree = self._parser.parse(text.encode('utf8'))
        node = locate_root(tree, mode)

        logger.debug(f"Parsed {source.name} as {mode.value}: root={node.type if node else None}")
        return ParsedUnit(
            source=source,
            tree=tree,
            node=node,
            mode=mode,
            tolerate_errors=self.configuration.tolerate_statement_errors,
        )

    def parse_java(self, source: Union[Source, Context]) -> Context:
        """
        Parse a source and bind the first well-formed unit to a context.

        Args:
            source: A Source, or an unbound Context to bind

        Returns:
            The bound Context

        Raises:
            ParseError: if the source has no content
            AlreadyBoundError: if the given context is already bound
            MalformedUnitError: if no configured mode yields a well-formed unit
        """
        context = source if isinstance(source, Context) else Context(source)
        if context.is_bound:
            raise AlreadyBoundError(f"{context!r} is already bound")

        for index, matcher in enumerate(self.matchers):
            unit = matcher.match(self, context.source)
            if unit is None:
                continue

            if index > 0:
                logger.warning(f"{context.source.name} parsed as {matcher.mode.value}")
            return context.bind(unit)

        modes = ", ".join(matcher.mode.value for matcher in self.matchers)
        raise MalformedUnitError(f"{context.source.name} is not a well-formed {modes}")

    def __repr__(self) -> str:
        return f"JavaParser(modes={[m.mode.value for m in self.matchers]})"
