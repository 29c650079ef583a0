"""Shared fixtures for the code units tests."""
from pathlib import Path as _TestPath
import sys

import pytest

ROOT = _TestPath(__file__).resolve().parents[1]
SRC_PATH = ROOT / 'src'
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from code_units import JavaParser, Source
from code_units.locations import locate_word

FOO = "public class Foo {\n public int exit(){\n   return 1;\n }\n}"


@pytest.fixture(scope="session")
def parser():
    return JavaParser()


@pytest.fixture
def foo_source():
    return Source.from_content(FOO, name="Foo")


@pytest.fixture
def foo_context(parser, foo_source):
    return parser.parse_java(foo_source)


@pytest.fixture
def parse(parser):
    """Parse a snippet into a bound context."""
    def _parse(content, name="Foo"):
        return parser.parse_java(Source.from_content(content, name=name))
    return _parse


@pytest.fixture
def node_at_word():
    """The innermost node spanning the n-th whole-word occurrence of a word."""
    def _node_at_word(context, word, occurrence=0):
        location = locate_word(context.source, word)[occurrence]
        return context.node_at(location)
    return _node_at_word
