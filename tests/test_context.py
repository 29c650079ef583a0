"""Tests for bound contexts and their unit queries."""
import pytest

from code_units import (
    AlreadyBoundError,
    Context,
    MalformedUnitError,
    MethodUnit,
    ParseMode,
    Source,
    SyntaxErrors,
    UnboundContextError,
    VarUnit,
    bind_context,
)
from code_units.locations import create_source_location

NESTED = "\n".join([
    "public class Outer {",
    "  static class Inner {",
    "    void run() {}",
    "  }",
    "}",
])


def test_context_cannot_be_bound_twice(parser, foo_context, foo_source):
    unit = parser.parse(foo_source, ParseMode.COMPILATION_UNIT)

    with pytest.raises(AlreadyBoundError):
        foo_context.bind(unit)


def test_unit_cannot_be_bound_twice(parser, foo_source):
    unit = parser.parse(foo_source, ParseMode.COMPILATION_UNIT)
    unit.bind(Context(foo_source))

    with pytest.raises(AlreadyBoundError):
        unit.bind(Context(foo_source))


def test_unit_cannot_join_two_contexts(parser, foo_source):
    unit = parser.parse(foo_source, ParseMode.COMPILATION_UNIT)
    bind_context(Context(foo_source), unit)

    with pytest.raises(AlreadyBoundError):
        bind_context(Context(foo_source), unit)


@pytest.mark.parametrize("content, mode", [
    ("int x = ;; }{", ParseMode.COMPILATION_UNIT),
    ('"', ParseMode.STATEMENTS),
])
def test_malformed_unit_is_not_bound(parser, content, mode):
    source = Source.from_content(content)
    context = Context(source)
    unit = parser.parse(source, mode)

    with pytest.raises(MalformedUnitError) as excinfo:
        bind_context(context, unit)

    assert excinfo.value.mode is mode
    assert not context.is_bound
    assert unit.context is None
    with pytest.raises(UnboundContextError):
        _ = context.scope


def test_unbound_context_refuses_queries(foo_source):
    context = Context.create(foo_source)

    assert not context.is_bound
    with pytest.raises(UnboundContextError):
        context.locate_classes()
    with pytest.raises(UnboundContextError):
        _ = context.scope


def test_scope_spans_whole_compilation_unit(foo_context, foo_source):
    assert foo_context.scope == create_source_location(foo_source)
    assert foo_context.source_content == foo_source.content


def test_basic_unit_counts(foo_context):
    assert len(foo_context.locate_classes()) == 1
    assert len(foo_context.locate_fields()) == 0
    assert len(foo_context.locate_methods()) == 1
    assert len(foo_context.locate(MethodUnit("exit"))) == 1
    assert foo_context.locate(MethodUnit("enter")) == []


def test_nested_classes_are_found(parse):
    context = parse(NESTED, name="Outer")

    classes = context.locate_classes()

    assert [str(each) for each in classes] == ["Type(Outer)", "Type(Inner)"]


def test_locate_unit_finds_identifier(foo_context):
    found = foo_context.locate_unit(31, 35)

    assert len(found) == 1
    assert found[0].node.type == 'identifier'
    assert found[0].text == "exit"


def test_well_formed_context_has_no_problems(foo_context):
    assert not foo_context.is_malformed()
    assert foo_context.ensure_well_formed() is foo_context


def test_malformed_statements_report_syntax_problems(parse):
    context = parse("int x = 1\nreturn x;")

    assert context.mode is ParseMode.STATEMENTS
    assert context.is_malformed()
    assert context.syntax_problems

    with pytest.raises(SyntaxErrors) as excinfo:
        context.ensure_well_formed()
    assert "error[s]" in str(excinfo.value)


def test_type_body_fragment_hides_wrapper(parse):
    context = parse("public int exit(){\n  return 1;\n}")

    assert len(context.locate_methods()) == 1
    assert context.locate_classes() == []
    assert context.scope.start.offset == 0
    assert context.scope.end.offset == len(context.source_content)


def test_statement_fragment_locations_are_relative_to_source(parse):
    context = parse("int x = 1;\nx++;")

    variables = context.locate(VarUnit("x"))

    assert len(variables) == 1
    assert variables[0].start.offset == 0
    assert variables[0].text == "int x = 1;"


def test_bindings_are_built_once(foo_context):
    assert foo_context.bindings is foo_context.bindings
