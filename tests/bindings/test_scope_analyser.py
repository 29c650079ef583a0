"""Tests for scope analysis over parsed sources."""
import pytest

from code_units import ClassUnit, MethodUnit, ScopeFlags
from code_units.locations import locate_word

SRC = "\n".join([
    "public class Foo {",
    " private int code = 1; ",
    " public int exit(){",
    "   int x = Config.CODE;",
    "   return boo();",
    " }",
    " ",
    " public int boo(){",
    "   System.out.println();",
    "   return code;",
    " }",
    " ",
    " public static class Config {",
    "   static final int CODE = 1;",
    " }",
    "}",
])

SRC2 = "\n".join([
    "public class Foo {",
    " private int code = 1; ",
    " public int exit(){",
    "   int x = 1;",
    "   return x;",
    " }",
    " ",
    " public int boo(){",
    "   System.out.println();",
    "   return code;",
    " }",
    "}",
])

SRC3 = "\n".join([
    "public class Foo {",
    " private int code = 1; ",
    " public int exit(){",
    "   System.out.println(code);",
    "   int x = code;",
    "   System.out.println(x);",
    "   return x;",
    " }",
    "}",
])

SRC4 = "\n".join([
    "public class Foo {",
    " private int code = 1; ",
    " public int exit(){",
    "   int x = code;",
    "   return x;",
    " }",
    "}",
])

SHADOW = "\n".join([
    "public class Shadow {",
    "  private int value;",
    "  private int other;",
    "",
    "  int compute(int step) {",
    "    int value = step * 2;",
    "    int result = value + other;",
    "    return result;",
    "  }",
    "",
    "  int plain() {",
    "    return value;",
    "  }",
    "}",
])

HIERARCHY = "\n".join([
    "class Base {",
    "  private int secret;",
    "  protected int shared;",
    "  public int open;",
    "",
    "  int read() { return secret; }",
    "}",
    "",
    "public class Derived extends Base {",
    "  void run() {",
    "    int local = 0;",
    "  }",
    "}",
])

COUNTER = "\n".join([
    "class Counter {",
    "  int count;",
    "  Counter next;",
    "",
    "  int total() {",
    "    return next.count;",
    "  }",
    "}",
])

LIGHTS = "\n".join([
    "class Lights {",
    "  enum Color { RED, GREEN }",
    "",
    "  String name(Color color) {",
    "    switch (color) {",
    "      case RED:",
    "        return \"red\";",
    "      default:",
    "        return \"other\";",
    "    }",
    "  }",
    "}",
])

LOOPS = "\n".join([
    "import java.util.List;",
    "import java.util.function.Consumer;",
    "",
    "class Loops {",
    "  void run(List<String> items) {",
    "    for (int i = 0; i < items.size(); i++) {",
    "      Runnable task = null;",
    "      Consumer<String> printer = item -> System.out.println(item);",
    "    }",
    "    items.forEach(each -> System.out.println(each));",
    "  }",
    "}",
])

OUTER = "\n".join([
    "class Outer {",
    "  void run(int limit) {",
    "    int before = 1;",
    "    class Helper {",
    "      int twice() { return before * 2; }",
    "    }",
    "    int after = 2;",
    "  }",
    "}",
])

CIRCLE = "\n".join([
    "import static java.lang.Math.PI;",
    "",
    "class Circle {",
    "  double radius;",
    "",
    "  double area() { return PI * radius * radius; }",
    "}",
])


@pytest.fixture
def analyse(parse):
    """Parse a source and return its context with a scope analyser."""
    def _analyse(content, name="Foo"):
        context = parse(content, name=name)
        return context, context.scope_analyser()
    return _analyse


def names(bindings):
    return [each.name for each in bindings]


def method_location(context, name):
    return context.locate(MethodUnit(name))[0]


def test_local_declarations_of_method(analyse):
    context, analyser = analyse(SRC)

    found = analyser.used_local_declarations_in_scope(method_location(context, "exit"))

    assert {each.name for each in found} == {"exit", "boo", "x", "Config"}


def test_declarations_used_by_other_method(analyse):
    context, analyser = analyse(SRC)

    everything = analyser.used_declarations_in_scope(method_location(context, "boo"))
    local = analyser.used_local_declarations_in_scope(method_location(context, "boo"))

    assert {each.name for each in everything} == {"boo", "code"}
    assert local == everything


def test_local_declarations_are_not_empty(analyse):
    context, analyser = analyse(SRC2)

    found = analyser.used_local_declarations_in_scope(method_location(context, "exit"))

    assert {each.name for each in found} == {"exit", "x"}


def test_used_field_names_of_class(analyse):
    context, analyser = analyse(SRC2)

    assert analyser.used_field_names(context.locate(ClassUnit("Foo"))[0]) == {"code"}


def test_declarations_shared_between_versions(analyse):
    context3, analyser3 = analyse(SRC3)
    context4, analyser4 = analyse(SRC4)

    keys3 = {each.key for each in analyser3.used_declarations_in_scope(method_location(context3, "exit"))}
    keys4 = {each.key for each in analyser4.used_declarations_in_scope(method_location(context4, "exit"))}

    assert keys3 & keys4 == {"LFoo;.exit()"}
    assert analyser3.used_field_names(context3.locate_classes()[0]) == {"code"}


def test_locals_are_offered_nearest_first(analyse, node_at_word):
    context, analyser = analyse(SHADOW, name="Shadow")

    found = analyser.declarations_in_scope(node_at_word(context, "result", 1), ScopeFlags.VARIABLES)

    assert names(found) == ["result", "value", "step", "other"]
    assert not found[1].is_field


def test_local_hides_field(analyse, node_at_word):
    context, analyser = analyse(SHADOW, name="Shadow")
    shadow = context.bindings.types[0]
    value_field, other_field = shadow.declared_fields
    flags = ScopeFlags.VARIABLES | ScopeFlags.CHECK_VISIBILITY

    use = node_at_word(context, "value", 2)

    assert not analyser.is_element_declared_in_scope(value_field, use, flags)
    assert not analyser.is_element_declared_in_scope(value_field, use, ScopeFlags.VARIABLES)
    assert analyser.is_element_declared_in_scope(other_field, node_at_word(context, "other", 1), flags)
    assert analyser.is_element_declared_in_scope(value_field, node_at_word(context, "value", 3), flags)


def test_scope_query_by_location(analyse):
    context, analyser = analyse(SHADOW, name="Shadow")
    other_field = context.bindings.types[0].declared_fields[1]
    location = locate_word(context.source, "other")[1]

    assert analyser.is_element_declared_in_scope(other_field, location, ScopeFlags.VARIABLES)
    assert names(analyser.declarations_in_scope(location, ScopeFlags.VARIABLES)) == \
        ["result", "value", "step", "other"]


def test_resolve_prefers_local(analyse, node_at_word):
    context, analyser = analyse(SHADOW, name="Shadow")
    value_field = context.bindings.types[0].declared_fields[0]

    assert not analyser.resolve(node_at_word(context, "value", 2)).is_field
    assert analyser.resolve(node_at_word(context, "value", 3)) is value_field


def test_visibility_filters_inherited_members(analyse, node_at_word):
    context, analyser = analyse(HIERARCHY, name="Derived")
    local = node_at_word(context, "local")

    visible = analyser.declarations_in_scope(local, ScopeFlags.VARIABLES | ScopeFlags.CHECK_VISIBILITY)
    everything = analyser.declarations_in_scope(local, ScopeFlags.VARIABLES)

    assert names(visible) == ["shared", "open"]
    assert names(everything) == ["secret", "shared", "open"]


def test_private_inherited_member_is_not_visible(analyse, node_at_word):
    context, analyser = analyse(HIERARCHY, name="Derived")
    secret = context.bindings.types[0].declared_fields[0]
    local = node_at_word(context, "local")

    assert not analyser.is_element_declared_in_scope(
        secret, local, ScopeFlags.VARIABLES | ScopeFlags.CHECK_VISIBILITY)
    assert analyser.is_element_declared_in_scope(secret, local, ScopeFlags.VARIABLES)


def test_methods_and_types_in_scope(analyse, node_at_word):
    context, analyser = analyse(HIERARCHY, name="Derived")
    local = node_at_word(context, "local")

    methods = analyser.declarations_in_scope(local, ScopeFlags.METHODS | ScopeFlags.CHECK_VISIBILITY)
    types = analyser.declarations_in_scope(local, ScopeFlags.TYPES)

    assert names(methods) == ["run", "read"]
    assert names(types) == ["Derived", "Base"]


def test_qualified_name_uses_qualifier_type(analyse, node_at_word):
    context, analyser = analyse(COUNTER, name="Counter")
    member = node_at_word(context, "count", 1)

    assert names(analyser.declarations_in_scope(member, ScopeFlags.VARIABLES)) == ["count", "next"]
    assert analyser.resolve(member) is context.bindings.types[0].declared_fields[0]


def test_case_label_offers_enum_constants(analyse, node_at_word):
    context, analyser = analyse(LIGHTS, name="Lights")
    label = node_at_word(context, "RED", 1)
    color = context.bindings.types[0].declared_types[0]

    assert names(analyser.declarations_in_scope(label, ScopeFlags.VARIABLES)) == ["RED", "GREEN"]
    assert analyser.is_element_declared_in_scope(color.declared_fields[0], label, ScopeFlags.VARIABLES)


def test_lambda_and_loop_variables(analyse, node_at_word):
    context, analyser = analyse(LOOPS, name="Loops")

    in_loop = analyser.declarations_in_scope(node_at_word(context, "item", 1), ScopeFlags.VARIABLES)
    after_loop = analyser.declarations_in_scope(node_at_word(context, "each", 1), ScopeFlags.VARIABLES)

    assert names(in_loop) == ["printer", "item", "task", "i", "items"]
    assert names(after_loop) == ["each", "items"]


def test_local_type_sees_outer_locals_declared_before_it(analyse, node_at_word):
    context, analyser = analyse(OUTER, name="Outer")

    found = analyser.declarations_in_scope(node_at_word(context, "before", 1), ScopeFlags.VARIABLES)

    assert names(found) == ["before", "limit"]


def test_all_bindings_of_class(analyse):
    context, analyser = analyse(SRC)

    found = analyser.all_bindings(context.locate(ClassUnit("Foo"))[0])

    assert {each.name for each in found} == {"code", "exit", "boo", "Foo", "Config"}


def test_static_imports_count_as_used_fields(analyse):
    context, analyser = analyse(CIRCLE, name="Circle")

    assert analyser.used_field_names(context.locate_classes()[0]) == {"radius", "PI"}


def test_type_of_qualified_constant(analyse):
    context, analyser = analyse(SRC)
    access = context.node_at(locate_word(context.source, "Config.CODE")[0])

    assert access.type == 'field_access'
    assert analyser.type_of_expression(access).name == "int"


def test_resolve_method_invocation(analyse, node_at_word):
    context, analyser = analyse(SRC)
    boo = context.bindings.types[0].declared_methods[1]

    assert analyser.resolve(node_at_word(context, "boo", 0)) is boo


def test_untyped_qualifier_yields_nothing(analyse, node_at_word):
    context, analyser = analyse(SRC)

    println = node_at_word(context, "println")

    assert analyser.declarations_in_scope(println, ScopeFlags.METHODS) == []
    assert analyser.resolve(println) is None


def test_type_body_fragment(analyse, node_at_word):
    context, analyser = analyse("private int code = 1;\npublic int exit() {\n  return code;\n}")

    found = analyser.declarations_in_scope(node_at_word(context, "code", 1), ScopeFlags.VARIABLES)

    assert names(found) == ["code"]


def test_statement_fragment(analyse, node_at_word):
    context, analyser = analyse("int a = 1;\nint b = a + 1;\na++;")

    found = analyser.declarations_in_scope(node_at_word(context, "a", 1), ScopeFlags.VARIABLES)

    assert names(found) == ["b", "a"]
