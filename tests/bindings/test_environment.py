"""Tests for the binding environment built from a parsed unit."""
import pytest

from code_units import ClassUnit, MethodUnit
from code_units.bindings import ImportDeclaration, Modifier, TypeKind, method_signature

SHAPES = "\n".join([
    "package com.acme;",
    "",
    "import java.util.List;",
    "import java.util.*;",
    "import static java.lang.Math.max;",
    "",
    "public class Shapes<T extends Number> {",
    "  private int count;",
    "  protected List<String> items;",
    "  public static final String NAME = \"shapes\";",
    "",
    "  public int size(int[] extra, String... names) {",
    "    for (String name : names) {",
    "      count++;",
    "    }",
    "    return count;",
    "  }",
    "",
    "  interface Visitor {",
    "    void visit(Shapes<?> shapes);",
    "  }",
    "",
    "  enum Kind { ROUND, SQUARE }",
    "",
    "  static class Circle extends Shapes<Integer> implements Visitor {",
    "    public void visit(Shapes<?> shapes) {}",
    "  }",
    "}",
])


@pytest.fixture
def context(parse):
    return parse(SHAPES, name="Shapes")


@pytest.fixture
def environment(context):
    return context.bindings


@pytest.fixture
def shapes(environment):
    return environment.types[0]


def member_type(owner, name):
    return next(each for each in owner.declared_types if each.name == name)


def test_header_is_read(environment):
    assert environment.package == "com.acme"
    assert environment.imports == [
        ImportDeclaration("java.util.List"),
        ImportDeclaration("java.util", is_on_demand=True),
        ImportDeclaration("java.lang.Math.max", is_static=True),
    ]
    assert environment.imports[0].simple_name == "List"


def test_top_level_type(shapes):
    assert shapes.qualified_name == "com.acme.Shapes"
    assert shapes.key == "Lcom/acme/Shapes;"
    assert shapes.is_public
    assert shapes.superclass.qualified_name == "java.lang.Object"
    assert [each.name for each in shapes.declared_types] == ["Visitor", "Kind", "Circle"]
    assert member_type(shapes, "Visitor").qualified_name == "com.acme.Shapes.Visitor"


def test_type_parameter_erasure(shapes):
    parameter = shapes.type_parameters[0]

    assert parameter.name == "T"
    assert parameter.is_type_variable
    assert parameter.erasure_name == "java.lang.Number"


def test_fields(shapes):
    count, items, name = shapes.declared_fields

    assert count.name == "count"
    assert count.modifiers == Modifier.PRIVATE
    assert count.type.name == "int"
    assert count.key == "Lcom/acme/Shapes;.count"
    assert items.is_protected
    assert items.type.is_parameterized
    assert items.type.generic_type.qualified_name == "java.util.List"
    assert items.type.type_arguments[0].qualified_name == "java.lang.String"
    assert name.is_static and name.is_public
    assert name.type.qualified_name == "java.lang.String"


def test_method_signature_erases_parameter_types(shapes):
    size = shapes.declared_methods[0]

    assert method_signature(size) == "Msize(int[],java.lang.String[])"
    assert size.is_varargs
    assert size.parameter_names == ["extra", "names"]
    assert size.return_type.name == "int"


def test_interface_members(shapes):
    visitor = member_type(shapes, "Visitor")
    visit = visitor.declared_methods[0]

    assert visitor.is_interface
    assert visit.modifiers == Modifier.PUBLIC | Modifier.ABSTRACT


def test_supertypes_of_member_class(shapes):
    circle = member_type(shapes, "Circle")

    assert circle.is_static
    assert circle.superclass.is_parameterized
    assert circle.superclass.generic_type is shapes
    assert circle.superclass.type_arguments[0].qualified_name == "java.lang.Integer"
    assert circle.interfaces == [member_type(shapes, "Visitor")]


def test_enum_constants(shapes):
    kind = member_type(shapes, "Kind")

    assert kind.is_enum
    assert kind.superclass.qualified_name == "java.lang.Enum"
    assert [each.name for each in kind.declared_fields] == ["ROUND", "SQUARE"]
    assert all(each.is_enum_constant and each.type is kind for each in kind.declared_fields)


def test_local_and_parameter_bindings(context, environment, shapes, node_at_word):
    size = shapes.declared_methods[0]

    loop_variable = environment.binding_of(node_at_word(context, "name"))
    parameter = environment.binding_of(node_at_word(context, "extra"))

    assert loop_variable.name == "name"
    assert not loop_variable.is_field
    assert loop_variable.declaring_method is size
    assert loop_variable.type.qualified_name == "java.lang.String"
    assert parameter.is_parameter
    assert parameter.type.is_array


def test_binding_of_declaration_nodes(context, environment, shapes):
    method_node = context.locate(MethodUnit("size"))[0].node
    circle_node = context.locate(ClassUnit("Circle"))[0].node

    assert environment.binding_of(method_node) is shapes.declared_methods[0]
    assert environment.binding_of(method_node.child_by_field_name('name')) is shapes.declared_methods[0]
    assert environment.binding_of(circle_node) is member_type(shapes, "Circle")


def test_enclosing_declarations(context, environment, shapes, node_at_word):
    node = node_at_word(context, "count", 1)

    assert environment.enclosing_type(node) is shapes
    assert environment.enclosing_method(node) is shapes.declared_methods[0]
    assert environment.parent_type_context(node) is shapes


def test_type_header_has_no_parent_type_context(context, environment, node_at_word):
    bound = node_at_word(context, "Number")

    assert environment.parent_type_context(bound) is None


def test_derived_types_are_shared(environment):
    int_type = environment.primitive_type("int")

    assert environment.primitive_type("int") is int_type
    assert environment.array_of(int_type, 2) is environment.array_of(int_type, 2)
    assert environment.array_of(int_type, 0) is int_type
    assert environment.array_of(environment.array_of(int_type, 1), 1).dimensions == 2


def test_external_types_are_recovered(environment):
    recovered = environment.external_type("java.util.Map")

    assert recovered.recovered
    assert recovered.name == "Map"
    assert recovered.package == "java.util"
    assert environment.external_type("java.util.Map") is recovered
    assert environment.object_type.qualified_name == "java.lang.Object"
    assert environment.find_type("com.acme.Shapes.Kind").type_kind is TypeKind.ENUM
