"""Tests for Java access rules over hand-built bindings."""
from code_units.bindings import (
    MethodBinding,
    Modifier,
    TypeBinding,
    TypeKind,
    VariableBinding,
    is_visible,
)


def make_type(name, package='com.acme', modifiers=Modifier.PUBLIC, **kwargs):
    return TypeBinding(name=name, qualified_name=f"{package}.{name}", package=package,
                       modifiers=modifiers, **kwargs)


def make_field(owner, name, modifiers=Modifier.NONE):
    return VariableBinding(name=name, modifiers=modifiers, declaring_class=owner, is_field=True)


def test_public_member_is_visible_everywhere():
    owner = make_type('Owner')
    stranger = make_type('Stranger', package='org.other')

    assert is_visible(make_field(owner, 'open', Modifier.PUBLIC), stranger)
    assert is_visible(make_field(owner, 'open', Modifier.PUBLIC), None)


def test_private_member_is_visible_in_declaring_and_nested_types():
    owner = make_type('Owner')
    nested = make_type('Nested', declaring_class=owner)
    neighbour = make_type('Neighbour')
    secret = make_field(owner, 'secret', Modifier.PRIVATE)

    assert is_visible(secret, owner)
    assert is_visible(secret, nested)
    assert not is_visible(secret, neighbour)


def test_private_member_of_nested_type_is_scoped_to_it():
    owner = make_type('Owner')
    nested = make_type('Nested', declaring_class=owner)
    secret = make_field(nested, 'secret', Modifier.PRIVATE)

    assert is_visible(secret, nested)
    assert not is_visible(secret, make_type('Other'))


def test_package_private_member_depends_on_package():
    owner = make_type('Owner')
    member = make_field(owner, 'internal')

    assert is_visible(member, make_type('Neighbour'))
    assert not is_visible(member, make_type('Stranger', package='org.other'))


def test_protected_member_is_visible_from_subclass_in_another_package():
    owner = make_type('Owner')
    subclass = make_type('Child', package='org.other', superclass=owner)
    stranger = make_type('Stranger', package='org.other')
    member = MethodBinding(name='hook', modifiers=Modifier.PROTECTED, declaring_class=owner)

    assert is_visible(member, subclass)
    assert is_visible(member, make_type('Neighbour'))
    assert not is_visible(member, stranger)


def test_protected_member_is_visible_from_type_nested_in_subclass():
    owner = make_type('Owner')
    subclass = make_type('Child', package='org.other', superclass=owner)
    nested = make_type('Helper', package='org.other', declaring_class=subclass)
    member = make_field(owner, 'state', Modifier.PROTECTED)

    assert is_visible(member, nested)


def test_interface_members_are_always_visible():
    contract = make_type('Contract', type_kind=TypeKind.INTERFACE)
    method = MethodBinding(name='apply', declaring_class=contract)

    assert is_visible(method, make_type('Stranger', package='org.other'))


def test_locals_and_parameters_are_always_visible():
    assert is_visible(VariableBinding(name='x'), None)
    assert is_visible(VariableBinding(name='arg', is_parameter=True), make_type('Any'))


def test_missing_context_hides_non_public_members():
    owner = make_type('Owner')

    assert not is_visible(make_field(owner, 'internal'), None)
    assert not is_visible(make_field(owner, 'secret', Modifier.PRIVATE), None)


def test_member_type_visibility_uses_enclosing_type():
    owner = make_type('Owner')
    hidden = make_type('Hidden', modifiers=Modifier.PRIVATE, declaring_class=owner)

    assert is_visible(hidden, owner)
    assert not is_visible(hidden, make_type('Neighbour'))


def test_parameterized_type_uses_modifiers_of_its_declaration():
    box = make_type('Box')
    hidden = make_type('Hidden', modifiers=Modifier.PRIVATE, declaring_class=box)
    stranger = make_type('Stranger', package='org.other')

    assert is_visible(TypeBinding(name='Box', generic_type=box), stranger)
    assert not is_visible(TypeBinding(name='Hidden', generic_type=hidden), stranger)
