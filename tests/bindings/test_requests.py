"""Tests for binding requests, driven with hand-built bindings."""
import pytest

from code_units import ALL_DECLARATIONS, BindingError, ScopeFlags
from code_units.bindings import (
    BindingRequestBySignature,
    BindingRequestByValue,
    MethodBinding,
    Modifier,
    TypeBinding,
    VariableBinding,
    feed,
    method_signature,
    signature_of,
)

STRING = TypeBinding(name='String', qualified_name='java.lang.String', package='java.lang',
                     modifiers=Modifier.PUBLIC)
INT = TypeBinding(name='int')


def make_type(name, package='com.acme', modifiers=Modifier.PUBLIC, **kwargs):
    return TypeBinding(name=name, qualified_name=f"{package}.{name}", package=package,
                       modifiers=modifiers, **kwargs)


@pytest.fixture
def foo():
    return make_type('Foo')


@pytest.fixture
def code_field(foo):
    field = VariableBinding(name='code', modifiers=Modifier.PRIVATE, type=INT,
                            declaring_class=foo, is_field=True)
    foo.declared_fields.append(field)
    return field


def test_signatures():
    foo = make_type('Foo')

    assert signature_of(MethodBinding(name='exit', declaring_class=foo)) == "Mexit()"
    assert signature_of(MethodBinding(name='run', parameter_types=[STRING])) == "Mrun(java.lang.String)"
    assert signature_of(VariableBinding(name='code')) == "Vcode"
    assert signature_of(foo) == "TFoo"
    assert signature_of(None) is None


def test_method_signature_requires_a_method():
    with pytest.raises(BindingError):
        method_signature(VariableBinding(name='code'))


def test_by_signature_keeps_first_of_each_signature():
    first = VariableBinding(name='x', offset=10)
    shadowed = VariableBinding(name='x', offset=2)
    other = MethodBinding(name='x')
    request = BindingRequestBySignature()

    for binding in (first, None, shadowed, other):
        assert request.accept(binding) is False

    requested = request.requested_bindings()
    assert requested == [first, other]
    assert requested[0] is first


def test_by_signature_filters_invisible_bindings(foo):
    outsider = make_type('Outsider', package='org.other')
    run = MethodBinding(name='run', modifiers=Modifier.PUBLIC, declaring_class=foo)
    secret = VariableBinding(name='secret', modifiers=Modifier.PRIVATE, declaring_class=foo, is_field=True)
    internal = VariableBinding(name='internal', declaring_class=foo, is_field=True)
    shared = VariableBinding(name='shared', modifiers=Modifier.PUBLIC, declaring_class=foo, is_field=True)
    local = VariableBinding(name='local')

    request = BindingRequestBySignature(outsider, ScopeFlags.VARIABLES | ScopeFlags.CHECK_VISIBILITY)
    feed(request, [run, secret, internal, shared, local])

    assert request.requested_bindings() == [run, shared, local]


def test_by_signature_without_visibility_check_keeps_everything(foo):
    outsider = make_type('Outsider', package='org.other')
    secret = VariableBinding(name='secret', modifiers=Modifier.PRIVATE, declaring_class=foo, is_field=True)

    request = BindingRequestBySignature(outsider, ScopeFlags.VARIABLES)
    request.accept(secret)

    assert request.requested_bindings() == [secret]


def test_by_value_finds_identical_binding(foo, code_field):
    request = BindingRequestByValue(code_field, foo, ScopeFlags.VARIABLES | ScopeFlags.CHECK_VISIBILITY)

    assert request.accept(code_field) is True
    assert request.found
    assert request.visible


def test_by_value_finds_parameterized_form_of_generic_type():
    box = make_type('Box')
    box_of_string = TypeBinding(name='Box', generic_type=box, type_arguments=[STRING])
    request = BindingRequestByValue(box, None, ScopeFlags.TYPES | ScopeFlags.CHECK_VISIBILITY)

    assert request.accept(box_of_string) is True
    assert request.found
    assert request.visible


def test_local_with_same_name_hides_field(foo, code_field):
    local = VariableBinding(name='code', type=INT, offset=40)
    request = BindingRequestByValue(code_field, foo, ScopeFlags.VARIABLES | ScopeFlags.CHECK_VISIBILITY)

    assert request.accept(local) is True
    assert not request.found
    assert not request.visible


def test_hiding_without_visibility_check_keeps_visible(foo, code_field):
    local = VariableBinding(name='code', type=INT, offset=40)
    request = BindingRequestByValue(code_field, foo, ScopeFlags.VARIABLES)

    assert request.accept(local) is True
    assert not request.found
    assert request.visible


def test_by_value_ignores_other_kinds(foo, code_field):
    method = MethodBinding(name='code', declaring_class=foo)
    request = BindingRequestByValue(code_field, foo, ALL_DECLARATIONS)

    assert request.accept(method) is False
    assert request.accept(None) is False
    assert not request.found


def test_by_value_stays_found(foo, code_field):
    request = BindingRequestByValue(code_field, foo)
    request.accept(code_field)

    assert request.accept(VariableBinding(name='code')) is True
    assert request.found


def test_private_field_from_another_type_is_found_but_invisible(code_field):
    bar = make_type('Bar')
    request = BindingRequestByValue(code_field, bar, ScopeFlags.VARIABLES | ScopeFlags.CHECK_VISIBILITY)

    assert request.accept(code_field) is True
    assert request.found
    assert not request.visible


def test_feed_stops_at_first_stop(foo, code_field):
    offered = []

    def candidates():
        for binding in (VariableBinding(name='x'), code_field, VariableBinding(name='y')):
            offered.append(binding.name)
            yield binding

    assert feed(BindingRequestByValue(code_field, foo), candidates()) is True
    assert offered == ['x', 'code']


def test_scope_flags():
    flags = ScopeFlags.METHODS | ScopeFlags.CHECK_VISIBILITY

    assert flags.methods
    assert flags.check_visibility
    assert not flags.variables
    assert not flags.types
