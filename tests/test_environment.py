import pytest

from aiscript.environment import Environment, Namespace
from aiscript.errors import ImmutableBindingError, UndefinedVariableError
from aiscript.types import NumVal, StrVal


def test_lookup_walks_parent_chain():
    root = Environment()
    root.define('a', NumVal(1))
    inner = root.child().child()
    assert inner.lookup('a') == NumVal(1)


def test_lookup_undefined():
    with pytest.raises(UndefinedVariableError) as exc:
        Environment().lookup('missing')
    assert 'missing' in exc.value.message


def test_inner_definition_shadows_outer():
    root = Environment()
    root.define('a', NumVal(1))
    inner = root.child()
    inner.define('a', NumVal(2))
    assert inner.lookup('a') == NumVal(2)
    assert root.lookup('a') == NumVal(1)


def test_assign_updates_the_defining_frame():
    root = Environment()
    root.define('n', NumVal(0), mutable=True)
    inner = root.child()
    inner.assign('n', NumVal(5))
    assert root.lookup('n') == NumVal(5)
    assert 'n' not in inner.bindings


def test_assign_immutable_fails():
    env = Environment()
    env.define('c', NumVal(0))
    with pytest.raises(ImmutableBindingError):
        env.assign('c', NumVal(1))
    assert env.lookup('c') == NumVal(0)


def test_assign_undefined_fails():
    with pytest.raises(UndefinedVariableError):
        Environment().assign('x', NumVal(1))


def test_two_frames_share_one_binding_cell():
    root = Environment()
    root.define('shared', NumVal(0), mutable=True)
    left = root.child()
    right = root.child()
    left.assign('shared', NumVal(7))
    assert right.lookup('shared') == NumVal(7)
    assert left.find('shared') is right.find('shared')


def test_namespaces():
    root = Environment()
    ns_env = root.child()
    ns_env.define('greeting', StrVal('hi'))
    root.define_namespace(Namespace('Foo', ns_env))
    inner = root.child()
    assert inner.lookup_member('Foo', 'greeting') == StrVal('hi')
    with pytest.raises(UndefinedVariableError):
        inner.lookup_member('Foo', 'nope')
    with pytest.raises(UndefinedVariableError):
        inner.lookup_member('Bar', 'greeting')


def test_namespace_members_do_not_leak_into_bindings():
    root = Environment()
    ns_env = root.child()
    ns_env.define('x', NumVal(1))
    root.define_namespace(Namespace('Foo', ns_env))
    with pytest.raises(UndefinedVariableError):
        root.lookup('x')


def test_host_internal_names_are_not_bindings():
    env = Environment()
    for name in ('constructor', '__class__', 'parent', 'bindings'):
        with pytest.raises(UndefinedVariableError):
            env.lookup(name)
