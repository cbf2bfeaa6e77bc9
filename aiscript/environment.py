from typing import Any, Dict, Optional
from aiscript.errors import UndefinedVariableError, ImmutableBindingError


class Binding:
    """A storage cell for one value.

    Frames hold bindings by reference, so every closure that captured a
    frame sees writes made through any other closure sharing it.
    """
    __slots__ = ('value', 'mutable')

    def __init__(self, value: Any, mutable: bool = False):
        self.value = value
        self.mutable = mutable

    def __repr__(self) -> str:
        return f"Binding({self.value!r}, mutable={self.mutable})"


class Namespace:
    """A named symbol table addressed as ``Name:member``.

    Members are the bindings of the namespace's own frame, which is also
    the frame its member functions close over.
    """
    def __init__(self, name: str, env: 'Environment'):
        self.name = name
        self.env = env

    def get(self, member: str) -> Any:
        binding = self.env.bindings.get(member)
        if binding is None:
            raise UndefinedVariableError(f'undefined namespace member {self.name}:{member}')
        return binding.value

    def __repr__(self) -> str:
        return f"<namespace {self.name}>"


class Environment:
    """One lexical scope frame; frames chain outward through ``parent``."""
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.bindings: Dict[str, Binding] = {}
        self.namespaces: Dict[str, Namespace] = {}

    def child(self) -> 'Environment':
        return Environment(parent=self)

    def define(self, name: str, value: Any, mutable: bool = False):
        # A second definition in the same frame replaces the first binding;
        # closures holding the old cell keep seeing the old value.
        self.bindings[name] = Binding(value, mutable)

    def find(self, name: str) -> Optional[Binding]:
        env = self
        while env is not None:
            binding = env.bindings.get(name)
            if binding is not None:
                return binding
            env = env.parent
        return None

    def lookup(self, name: str) -> Any:
        binding = self.find(name)
        if binding is None:
            raise UndefinedVariableError(f'undefined variable {name}')
        return binding.value

    def assign(self, name: str, value: Any):
        binding = self.find(name)
        if binding is None:
            raise UndefinedVariableError(f'undefined variable {name}')
        if not binding.mutable:
            raise ImmutableBindingError(f'cannot assign to immutable variable {name}')
        binding.value = value

    def define_namespace(self, namespace: Namespace):
        self.namespaces[namespace.name] = namespace

    def lookup_namespace(self, name: str) -> Namespace:
        env = self
        while env is not None:
            namespace = env.namespaces.get(name)
            if namespace is not None:
                return namespace
            env = env.parent
        raise UndefinedVariableError(f'undefined namespace {name}')

    def lookup_member(self, namespace: str, member: str) -> Any:
        return self.lookup_namespace(namespace).get(member)
