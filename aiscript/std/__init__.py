"""Native standard library namespaces.

Each submodule builds the members of one namespace (``Arr``, ``Obj``,
``Str``, ``Core``, ``Math``) out of `BuiltinFunction` values.
Higher-order members receive ``call``, the interpreter's own
function-call entry point, so a callback passed from a script runs
exactly like a call written in the script.
"""
from typing import Any, Callable, Dict

from aiscript.environment import Environment, Namespace

from .arr import populate_arr_namespace
from .core import populate_core_namespace, make_print
from .math import populate_math_namespace
from .obj import populate_obj_namespace
from .text import populate_str_namespace


def make_namespace(name: str, members: Dict[str, Any], parent: Environment) -> Namespace:
    """Build a namespace whose frame holds ``members`` as immutable bindings."""
    ns_env = parent.child()
    for member, value in members.items():
        ns_env.define(member, value)
    return Namespace(name, ns_env)


def populate_std_environment(env: Environment, call: Callable, out: Callable) -> None:
    """Register every standard namespace and the global ``print`` in ``env``."""
    namespaces = {
        'Core': populate_core_namespace(),
        'Arr': populate_arr_namespace(call),
        'Obj': populate_obj_namespace(),
        'Str': populate_str_namespace(),
        'Math': populate_math_namespace(),
    }
    for name, members in namespaces.items():
        env.define_namespace(make_namespace(name, members, env))
    env.define('print', make_print(out))
