from typing import Any, Callable, Dict, List

from aiscript.builtin_function import BuiltinFunction
from aiscript.types import BoolVal, NullVal, StrVal, equal_values, to_string, type_name

from .helpers import arg, expect


def make_print(out: Callable) -> BuiltinFunction:
    """The global ``print`` function: same effect as the ``<:`` statement."""
    def std_print(args: List[Any]) -> Any:
        out(arg(args, 0))
        return NullVal()

    return BuiltinFunction('print', 1, std_print)


def populate_core_namespace() -> Dict[str, Any]:
    def core_type(args: List[Any]) -> Any:
        return StrVal(type_name(arg(args, 0)))

    def core_not(args: List[Any]) -> Any:
        value = expect(args, 0, BoolVal, 'Core:not')
        return BoolVal(not value.value)

    def core_eq(args: List[Any]) -> Any:
        return BoolVal(equal_values(arg(args, 0), arg(args, 1)))

    def core_neq(args: List[Any]) -> Any:
        return BoolVal(not equal_values(arg(args, 0), arg(args, 1)))

    def core_to_str(args: List[Any]) -> Any:
        return StrVal(to_string(arg(args, 0)))

    return {
        'type': BuiltinFunction('Core:type', 1, core_type),
        'not': BuiltinFunction('Core:not', 1, core_not),
        'eq': BuiltinFunction('Core:eq', 2, core_eq),
        'neq': BuiltinFunction('Core:neq', 2, core_neq),
        'to_str': BuiltinFunction('Core:to_str', 1, core_to_str),
    }
