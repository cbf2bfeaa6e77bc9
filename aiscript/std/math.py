from typing import Any, Callable, Dict, List
import math

from aiscript.builtin_function import BuiltinFunction
from aiscript.types import NumVal

from .helpers import expect


def _unary(name: str, op: Callable[[float], float]) -> BuiltinFunction:
    def fn(args: List[Any]) -> Any:
        n = expect(args, 0, NumVal, name)
        return NumVal(op(n.value))
    return BuiltinFunction(name, 1, fn)


def _integral(op: Callable[[float], float]) -> Callable[[float], float]:
    # Infinities and NaN have no integer neighbour; they come back unchanged.
    def fn(x: float) -> float:
        if not math.isfinite(x):
            return x
        return op(x)
    return fn


def _round_half_up(x: float) -> float:
    return math.floor(x + 0.5)


def populate_math_namespace() -> Dict[str, Any]:
    return {
        'floor': _unary('Math:floor', _integral(math.floor)),
        'ceil': _unary('Math:ceil', _integral(math.ceil)),
        'round': _unary('Math:round', _integral(_round_half_up)),
        'abs': _unary('Math:abs', abs),
        'pi': NumVal(math.pi),
    }
