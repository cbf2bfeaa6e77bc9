"""Runtime value model for AiScript.

Every value the interpreter manipulates is an instance of one of the
classes below. The set is closed: arithmetic, equality, indexing and
calls all dispatch on the concrete class and treat anything else as an
internal error. Numbers are always stored as Python floats so that the
language has a single double-precision numeric type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional
import json
import math

from .builtin_function import BuiltinFunction

if TYPE_CHECKING:
    from .ast import Block
    from .environment import Environment


@dataclass
class NumVal:
    value: float

    def __post_init__(self):
        self.value = float(self.value)


@dataclass
class StrVal:
    value: str


@dataclass
class BoolVal:
    value: bool


@dataclass
class NullVal:
    """The single null value, spelled ``_`` in source."""


@dataclass
class ArrVal:
    """A mutable array. Positions are 1-based at the language level."""
    items: List[Any] = field(default_factory=list)


@dataclass
class ObjVal:
    """A string-keyed object. Python dicts keep insertion order."""
    entries: Dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class FunctionValue:
    """A user-defined closure.

    ``env`` is the environment in effect where the function was created.
    Calls create their frame as a child of it, never of the caller's
    environment.
    """
    params: List[str]
    body: 'Block'
    env: 'Environment'
    name: Optional[str] = None

    def __repr__(self) -> str:
        return f"<function {self.name or '@'}>"


TYPE_NAMES = {
    NumVal: 'num',
    StrVal: 'str',
    BoolVal: 'bool',
    NullVal: 'null',
    ArrVal: 'arr',
    ObjVal: 'obj',
    FunctionValue: 'fn',
    BuiltinFunction: 'fn',
}


def type_name(value: Any) -> str:
    """Return the AiScript tag name of a runtime value."""
    try:
        return TYPE_NAMES[type(value)]
    except KeyError:
        raise TypeError(f"not an AiScript value: {value!r}") from None


def is_function(value: Any) -> bool:
    return isinstance(value, (FunctionValue, BuiltinFunction))


def format_number(n: float) -> str:
    if math.isnan(n):
        return 'NaN'
    if math.isinf(n):
        return 'Infinity' if n > 0 else '-Infinity'
    if n.is_integer() and abs(n) < 1e21:
        return str(int(n))
    return repr(n)


def to_string(value: Any) -> str:
    """Convert a value to its canonical string form.

    This is the conversion used by template literals and by the default
    output sink. Strings convert to themselves; strings nested inside
    arrays and objects are shown quoted.
    """
    if isinstance(value, StrVal):
        return value.value
    return _repr_value(value)


def _repr_value(value: Any) -> str:
    if isinstance(value, NumVal):
        return format_number(value.value)
    if isinstance(value, StrVal):
        return json.dumps(value.value, ensure_ascii=False)
    if isinstance(value, BoolVal):
        return 'yes' if value.value else 'no'
    if isinstance(value, NullVal):
        return '_'
    if isinstance(value, ArrVal):
        return '[' + ', '.join(_repr_value(item) for item in value.items) + ']'
    if isinstance(value, ObjVal):
        entries = ', '.join(f"{k}: {_repr_value(v)}" for k, v in value.entries.items())
        return '{' + entries + '}'
    if isinstance(value, FunctionValue):
        return f"@{value.name or ''}({', '.join(value.params)})"
    if isinstance(value, BuiltinFunction):
        return f"@{value.name}(native)"
    raise TypeError(f"not an AiScript value: {value!r}")


def equal_values(a: Any, b: Any) -> bool:
    """Equality used by ``=``, ``!=`` and match arms.

    Primitives compare by value. Arrays, objects and functions compare
    by identity, so two separately built arrays with the same contents
    are different values.
    """
    if isinstance(a, NumVal) and isinstance(b, NumVal):
        return a.value == b.value
    if isinstance(a, StrVal) and isinstance(b, StrVal):
        return a.value == b.value
    if isinstance(a, BoolVal) and isinstance(b, BoolVal):
        return a.value == b.value
    if isinstance(a, NullVal) and isinstance(b, NullVal):
        return True
    if isinstance(a, (ArrVal, ObjVal, FunctionValue, BuiltinFunction)):
        return a is b
    return False


def from_python(value: Any) -> Any:
    """Wrap a plain Python value (as supplied by a host) into a value.

    Values that are already AiScript values pass through unchanged.
    """
    if type(value) in TYPE_NAMES:
        return value
    if value is None:
        return NullVal()
    if isinstance(value, bool):
        return BoolVal(value)
    if isinstance(value, (int, float)):
        return NumVal(value)
    if isinstance(value, str):
        return StrVal(value)
    if isinstance(value, (list, tuple)):
        return ArrVal([from_python(v) for v in value])
    if isinstance(value, dict):
        return ObjVal({str(k): from_python(v) for k, v in value.items()})
    raise TypeError(f"cannot convert {type(value).__name__} to an AiScript value")
