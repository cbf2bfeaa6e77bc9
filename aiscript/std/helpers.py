from typing import Any, List

from aiscript.errors import TypeMismatchError
from aiscript.types import NullVal, TYPE_NAMES, type_name


def arg(args: List[Any], index: int) -> Any:
    """Positional argument, Null when the caller passed fewer."""
    return args[index] if index < len(args) else NullVal()


def expect(args: List[Any], index: int, cls: Any, fn_name: str) -> Any:
    """Return ``args[index]`` if it is an instance of ``cls``.

    Raises `TypeMismatchError` naming the function, the expected kind and
    the kind actually received.
    """
    value = arg(args, index)
    if not isinstance(value, cls):
        classes = cls if isinstance(cls, tuple) else (cls,)
        expected = ' or '.join(dict.fromkeys(TYPE_NAMES[c] for c in classes))
        raise TypeMismatchError(
            f'{fn_name} expects {expected} as argument {index + 1}, got {type_name(value)}'
        )
    return value
