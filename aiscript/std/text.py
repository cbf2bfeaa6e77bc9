"""The ``Str`` namespace.

Lengths and positions count user-perceived characters (extended
grapheme clusters), so ``"👍🏽"`` is one character even though it is two
code points.
"""
from typing import Any, Dict, List

import regex

from aiscript.builtin_function import BuiltinFunction
from aiscript.errors import IndexOutOfRangeError
from aiscript.types import ArrVal, BoolVal, NumVal, StrVal, format_number

from .helpers import expect

_GRAPHEME = regex.compile(r'\X')


def graphemes(s: str) -> List[str]:
    return _GRAPHEME.findall(s)


def populate_str_namespace() -> Dict[str, Any]:
    def str_len(args: List[Any]) -> Any:
        s = expect(args, 0, StrVal, 'Str:len')
        return NumVal(len(graphemes(s.value)))

    def str_pick(args: List[Any]) -> Any:
        s = expect(args, 0, StrVal, 'Str:pick')
        i = expect(args, 1, NumVal, 'Str:pick')
        chars = graphemes(s.value)
        if not i.value.is_integer() or not 1 <= i.value <= len(chars):
            raise IndexOutOfRangeError(
                f'Str:pick index {format_number(i.value)} out of range 1..{len(chars)}'
            )
        return StrVal(chars[int(i.value) - 1])

    def str_split(args: List[Any]) -> Any:
        s = expect(args, 0, StrVal, 'Str:split')
        return ArrVal([StrVal(c) for c in graphemes(s.value)])

    def str_incl(args: List[Any]) -> Any:
        s = expect(args, 0, StrVal, 'Str:incl')
        sub = expect(args, 1, StrVal, 'Str:incl')
        return BoolVal(sub.value in s.value)

    return {
        'len': BuiltinFunction('Str:len', 1, str_len),
        'pick': BuiltinFunction('Str:pick', 2, str_pick),
        'split': BuiltinFunction('Str:split', 1, str_split),
        'incl': BuiltinFunction('Str:incl', 2, str_incl),
        'lf': StrVal('\n'),
    }
