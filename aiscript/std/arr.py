from typing import Any, Callable, Dict, List

from aiscript.builtin_function import BuiltinFunction
from aiscript.errors import TypeMismatchError
from aiscript.types import (
    ArrVal, BoolVal, FunctionValue, NullVal, NumVal, StrVal, equal_values, type_name,
)

from .helpers import arg, expect

FUNCTION = (FunctionValue, BuiltinFunction)


def populate_arr_namespace(call: Callable) -> Dict[str, Any]:
    """Members of ``Arr``. ``call(fn, args)`` invokes a script function."""

    def arr_len(args: List[Any]) -> Any:
        arr = expect(args, 0, ArrVal, 'Arr:len')
        return NumVal(len(arr.items))

    def arr_push(args: List[Any]) -> Any:
        arr = expect(args, 0, ArrVal, 'Arr:push')
        arr.items.append(arg(args, 1))
        return arr

    def arr_pop(args: List[Any]) -> Any:
        arr = expect(args, 0, ArrVal, 'Arr:pop')
        if not arr.items:
            return NullVal()
        return arr.items.pop()

    def arr_incl(args: List[Any]) -> Any:
        arr = expect(args, 0, ArrVal, 'Arr:incl')
        needle = arg(args, 1)
        return BoolVal(any(equal_values(item, needle) for item in arr.items))

    def arr_reverse(args: List[Any]) -> Any:
        arr = expect(args, 0, ArrVal, 'Arr:reverse')
        return ArrVal(list(reversed(arr.items)))

    def arr_concat(args: List[Any]) -> Any:
        a = expect(args, 0, ArrVal, 'Arr:concat')
        b = expect(args, 1, ArrVal, 'Arr:concat')
        return ArrVal(a.items + b.items)

    def arr_join(args: List[Any]) -> Any:
        arr = expect(args, 0, ArrVal, 'Arr:join')
        sep = ''
        if len(args) > 1 and not isinstance(args[1], NullVal):
            sep = expect(args, 1, StrVal, 'Arr:join').value
        parts = []
        for item in arr.items:
            if not isinstance(item, StrVal):
                raise TypeMismatchError(f'Arr:join expects an array of str, found {type_name(item)}')
            parts.append(item.value)
        return StrVal(sep.join(parts))

    def arr_map(args: List[Any]) -> Any:
        arr = expect(args, 0, ArrVal, 'Arr:map')
        fn = expect(args, 1, FUNCTION, 'Arr:map')
        return ArrVal([call(fn, [item]) for item in list(arr.items)])

    def arr_filter(args: List[Any]) -> Any:
        arr = expect(args, 0, ArrVal, 'Arr:filter')
        fn = expect(args, 1, FUNCTION, 'Arr:filter')
        kept = []
        for item in list(arr.items):
            res = call(fn, [item])
            if not isinstance(res, BoolVal):
                raise TypeMismatchError(f'Arr:filter predicate must return bool, got {type_name(res)}')
            if res.value:
                kept.append(item)
        return ArrVal(kept)

    def arr_reduce(args: List[Any]) -> Any:
        arr = expect(args, 0, ArrVal, 'Arr:reduce')
        fn = expect(args, 1, FUNCTION, 'Arr:reduce')
        items = list(arr.items)
        if len(args) > 2:
            acc = args[2]
        else:
            if not items:
                raise TypeMismatchError('Arr:reduce of an empty array needs an initial value')
            acc, items = items[0], items[1:]
        for item in items:
            acc = call(fn, [acc, item])
        return acc

    return {
        'len': BuiltinFunction('Arr:len', 1, arr_len),
        'push': BuiltinFunction('Arr:push', 2, arr_push),
        'pop': BuiltinFunction('Arr:pop', 1, arr_pop),
        'incl': BuiltinFunction('Arr:incl', 2, arr_incl),
        'reverse': BuiltinFunction('Arr:reverse', 1, arr_reverse),
        'concat': BuiltinFunction('Arr:concat', 2, arr_concat),
        'join': BuiltinFunction('Arr:join', None, arr_join),
        'map': BuiltinFunction('Arr:map', 2, arr_map),
        'filter': BuiltinFunction('Arr:filter', 2, arr_filter),
        'reduce': BuiltinFunction('Arr:reduce', None, arr_reduce),
    }
