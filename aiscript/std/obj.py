from typing import Any, Dict, List

from aiscript.builtin_function import BuiltinFunction
from aiscript.types import ArrVal, BoolVal, ObjVal, StrVal

from .helpers import expect


def populate_obj_namespace() -> Dict[str, Any]:
    # Python dicts preserve insertion order, which is the key order here.
    def obj_keys(args: List[Any]) -> Any:
        obj = expect(args, 0, ObjVal, 'Obj:keys')
        return ArrVal([StrVal(k) for k in obj.entries])

    def obj_vals(args: List[Any]) -> Any:
        obj = expect(args, 0, ObjVal, 'Obj:vals')
        return ArrVal(list(obj.entries.values()))

    def obj_kvs(args: List[Any]) -> Any:
        obj = expect(args, 0, ObjVal, 'Obj:kvs')
        return ArrVal([ArrVal([StrVal(k), v]) for k, v in obj.entries.items()])

    def obj_has(args: List[Any]) -> Any:
        obj = expect(args, 0, ObjVal, 'Obj:has')
        key = expect(args, 1, StrVal, 'Obj:has')
        return BoolVal(key.value in obj.entries)

    return {
        'keys': BuiltinFunction('Obj:keys', 1, obj_keys),
        'vals': BuiltinFunction('Obj:vals', 1, obj_vals),
        'kvs': BuiltinFunction('Obj:kvs', 1, obj_kvs),
        'has': BuiltinFunction('Obj:has', 2, obj_has),
    }
