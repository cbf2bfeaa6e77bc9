from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class BuiltinFunction:
    """A host-registered function value.

    ``fn`` receives the list of evaluated argument values and returns a
    value. ``arity`` of None means the function validates its own
    arguments (optional or variadic parameters).
    """
    name: str
    arity: Optional[int]
    fn: Any

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
