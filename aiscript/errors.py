class AiScriptError(Exception):
    """Exception type used to propagate AiScript runtime errors.

    Every error carries a ``kind`` naming its place in the error taxonomy
    and a human readable ``message``. A failed run raises exactly one of
    these; there is no implicit recovery inside the interpreter.
    """
    kind = 'RuntimeError'

    def __init__(self, message: str):
        super().__init__(f"{self.kind}: {message}")
        self.message = message


class UndefinedVariableError(AiScriptError):
    kind = 'UndefinedVariable'


class TypeMismatchError(AiScriptError):
    kind = 'TypeError'


class ImmutableBindingError(TypeMismatchError):
    """Raised when assigning to a binding declared with ``#``."""


class DivisionByZeroError(AiScriptError):
    kind = 'DivisionByZero'


class IndexOutOfRangeError(AiScriptError):
    kind = 'IndexError'


class NotCallableError(AiScriptError):
    kind = 'NotCallable'


class LoopRangeError(AiScriptError):
    kind = 'RangeError'


class AiScriptSyntaxError(AiScriptError):
    kind = 'SyntaxError'
