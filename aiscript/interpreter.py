"""Interpreter for the AiScript language.

The interpreter walks the AST produced by :mod:`aiscript.parser` (or by
any host front end that builds the same nodes). Every node evaluates to
a value; statements such as declarations evaluate to Null.

Early return (``<<``) is not an exception. Evaluating a ``Return`` node
produces a `ReturnSignal`, every composite node hands a signal coming
out of a child straight back to its own caller, and `call_function`
turns it into the call's result. Runtime errors, on the other hand, are
raised as `AiScriptError` subclasses and abort the run.
"""

from __future__ import annotations

import math
import sys
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .ast import (
    Program, Literal, ArrayLit, ObjectLit, Template, Ident, VarDecl, Assign,
    MemberAccess, Index, NamespaceAccess, Call, Block, FunctionDecl,
    FunctionExpr, NamespaceDecl, If, Match, For, ForOf, Return, Print,
    BinaryOp, Node,
)
from .builtin_function import BuiltinFunction
from .environment import Environment, Namespace
from .errors import (
    DivisionByZeroError, IndexOutOfRangeError, LoopRangeError,
    NotCallableError, TypeMismatchError,
)
from .parser import parse_program
from .std import populate_std_environment
from .types import (
    NumVal, StrVal, BoolVal, NullVal, ArrVal, ObjVal, FunctionValue,
    equal_values, format_number, from_python, to_string, type_name,
)


class ReturnSignal:
    """The value of a ``<<`` travelling to the nearest function call."""
    __slots__ = ('value',)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self) -> str:
        return f"ReturnSignal({self.value!r})"


Result = Union[Any, ReturnSignal]

# Each script-level call nests several Python frames.
RECURSION_LIMIT = 10000


def _default_out(value: Any) -> None:
    print(to_string(value))


class Interpreter:
    """Core interpreter that executes AiScript AST.

    ``variables`` are predefined global bindings supplied by the host
    (AiScript values, or plain Python values which are converted).
    ``opts['out']`` is the sink called with each printed value; by
    default values are written to stdout.
    """
    def __init__(self, variables: Optional[Dict[str, Any]] = None,
                 opts: Optional[Dict[str, Any]] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.opts = dict(opts or {})
        self.out: Callable[[Any], None] = self.opts.get('out') or _default_out
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = None
        self._trace_started = False
        self.global_env = Environment()
        populate_std_environment(self.global_env, self.call_function, self.emit)
        for name, value in (variables or {}).items():
            self.global_env.define(name, from_python(value))

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def open_trace(self):
        """Open the trace file; later runs append to the first run's trace."""
        if self.debug_level > 0 and self.debug_fp is None:
            mode = 'a' if self._trace_started else 'w'
            self.debug_fp = open(self.debug_file, mode, encoding='utf-8')
            self._trace_started = True

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Run ``program`` to completion and return its final value.

        A ``<<`` reaching the top level stops the program; its value is
        the result.
        """
        if env is None:
            env = self.global_env
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)
        self.open_trace()
        self.debug(f"run program ({len(program.body)} statements)")
        try:
            result = self.execute_block(program.body, env)
            if isinstance(result, ReturnSignal):
                self.debug("top-level return")
                result = result.value
            self.debug(f"finished -> {to_string(result)}")
            return result
        finally:
            self.close()

    async def exec(self, program: Program, env: Optional[Environment] = None) -> Any:
        """Awaitable form of `run` for hosts driven by an event loop.

        Evaluation itself is synchronous; the coroutine completes once the
        program has run to the end or raised.
        """
        return self.run(program, env)

    def emit(self, value: Any):
        if self.debug_level >= 1:
            self.debug(f"out {to_string(value)}")
        self.out(value)

    # Declarations
    def hoist(self, statements: List[Node], env: Environment):
        """Register function and namespace declarations before execution.

        Only declaration shapes are registered here; no expression is
        evaluated. Namespace constants are initialised right after, once
        every sibling function and namespace is known.
        """
        declared: List[Tuple[NamespaceDecl, Namespace]] = []
        for stmt in statements:
            if isinstance(stmt, FunctionDecl):
                self.declare_function(stmt, env)
            elif isinstance(stmt, NamespaceDecl):
                declared.append((stmt, self.declare_namespace(stmt, env)))
        for stmt, namespace in declared:
            self.init_namespace(stmt, namespace)

    def declare_function(self, node: FunctionDecl, env: Environment):
        env.define(node.name, FunctionValue(node.params, node.body, env, node.name))
        if self.debug_level >= 2:
            self.debug(f"declare function {node.name}")

    def declare_namespace(self, node: NamespaceDecl, env: Environment) -> Namespace:
        ns_env = env.child()
        for member in node.members:
            if isinstance(member, FunctionDecl):
                self.declare_function(member, ns_env)
        namespace = Namespace(node.name, ns_env)
        env.define_namespace(namespace)
        if self.debug_level >= 2:
            self.debug(f"declare namespace {node.name}")
        return namespace

    def init_namespace(self, node: NamespaceDecl, namespace: Namespace):
        for member in node.members:
            if isinstance(member, VarDecl):
                value = self.evaluate(member.expr, namespace.env)
                if isinstance(value, ReturnSignal):
                    value = value.value
                namespace.env.define(member.name, value, member.mutable)
                if self.debug_level >= 2:
                    self.debug(f"declare {node.name}:{member.name} = {to_string(value)}")

    # Statements
    def execute_block(self, statements: List[Node], env: Environment) -> Result:
        self.hoist(statements, env)
        result: Result = NullVal()
        for stmt in statements:
            result = self.evaluate(stmt, env)
            # propagate return signals
            if isinstance(result, ReturnSignal):
                return result
        return result

    def evaluate(self, node: Node, env: Environment) -> Result:
        if isinstance(node, Literal):
            return self.evaluate_literal(node)
        if isinstance(node, Ident):
            return env.lookup(node.name)
        if isinstance(node, Call):
            func = self.evaluate(node.func, env)
            if isinstance(func, ReturnSignal):
                return func
            args = self.evaluate_all(node.args, env)
            if isinstance(args, ReturnSignal):
                return args
            return self.call_function(func, args)
        if isinstance(node, BinaryOp):
            return self.evaluate_binary(node, env)
        if isinstance(node, Block):
            return self.execute_block(node.statements, env.child())
        if isinstance(node, VarDecl):
            value = self.evaluate(node.expr, env)
            if isinstance(value, ReturnSignal):
                return value
            env.define(node.name, value, node.mutable)
            if self.debug_level >= 2:
                kind = 'mutable' if node.mutable else 'immutable'
                self.debug(f"declare {kind} {node.name} = {to_string(value)}")
            return NullVal()
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            if isinstance(value, ReturnSignal):
                return value
            env.assign(node.name, value)
            return NullVal()
        if isinstance(node, Print):
            value = self.evaluate(node.expr, env)
            if isinstance(value, ReturnSignal):
                return value
            self.emit(value)
            return NullVal()
        if isinstance(node, Return):
            value = self.evaluate(node.value, env)
            if isinstance(value, ReturnSignal):
                return value
            return ReturnSignal(value)
        if isinstance(node, If):
            for branch in node.branches:
                cond = self.evaluate(branch.condition, env)
                if isinstance(cond, ReturnSignal):
                    return cond
                if not isinstance(cond, BoolVal):
                    raise TypeMismatchError(f'condition must be bool, got {type_name(cond)}')
                if self.debug_level >= 3:
                    self.debug(f"if condition -> {to_string(cond)}")
                if cond.value:
                    return self.evaluate(branch.body, env)
            if node.else_body is not None:
                return self.evaluate(node.else_body, env)
            return NullVal()
        if isinstance(node, Match):
            subject = self.evaluate(node.subject, env)
            if isinstance(subject, ReturnSignal):
                return subject
            for arm in node.arms:
                pattern = self.evaluate(arm.pattern, env)
                if isinstance(pattern, ReturnSignal):
                    return pattern
                if equal_values(subject, pattern):
                    return self.evaluate(arm.body, env)
            if node.default is not None:
                return self.evaluate(node.default, env)
            return NullVal()
        if isinstance(node, For):
            return self.evaluate_for(node, env)
        if isinstance(node, ForOf):
            collection = self.evaluate(node.collection, env)
            if isinstance(collection, ReturnSignal):
                return collection
            if not isinstance(collection, ArrVal):
                raise TypeMismatchError(f'~~ expects an array, got {type_name(collection)}')
            results = []
            for item in list(collection.items):
                loop_env = env.child()
                loop_env.define(node.var, item)
                res = self.evaluate(node.body, loop_env)
                if isinstance(res, ReturnSignal):
                    return res
                results.append(res)
            return ArrVal(results)
        if isinstance(node, MemberAccess):
            target = self.evaluate(node.target, env)
            if isinstance(target, ReturnSignal):
                return target
            if not isinstance(target, ObjVal):
                raise TypeMismatchError(f'cannot access property {node.name} of {type_name(target)}')
            # Absent keys read as null; only the object's own entries are consulted.
            return target.entries.get(node.name, NullVal())
        if isinstance(node, Index):
            return self.evaluate_index(node, env)
        if isinstance(node, NamespaceAccess):
            return env.lookup_member(node.namespace, node.member)
        if isinstance(node, FunctionExpr):
            if node.name is None:
                return FunctionValue(node.params, node.body, env)
            # A named function expression can call itself by name.
            fn_env = env.child()
            func = FunctionValue(node.params, node.body, fn_env, node.name)
            fn_env.define(node.name, func)
            return func
        if isinstance(node, FunctionDecl):
            # Already registered by the hoisting pass of the enclosing sequence.
            if node.name not in env.bindings:
                self.declare_function(node, env)
            return NullVal()
        if isinstance(node, NamespaceDecl):
            if node.name not in env.namespaces:
                self.init_namespace(node, self.declare_namespace(node, env))
            return NullVal()
        if isinstance(node, ArrayLit):
            items = self.evaluate_all(node.elements, env)
            if isinstance(items, ReturnSignal):
                return items
            return ArrVal(items)
        if isinstance(node, ObjectLit):
            entries: Dict[str, Any] = {}
            for key, val_node in node.entries:
                val = self.evaluate(val_node, env)
                if isinstance(val, ReturnSignal):
                    return val
                entries[key] = val
            return ObjVal(entries)
        if isinstance(node, Template):
            pieces: List[str] = []
            for part in node.parts:
                if isinstance(part, str):
                    pieces.append(part)
                    continue
                val = self.evaluate(part, env)
                if isinstance(val, ReturnSignal):
                    return val
                pieces.append(to_string(val))
            return StrVal(''.join(pieces))
        # catch any other nodes
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_all(self, nodes: List[Node], env: Environment) -> Union[List[Any], ReturnSignal]:
        """Evaluate ``nodes`` left to right, stopping at a return signal."""
        values = []
        for n in nodes:
            value = self.evaluate(n, env)
            if isinstance(value, ReturnSignal):
                return value
            values.append(value)
        return values

    def evaluate_literal(self, node: Literal) -> Any:
        if node.kind == 'num':
            return NumVal(node.value)
        if node.kind == 'str':
            return StrVal(node.value)
        if node.kind == 'bool':
            return BoolVal(bool(node.value))
        if node.kind == 'null':
            return NullVal()
        raise NotImplementedError(f"unknown literal kind {node.kind!r}")

    def evaluate_for(self, node: For, env: Environment) -> Result:
        count = self.evaluate(node.count, env)
        if isinstance(count, ReturnSignal):
            return count
        if not isinstance(count, NumVal):
            raise TypeMismatchError(f'loop count must be num, got {type_name(count)}')
        n = count.value
        if n < 0 or not n.is_integer():
            raise LoopRangeError(f'loop count must be a non-negative integer, got {format_number(n)}')
        results = []
        for i in range(1, int(n) + 1):
            loop_env = env.child()
            if node.var is not None:
                loop_env.define(node.var, NumVal(i))
            if self.debug_level >= 3:
                self.debug(f"loop iteration {i}/{int(n)}")
            res = self.evaluate(node.body, loop_env)
            if isinstance(res, ReturnSignal):
                return res
            results.append(res)
        return ArrVal(results)

    def evaluate_index(self, node: Index, env: Environment) -> Result:
        target = self.evaluate(node.target, env)
        if isinstance(target, ReturnSignal):
            return target
        index = self.evaluate(node.index, env)
        if isinstance(index, ReturnSignal):
            return index
        if not isinstance(target, ArrVal):
            raise TypeMismatchError(f'cannot index type {type_name(target)}')
        if not isinstance(index, NumVal):
            raise TypeMismatchError(f'array index must be num, got {type_name(index)}')
        i = index.value
        if not i.is_integer() or not 1 <= i <= len(target.items):
            raise IndexOutOfRangeError(
                f'array index {format_number(i)} out of range 1..{len(target.items)}'
            )
        return target.items[int(i) - 1]

    def evaluate_binary(self, node: BinaryOp, env: Environment) -> Result:
        left = self.evaluate(node.left, env)
        if isinstance(left, ReturnSignal):
            return left
        # Short-circuit for & and |
        if node.op in ('&', '|'):
            if not isinstance(left, BoolVal):
                raise TypeMismatchError(f'{node.op} expects bool operands, got {type_name(left)}')
            if (node.op == '&') != left.value:
                return left
            right = self.evaluate(node.right, env)
            if isinstance(right, ReturnSignal):
                return right
            if not isinstance(right, BoolVal):
                raise TypeMismatchError(f'{node.op} expects bool operands, got {type_name(right)}')
            return right
        right = self.evaluate(node.right, env)
        if isinstance(right, ReturnSignal):
            return right
        return self.apply_binary_op(node.op, left, right)

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        if op == '=':
            return BoolVal(equal_values(a, b))
        if op == '!=':
            return BoolVal(not equal_values(a, b))
        if not (isinstance(a, NumVal) and isinstance(b, NumVal)):
            raise TypeMismatchError(f'unsupported {op} for {type_name(a)} and {type_name(b)}')
        x, y = a.value, b.value
        if op == '+':
            return NumVal(x + y)
        if op == '-':
            return NumVal(x - y)
        if op == '*':
            return NumVal(x * y)
        if op == '/':
            if y == 0:
                raise DivisionByZeroError('division by zero')
            return NumVal(x / y)
        if op == '%':
            if y == 0:
                raise DivisionByZeroError('modulo by zero')
            if math.isinf(x):
                return NumVal(math.nan)
            # remainder takes the sign of the dividend
            return NumVal(math.fmod(x, y))
        if op == '<':
            return BoolVal(x < y)
        if op == '>':
            return BoolVal(x > y)
        if op == '<=':
            return BoolVal(x <= y)
        if op == '>=':
            return BoolVal(x >= y)
        raise TypeMismatchError(f'unknown operator {op}')

    def call_function(self, func: Any, args: List[Any]) -> Any:
        """Invoke a function value with already evaluated arguments.

        Missing arguments are bound to null and extra ones are ignored,
        for closures and natives alike.
        """
        if isinstance(func, BuiltinFunction):
            if func.arity is not None:
                args = list(args[:func.arity]) + [NullVal()] * (func.arity - len(args))
            if self.debug_level >= 3:
                self.debug(f"call {func.name}")
            return func.fn(args)
        if isinstance(func, FunctionValue):
            # Create new environment for call; closure's env is parent
            call_env = func.env.child()
            for i, param in enumerate(func.params):
                call_env.define(param, args[i] if i < len(args) else NullVal())
            if self.debug_level >= 3:
                self.debug(f"call {func.name or '@'}({', '.join(to_string(a) for a in args)})")
            res = self.execute_block(func.body.statements, call_env)
            if isinstance(res, ReturnSignal):
                return res.value
            return res
        raise NotCallableError(f'{type_name(func)} value is not callable')


def run_program(source: str, variables: Optional[Dict[str, Any]] = None,
                opts: Optional[Dict[str, Any]] = None, debug_level: int = 0) -> Any:
    """Convenience function to parse and run an AiScript program from source."""
    ast_program = parse_program(source)
    interpreter = Interpreter(variables, opts, debug_level=debug_level)
    return interpreter.run(ast_program)
