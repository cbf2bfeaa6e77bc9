import asyncio

import pytest

from aiscript.errors import DivisionByZeroError
from aiscript.interpreter import Interpreter
from aiscript.parser import parse_program
from aiscript.types import NumVal, StrVal


@pytest.mark.asyncio
async def test_exec_runs_to_completion():
    out = []
    interp = Interpreter(opts={'out': out.append})
    result = await interp.exec(parse_program('<: "a" <: "b" (1 + 1)'))
    assert out == [StrVal('a'), StrVal('b')]
    assert result == NumVal(2)


@pytest.mark.asyncio
async def test_exec_raises_runtime_errors():
    interp = Interpreter(opts={'out': lambda value: None})
    with pytest.raises(DivisionByZeroError):
        await interp.exec(parse_program('<: (1 / 0)'))


@pytest.mark.asyncio
async def test_independent_interpreters_run_concurrently():
    program = parse_program('''
    $n <- 0
    ~ 10 { n <- (n + step) }
    <: n
    ''')
    sinks = {1: [], 2: []}
    runs = [
        Interpreter({'step': step}, {'out': sinks[step].append}).exec(program)
        for step in (1, 2)
    ]
    await asyncio.gather(*runs)
    assert sinks == {1: [NumVal(10)], 2: [NumVal(20)]}
