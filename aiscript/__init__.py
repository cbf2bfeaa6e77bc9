# AiScript language package
# This package provides a parser and interpreter for the AiScript language.
from .errors import AiScriptError
from .interpreter import run_program, Interpreter
from .parser import parse_program

__all__ = [
    'run_program',
    'parse_program',
    'Interpreter',
    'AiScriptError',
]
