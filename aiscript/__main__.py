"""CLI entry point for the AiScript interpreter.

Usage:
    python -m aiscript [-v|-vv|-vvv] <program_file>
    python -m aiscript [-v...] --emit-ast <program_file>
    python -m aiscript [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given program file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Printed values (``<:``) go to stdout.
"""

import argparse
import json
import sys
from pathlib import Path
from .errors import AiScriptError
from .interpreter import Interpreter
from .parser import parse_program
from .ast_json import ast_to_obj, ast_from_obj


def _read(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _parse_or_exit(source: str):
    try:
        return parse_program(source)
    except AiScriptError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="AiScript interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='PROGRAM_FILE', help='emit AST JSON for the given program file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='AiScript program file to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program = _parse_or_exit(_read(program_file))
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        data = json.loads(_read(Path(args.ast)))
        ast_program = ast_from_obj(data)
    else:
        if not args.program:
            parser.error('missing program file; or use --emit-ast/--ast')
        ast_program = _parse_or_exit(_read(Path(args.program)))

    interpreter = Interpreter(debug_level=args.v)
    try:
        interpreter.run(ast_program)
    except AiScriptError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
