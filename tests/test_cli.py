import json

import pytest

from aiscript.__main__ import main


def write(tmp_path, name, source):
    path = tmp_path / name
    path.write_text(source, encoding='utf-8')
    return path


def test_run_program_file(tmp_path, capsys):
    path = write(tmp_path, 'hello.is', '<: "Hello, world!"\n<: [1, yes, _]')
    main([str(path)])
    out_lines = capsys.readouterr().out.strip().split('\n')
    assert out_lines == ['Hello, world!', '[1, yes, _]']


def test_emit_ast_then_run_it(tmp_path, capsys):
    path = write(tmp_path, 'sum.is', '<: Arr:reduce([1, 2, 3], @(a, b) { (a + b) })')
    main(['--emit-ast', str(path)])
    ast_path = capsys.readouterr().out.strip()
    assert ast_path == str(path) + '.ast.json'
    with open(ast_path, encoding='utf-8') as f:
        assert json.load(f)['type'] == 'Program'
    main(['--ast', ast_path])
    assert capsys.readouterr().out.strip() == '6'


def test_runtime_error_exits_with_status_1(tmp_path, capsys):
    path = write(tmp_path, 'bad.is', '<: "before"\n<: (1 / 0)')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    captured = capsys.readouterr()
    assert captured.out.strip() == 'before'
    assert 'Runtime error: DivisionByZero' in captured.err


def test_syntax_error_exits_with_status_1(tmp_path, capsys):
    path = write(tmp_path, 'broken.is', '#a = ')
    with pytest.raises(SystemExit) as exc:
        main([str(path)])
    assert exc.value.code == 1
    assert 'Syntax error' in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    with pytest.raises(SystemExit):
        main([str(tmp_path / 'nope.is')])
    assert 'not found' in capsys.readouterr().err


def test_verbose_writes_debug_trace(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = write(tmp_path, 'trace.is', '#x = 1 <: x')
    main(['-vv', str(path)])
    assert capsys.readouterr().out.strip() == '1'
    trace = (tmp_path / 'debug.txt').read_text(encoding='utf-8')
    assert 'declare immutable x = 1' in trace
    assert 'out 1' in trace
