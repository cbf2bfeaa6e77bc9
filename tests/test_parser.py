import pytest

from aiscript.ast import (
    ArrayLit, Assign, BinaryOp, Block, Call, For, ForOf, FunctionDecl,
    FunctionExpr, Ident, If, IfBranch, Index, Literal, Match, MemberAccess,
    NamespaceAccess, NamespaceDecl, ObjectLit, Print, Program, Return,
    Template, VarDecl,
)
from aiscript.errors import AiScriptSyntaxError
from aiscript.parser import parse_expression, parse_program, split_template, unescape


def num(n):
    return Literal(float(n), 'num')


def single(source):
    program = parse_program(source)
    assert len(program.body) == 1
    return program.body[0]


def test_empty_program():
    assert parse_program('') == Program(body=[])
    assert parse_program('  // only a comment\n /* and a block */ ') == Program(body=[])


def test_declarations():
    assert single('#a = 1') == VarDecl('a', num(1), mutable=False)
    assert single('$b <- "x"') == VarDecl('b', Literal('x', 'str'), mutable=True)
    assert single('b <- _') == Assign('b', Literal(None, 'null'))


def test_statements_need_no_separator():
    program = parse_program('#a = 1 #b = 2 <: a')
    assert program.body == [
        VarDecl('a', num(1)),
        VarDecl('b', num(2)),
        Print(Ident('a')),
    ]


def test_call_requires_adjacent_paren():
    assert single('f(1, 2)') == Call(Ident('f'), [num(1), num(2)])
    program = parse_program('f (1)')
    assert program.body == [Ident('f'), num(1)]


def test_index_and_member_require_adjacency():
    assert single('a[1]') == Index(Ident('a'), num(1))
    assert single('o.k.j') == MemberAccess(MemberAccess(Ident('o'), 'k'), 'j')
    assert parse_program('a [1]').body == [Ident('a'), ArrayLit([num(1)])]


def test_postfix_chains():
    assert single('obj.a.b()') == Call(MemberAccess(MemberAccess(Ident('obj'), 'a'), 'b'), [])
    assert single('f()()') == Call(Call(Ident('f'), []), [])
    assert single('xs[1].k') == MemberAccess(Index(Ident('xs'), num(1)), 'k')


def test_namespace_reference():
    assert single('Arr:len(a)') == Call(NamespaceAccess('Arr', 'len'), [Ident('a')])


def test_bool_and_null_literals():
    assert single('yes') == Literal(True, 'bool')
    assert single('+') == Literal(True, 'bool')
    assert single('no') == Literal(False, 'bool')
    assert single('-') == Literal(False, 'bool')
    assert single('_') == Literal(None, 'null')


def test_keyword_prefix_is_an_identifier():
    assert single('note') == Ident('note')
    assert single('yesterday') == Ident('yesterday')
    assert single('_x') == Ident('_x')


def test_numbers():
    assert single('42') == num(42)
    assert single('3.25') == num(3.25)


def test_string_escapes():
    assert single(r'"a \"b\" c"') == Literal('a "b" c', 'str')
    assert single(r'"back\\slash"') == Literal('back\\slash', 'str')


def test_operator_precedence_inside_parens():
    assert single('(1 + 2 * 3)') == BinaryOp('+', num(1), BinaryOp('*', num(2), num(3)))
    assert single('(1 - 2 - 3)') == BinaryOp('-', BinaryOp('-', num(1), num(2)), num(3))
    assert single('(a = 1 & b)') == BinaryOp('&', BinaryOp('=', Ident('a'), num(1)), Ident('b'))
    assert single('(a | b & c)') == BinaryOp('|', Ident('a'), BinaryOp('&', Ident('b'), Ident('c')))


def test_comparison_operators():
    for op in ('=', '!=', '<', '>', '<=', '>='):
        assert single(f'(a {op} b)') == BinaryOp(op, Ident('a'), Ident('b'))


def test_parenthesized_expression_without_operator():
    assert single('(a)') == Ident('a')


def test_array_literal_separators():
    expected = ArrayLit([num(1), num(2), num(3)])
    assert single('[1, 2, 3]') == expected
    assert single('[1 2 3]') == expected
    assert single('[1, 2, 3,]') == expected


def test_object_literal_separators():
    expected = ObjectLit([('a', num(1)), ('b', num(2))])
    assert single('{ a: 1, b: 2 }') == expected
    assert single('{ a: 1; b: 2; }') == expected
    assert single('{ a: 1\n b: 2 }') == expected


def test_empty_braces_are_an_object():
    assert single('{}') == ObjectLit([])


def test_block():
    assert single('{ #a = 1 a }') == Block([VarDecl('a', num(1)), Ident('a')])


def test_function_declaration():
    assert single('@add(a, b) { (a + b) }') == FunctionDecl(
        'add', ['a', 'b'], Block([BinaryOp('+', Ident('a'), Ident('b'))])
    )
    assert single('@noop() {}') == FunctionDecl('noop', [], Block([]))


def test_function_expression():
    assert single('#f = @(x) { x }') == VarDecl('f', FunctionExpr(['x'], Block([Ident('x')])))


def test_if_chain():
    assert single('? a { 1 } .? b { 2 } . { 3 }') == If(
        branches=[
            IfBranch(Ident('a'), Block([num(1)])),
            IfBranch(Ident('b'), Block([num(2)])),
        ],
        else_body=Block([num(3)]),
    )


def test_if_without_blocks():
    node = single('? yes "a" . "b"')
    assert node.else_body == Literal('b', 'str')
    assert node.branches[0].body == Literal('a', 'str')


def test_else_dot_is_not_member_access():
    node = single('? c x . y')
    assert node.branches[0].body == Ident('x')
    assert node.else_body == Ident('y')


def test_match():
    node = single('? x { 1 => "a" 2 => "b" * => "c" }')
    assert isinstance(node, Match)
    assert node.subject == Ident('x')
    assert [(a.pattern, a.body) for a in node.arms] == [
        (num(1), Literal('a', 'str')),
        (num(2), Literal('b', 'str')),
    ]
    assert node.default == Literal('c', 'str')


def test_match_with_only_default():
    node = single('? x { * => 1 }')
    assert node.arms == []
    assert node.default == num(1)


def test_for_forms():
    assert single('~ #i, 3 i') == For('i', num(3), Ident('i'))
    assert single('~ 3 { 1 }') == For(None, num(3), Block([num(1)]))
    assert single('~~ #x, xs x') == ForOf('x', Ident('xs'), Ident('x'))


def test_return():
    assert single('<< 1') == Return(num(1))


def test_namespace_declaration():
    node = single(':: Foo { #a = 1 @f() { a } }')
    assert node == NamespaceDecl('Foo', [
        VarDecl('a', num(1)),
        FunctionDecl('f', [], Block([Ident('a')])),
    ])


def test_template_parts():
    node = single('`Ai is {attr}!`')
    assert node == Template(['Ai is ', Ident('attr'), '!'])


def test_template_with_nested_braces():
    node = single('`keys={ Obj:keys({ a: 1 }) }`')
    assert node == Template([
        'keys=',
        Call(NamespaceAccess('Obj', 'keys'), [ObjectLit([('a', num(1))])]),
    ])


def test_split_template():
    assert split_template('a{b}c') == [(False, 'a'), (True, 'b'), (False, 'c')]
    assert split_template('{ {a: 1} }') == [(True, ' {a: 1} ')]
    assert split_template(r'\{x\}') == [(False, '{x}')]
    assert split_template('{"}"}') == [(True, '"}"')]


def test_unescape():
    assert unescape(r'\"q\"') == '"q"'
    assert unescape(r'\\') == '\\'


def test_parse_expression():
    assert parse_expression('(1 + 1)') == BinaryOp('+', num(1), num(1))


@pytest.mark.parametrize('source', [
    '#a =',
    '(1 +)',
    '(1 2)',
    '@f( { }',
    '[1, 2',
    '`open {`',
])
def test_syntax_errors(source):
    with pytest.raises(AiScriptSyntaxError):
        parse_program(source)


def test_syntax_error_reports_position():
    with pytest.raises(AiScriptSyntaxError) as exc:
        parse_program('#a = 1\n#b = ]')
    assert 'line 2' in str(exc.value)
    assert exc.value.kind == 'SyntaxError'


def test_object_member_without_space_after_colon():
    assert single('{a:b}') == ObjectLit([('a', Ident('b'))])
    assert single('{ok:yes}') == ObjectLit([('ok', Literal(True, 'bool'))])
    assert single('{f:fn, g:h}') == ObjectLit([('f', Ident('fn')), ('g', Ident('h'))])
    assert single('{a:b c:d}') == ObjectLit([('a', Ident('b')), ('c', Ident('d'))])


def test_block_may_start_with_namespace_call():
    node = single('? c { Arr:push(a, 1) }')
    assert node.branches[0].body == Block([
        Call(NamespaceAccess('Arr', 'push'), [Ident('a'), num(1)]),
    ])


def test_match_pattern_may_be_namespace_member():
    node = single('? x { Foo:bar => 1 }')
    assert node.arms[0].pattern == NamespaceAccess('Foo', 'bar')
