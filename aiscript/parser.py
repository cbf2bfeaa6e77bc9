"""Parser for AiScript.

Source text is fed into a Lark LALR parser configured with the grammar
below, and the resulting parse tree is transformed into the AST defined
in :mod:`aiscript.ast`.

AiScript has no statement terminators: statements are simply written
one after another and whitespace (newlines included) is insignificant.
Two lexical rules keep that unambiguous:

* infix operators exist only inside parentheses, e.g. ``(a + b)``;
* the postfix operators (call ``f(x)``, index ``a[1]`` and member
  access ``o.k``) must touch their operand. ``f (x)`` is the expression
  ``f`` followed by the expression ``(x)``.

Template literals are split into text segments and embedded expression
sources, and each embedded expression is parsed on its own with the
``expr_only`` start rule.

The `parse_program` function is the public entry point and returns a
`Program` AST node representing the entire source file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple, Union
import re

from lark import Lark, Transformer
from lark.exceptions import UnexpectedInput, VisitError

from .ast import (
    Program, Literal, ArrayLit, ObjectLit, Template, Ident, VarDecl, Assign,
    MemberAccess, Index, NamespaceAccess, Call, Block, FunctionDecl,
    FunctionExpr, NamespaceDecl, IfBranch, If, MatchArm, Match, For, ForOf,
    Return, Print, BinaryOp, Node,
)
from .errors import AiScriptError, AiScriptSyntaxError


AISCRIPT_GRAMMAR = r"""
    program: statement*
    expr_only: expression

    // Statements
    ?statement: const_decl
              | let_decl
              | assign
              | fn_decl
              | ns_decl
              | out
              | expression

    const_decl: "#" IDENT "=" expression
    let_decl: "$" IDENT "<-" expression
    assign: IDENT "<-" expression
    out: "<:" expression

    fn_decl: "@" IDENT "(" params ")" fn_body
    params: (IDENT ","?)*
    fn_body: "{" statement* "}"

    ns_decl: "::" IDENT "{" ns_member* "}"
    ?ns_member: fn_decl | const_decl

    // Expressions
    ?expression: if_expr
               | match_expr
               | for_expr
               | for_of_expr
               | return_expr
               | fn_expr
               | postfix

    if_expr: "?" expression expression elif_branch* else_branch?
    elif_branch: ".?" expression expression
    else_branch: "." expression

    match_expr: "?" expression "{" match_arms "}"
    match_arms: match_arm+ default_arm?
              | default_arm
    match_arm: expression "=>" expression
    default_arm: "*" "=>" expression

    for_expr: "~" ("#" IDENT ",")? expression expression
    for_of_expr: "~~" "#" IDENT "," expression expression
    return_expr: "<<" expression
    fn_expr: "@" "(" params ")" fn_body

    ?postfix: atom
            | postfix _CALL_OPEN args ")"        -> call
            | postfix _INDEX_OPEN expression "]" -> index
            | postfix _MEMBER_DOT IDENT          -> member
    args: (expression ","?)*

    ?atom: NUMBER   -> number
         | STRING   -> string
         | TEMPLATE -> template
         | "yes"    -> true
         | "+"      -> true
         | "no"     -> false
         | "-"      -> false
         | "_"      -> null
         | IDENT    -> var
         | NS_REF   -> ns_access
         | array
         | object
         | block
         | "(" or_expr ")"

    array: "[" (expression ","?)* "]"
    object: "{" (obj_member ("," | ";")?)* "}"
    obj_member: (IDENT | OBJ_KEY) ":" expression
    block: "{" statement+ "}"

    // Infix operators, only reachable inside parentheses
    ?or_expr: and_expr
            | or_expr or_op and_expr     -> binop
    ?and_expr: cmp_expr
             | and_expr and_op cmp_expr  -> binop
    ?cmp_expr: sum_expr
             | cmp_expr cmp_op sum_expr  -> binop
    ?sum_expr: prod_expr
             | sum_expr add_op prod_expr -> binop
    ?prod_expr: expression
              | prod_expr mul_op expression -> binop

    !or_op: "|"
    !and_op: "&"
    !cmp_op: "=" | "!=" | "<" | ">" | "<=" | ">="
    !add_op: "+" | "-"
    !mul_op: "*" | "/" | "%"

    // Tokens
    _CALL_OPEN.2: /(?<=[\w)\]])\(/
    _INDEX_OPEN.2: /(?<=[\w)\]])\[/
    _MEMBER_DOT.2: /(?<=[\w)\]])\./
    // `{a:b}` is an object even though `a:b` also reads as a namespace
    // reference: a key is a name glued to `:name` that is followed by a
    // member separator, the closing brace or the next `key:`.
    OBJ_KEY.4: /[A-Za-z_][A-Za-z0-9_]*(?=:[A-Za-z_][A-Za-z0-9_]*(?:\s*[,;}]|\s+[A-Za-z_][A-Za-z0-9_]*:(?!:)))/
    NS_REF.3: /[A-Za-z_][A-Za-z0-9_]*:[A-Za-z_][A-Za-z0-9_]*/
    IDENT: /[A-Za-z_][A-Za-z0-9_]*/
    NUMBER: /[0-9]+(\.[0-9]+)?/
    STRING: /"(\\.|[^"\\])*"/
    TEMPLATE: /`[^`]*`/

    %import common.WS
    %ignore WS

    // Comments
    LINE_COMMENT: /\/\/[^\n]*/
    %ignore LINE_COMMENT
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//
    %ignore BLOCK_COMMENT
"""


AISCRIPT_PARSER = Lark(
    AISCRIPT_GRAMMAR,
    parser='lalr',
    lexer='contextual',
    start=['program', 'expr_only'],
    maybe_placeholders=False,
)


_ESCAPE = re.compile(r'\\(.)', re.DOTALL)


def unescape(raw: str) -> str:
    """Drop the backslash from every escape sequence (``\\"`` -> ``"``)."""
    return _ESCAPE.sub(r'\1', raw)


def split_template(body: str) -> List[Tuple[bool, str]]:
    """Split the inside of a template literal into segments.

    Returns ``(is_expression, text)`` pairs. Braces nest, so an embedded
    object literal such as ``{ Obj:keys({a: 1}) }`` stays one expression.
    Backslash escapes a literal brace in the text segments.
    """
    segments: List[Tuple[bool, str]] = []
    text: List[str] = []
    i = 0
    length = len(body)
    while i < length:
        c = body[i]
        if c == '\\' and i + 1 < length:
            text.append(body[i + 1])
            i += 2
            continue
        if c == '{':
            depth = 1
            j = i + 1
            in_string = False
            while j < length and depth > 0:
                ch = body[j]
                if in_string:
                    if ch == '\\':
                        j += 1
                    elif ch == '"':
                        in_string = False
                elif ch == '"':
                    in_string = True
                elif ch == '{':
                    depth += 1
                elif ch == '}':
                    depth -= 1
                j += 1
            if depth > 0:
                raise AiScriptSyntaxError('unterminated template expression')
            if text:
                segments.append((False, ''.join(text)))
                text = []
            segments.append((True, body[i + 1:j - 1]))
            i = j
            continue
        text.append(c)
        i += 1
    if text:
        segments.append((False, ''.join(text)))
    return segments


@dataclass
class _ElseBranch:
    body: Node


@dataclass
class _DefaultArm:
    body: Node


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def program(self, items):
        return Program(body=list(items))

    def expr_only(self, items):
        return items[0]

    # Statements
    def const_decl(self, items):
        return VarDecl(name=str(items[0]), expr=items[1], mutable=False)

    def let_decl(self, items):
        return VarDecl(name=str(items[0]), expr=items[1], mutable=True)

    def assign(self, items):
        return Assign(name=str(items[0]), value=items[1])

    def out(self, items):
        return Print(items[0])

    def fn_decl(self, items):
        name, params, body = items
        return FunctionDecl(name=str(name), params=params, body=body)

    def params(self, items):
        return [str(item) for item in items]

    def fn_body(self, items):
        return Block(statements=list(items))

    def ns_decl(self, items):
        return NamespaceDecl(name=str(items[0]), members=list(items[1:]))

    # Control flow
    def if_expr(self, items):
        branches = [IfBranch(items[0], items[1])]
        else_body = None
        for item in items[2:]:
            if isinstance(item, _ElseBranch):
                else_body = item.body
            else:
                branches.append(item)
        return If(branches=branches, else_body=else_body)

    def elif_branch(self, items):
        return IfBranch(items[0], items[1])

    def else_branch(self, items):
        return _ElseBranch(items[0])

    def match_expr(self, items):
        subject, (arms, default) = items
        return Match(subject=subject, arms=arms, default=default)

    def match_arms(self, items):
        arms = [item for item in items if isinstance(item, MatchArm)]
        default = None
        if isinstance(items[-1], _DefaultArm):
            default = items[-1].body
        return arms, default

    def match_arm(self, items):
        return MatchArm(pattern=items[0], body=items[1])

    def default_arm(self, items):
        return _DefaultArm(items[0])

    def for_expr(self, items):
        if len(items) == 3:
            return For(var=str(items[0]), count=items[1], body=items[2])
        return For(var=None, count=items[0], body=items[1])

    def for_of_expr(self, items):
        return ForOf(var=str(items[0]), collection=items[1], body=items[2])

    def return_expr(self, items):
        return Return(items[0])

    def fn_expr(self, items):
        params, body = items
        return FunctionExpr(params=params, body=body)

    # Postfix
    def call(self, items):
        return Call(func=items[0], args=items[1])

    def args(self, items):
        return list(items)

    def index(self, items):
        return Index(target=items[0], index=items[1])

    def member(self, items):
        return MemberAccess(target=items[0], name=str(items[1]))

    # Literals
    def number(self, items):
        return Literal(float(items[0]), 'num')

    def string(self, items):
        return Literal(unescape(str(items[0])[1:-1]), 'str')

    def template(self, items):
        body = str(items[0])[1:-1]
        parts: List[Union[str, Node]] = []
        for is_expr, text in split_template(body):
            if is_expr:
                parts.append(parse_expression(text))
            else:
                parts.append(text)
        return Template(parts)

    def true(self, items):
        return Literal(True, 'bool')

    def false(self, items):
        return Literal(False, 'bool')

    def null(self, items):
        return Literal(None, 'null')

    def var(self, items):
        return Ident(str(items[0]))

    def ns_access(self, items):
        namespace, member = str(items[0]).split(':', 1)
        return NamespaceAccess(namespace=namespace, member=member)

    def array(self, items):
        return ArrayLit(list(items))

    def object(self, items):
        return ObjectLit(list(items))

    def obj_member(self, items):
        return (str(items[0]), items[1])

    def block(self, items):
        return Block(statements=list(items))

    # Operators
    def binop(self, items):
        left, op, right = items
        return BinaryOp(op=op, left=left, right=right)

    def _op(self, items):
        return str(items[0])

    or_op = and_op = cmp_op = add_op = mul_op = _op


def _parse(source: str, start: str) -> Any:
    try:
        tree = AISCRIPT_PARSER.parse(source, start=start)
    except UnexpectedInput as e:
        raise AiScriptSyntaxError(
            f'unexpected input at line {e.line}, column {e.column}'
        ) from e
    try:
        return ASTTransformer().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, AiScriptError):
            raise e.orig_exc
        raise


def parse_expression(source: str) -> Node:
    """Parse a single expression (used for template placeholders)."""
    return _parse(source, 'expr_only')


def parse_program(source: str) -> Program:
    """Parse AiScript source code into an AST Program.

    Syntax errors are raised as `AiScriptSyntaxError`.
    """
    return _parse(source, 'program')
