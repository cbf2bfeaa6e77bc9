"""Abstract Syntax Tree (AST) definitions for AiScript.

The parser produces these nodes and the interpreter consumes them. A
host that brings its own front end only has to build the same tree.
Expression and statement nodes share one base class because every
statement in AiScript also has a value (Null for declarations).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple, Any, Union


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Program(Node):
    body: List[Node]


@dataclass
class Literal(Node):
    value: Any
    kind: str  # 'num', 'str', 'bool' or 'null'


@dataclass
class ArrayLit(Node):
    elements: List[Node]


@dataclass
class ObjectLit(Node):
    entries: List[Tuple[str, Node]]  # source order is key order


@dataclass
class Template(Node):
    parts: List[Union[str, Node]]  # literal text segments and embedded expressions


@dataclass
class Ident(Node):
    name: str


@dataclass
class VarDecl(Node):
    name: str
    expr: Node
    mutable: bool = False


@dataclass
class Assign(Node):
    name: str
    value: Node


@dataclass
class MemberAccess(Node):
    target: Node
    name: str


@dataclass
class Index(Node):
    target: Node
    index: Node


@dataclass
class NamespaceAccess(Node):
    namespace: str
    member: str


@dataclass
class Call(Node):
    func: Node
    args: List[Node]


@dataclass
class Block(Node):
    statements: List[Node]


@dataclass
class FunctionDecl(Node):
    name: str
    params: List[str]
    body: Block


@dataclass
class FunctionExpr(Node):
    params: List[str]
    body: Block
    name: Optional[str] = None


@dataclass
class NamespaceDecl(Node):
    name: str
    members: List[Node]  # FunctionDecl or immutable VarDecl


@dataclass
class IfBranch:
    condition: Node
    body: Node


@dataclass
class If(Node):
    branches: List[IfBranch]
    else_body: Optional[Node] = None


@dataclass
class MatchArm:
    pattern: Node
    body: Node


@dataclass
class Match(Node):
    subject: Node
    arms: List[MatchArm]
    default: Optional[Node] = None


@dataclass
class For(Node):
    var: Optional[str]
    count: Node
    body: Node


@dataclass
class ForOf(Node):
    var: str
    collection: Node
    body: Node


@dataclass
class Return(Node):
    value: Node


@dataclass
class Print(Node):
    expr: Node


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node
