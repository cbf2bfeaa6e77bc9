"""JSON serialization/deserialization for the AiScript AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding, so a host can parse once and run
the stored tree later. Every node becomes ``{"type": <node name>, ...}``.
"""

from __future__ import annotations

from typing import Any

from .ast import (
    Program,
    Literal,
    ArrayLit,
    ObjectLit,
    Template,
    Ident,
    VarDecl,
    Assign,
    MemberAccess,
    Index,
    NamespaceAccess,
    Call,
    Block,
    FunctionDecl,
    FunctionExpr,
    NamespaceDecl,
    IfBranch,
    If,
    MatchArm,
    Match,
    For,
    ForOf,
    Return,
    Print,
    BinaryOp,
)


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Program):
        return {"type": "Program", "body": [ast_to_obj(n) for n in node.body]}
    if isinstance(node, Literal):
        return {"type": "Literal", "value": node.value, "kind": node.kind}
    if isinstance(node, ArrayLit):
        return {"type": "ArrayLit", "elements": [ast_to_obj(e) for e in node.elements]}
    if isinstance(node, ObjectLit):
        return {"type": "ObjectLit", "entries": [[k, ast_to_obj(v)] for (k, v) in node.entries]}
    if isinstance(node, Template):
        return {
            "type": "Template",
            "parts": [p if isinstance(p, str) else ast_to_obj(p) for p in node.parts],
        }
    if isinstance(node, Ident):
        return {"type": "Ident", "name": node.name}
    if isinstance(node, VarDecl):
        return {"type": "VarDecl", "name": node.name, "expr": ast_to_obj(node.expr), "mutable": node.mutable}
    if isinstance(node, Assign):
        return {"type": "Assign", "name": node.name, "value": ast_to_obj(node.value)}
    if isinstance(node, MemberAccess):
        return {"type": "MemberAccess", "target": ast_to_obj(node.target), "name": node.name}
    if isinstance(node, Index):
        return {"type": "Index", "target": ast_to_obj(node.target), "index": ast_to_obj(node.index)}
    if isinstance(node, NamespaceAccess):
        return {"type": "NamespaceAccess", "namespace": node.namespace, "member": node.member}
    if isinstance(node, Call):
        return {"type": "Call", "func": ast_to_obj(node.func), "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, Block):
        return {"type": "Block", "statements": [ast_to_obj(s) for s in node.statements]}
    if isinstance(node, FunctionDecl):
        return {"type": "FunctionDecl", "name": node.name, "params": list(node.params), "body": ast_to_obj(node.body)}
    if isinstance(node, FunctionExpr):
        return {"type": "FunctionExpr", "name": node.name, "params": list(node.params), "body": ast_to_obj(node.body)}
    if isinstance(node, NamespaceDecl):
        return {"type": "NamespaceDecl", "name": node.name, "members": [ast_to_obj(m) for m in node.members]}
    if isinstance(node, If):
        return {
            "type": "If",
            "branches": [
                {"condition": ast_to_obj(b.condition), "body": ast_to_obj(b.body)}
                for b in node.branches
            ],
            "else_body": ast_to_obj(node.else_body),
        }
    if isinstance(node, Match):
        return {
            "type": "Match",
            "subject": ast_to_obj(node.subject),
            "arms": [{"pattern": ast_to_obj(a.pattern), "body": ast_to_obj(a.body)} for a in node.arms],
            "default": ast_to_obj(node.default),
        }
    if isinstance(node, For):
        return {"type": "For", "var": node.var, "count": ast_to_obj(node.count), "body": ast_to_obj(node.body)}
    if isinstance(node, ForOf):
        return {
            "type": "ForOf",
            "var": node.var,
            "collection": ast_to_obj(node.collection),
            "body": ast_to_obj(node.body),
        }
    if isinstance(node, Return):
        return {"type": "Return", "value": ast_to_obj(node.value)}
    if isinstance(node, Print):
        return {"type": "Print", "expr": ast_to_obj(node.expr)}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Program":
        return Program(body=[ast_from_obj(n) for n in obj["body"]])
    if t == "Literal":
        return Literal(value=obj.get("value"), kind=obj["kind"])
    if t == "ArrayLit":
        return ArrayLit(elements=[ast_from_obj(e) for e in obj["elements"]])
    if t == "ObjectLit":
        return ObjectLit(entries=[(k, ast_from_obj(v)) for (k, v) in obj["entries"]])
    if t == "Template":
        return Template(parts=[p if isinstance(p, str) else ast_from_obj(p) for p in obj["parts"]])
    if t == "Ident":
        return Ident(name=obj["name"])
    if t == "VarDecl":
        return VarDecl(name=obj["name"], expr=ast_from_obj(obj["expr"]), mutable=bool(obj.get("mutable", False)))
    if t == "Assign":
        return Assign(name=obj["name"], value=ast_from_obj(obj["value"]))
    if t == "MemberAccess":
        return MemberAccess(target=ast_from_obj(obj["target"]), name=obj["name"])
    if t == "Index":
        return Index(target=ast_from_obj(obj["target"]), index=ast_from_obj(obj["index"]))
    if t == "NamespaceAccess":
        return NamespaceAccess(namespace=obj["namespace"], member=obj["member"])
    if t == "Call":
        return Call(func=ast_from_obj(obj["func"]), args=[ast_from_obj(a) for a in obj["args"]])
    if t == "Block":
        return Block(statements=[ast_from_obj(s) for s in obj["statements"]])
    if t == "FunctionDecl":
        return FunctionDecl(name=obj["name"], params=list(obj["params"]), body=ast_from_obj(obj["body"]))
    if t == "FunctionExpr":
        return FunctionExpr(params=list(obj["params"]), body=ast_from_obj(obj["body"]), name=obj.get("name"))
    if t == "NamespaceDecl":
        return NamespaceDecl(name=obj["name"], members=[ast_from_obj(m) for m in obj["members"]])
    if t == "If":
        return If(
            branches=[
                IfBranch(condition=ast_from_obj(b["condition"]), body=ast_from_obj(b["body"]))
                for b in obj["branches"]
            ],
            else_body=ast_from_obj(obj.get("else_body")),
        )
    if t == "Match":
        return Match(
            subject=ast_from_obj(obj["subject"]),
            arms=[MatchArm(pattern=ast_from_obj(a["pattern"]), body=ast_from_obj(a["body"])) for a in obj["arms"]],
            default=ast_from_obj(obj.get("default")),
        )
    if t == "For":
        return For(var=obj.get("var"), count=ast_from_obj(obj["count"]), body=ast_from_obj(obj["body"]))
    if t == "ForOf":
        return ForOf(var=obj["var"], collection=ast_from_obj(obj["collection"]), body=ast_from_obj(obj["body"]))
    if t == "Return":
        return Return(value=ast_from_obj(obj["value"]))
    if t == "Print":
        return Print(expr=ast_from_obj(obj["expr"]))
    if t == "BinaryOp":
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))

    raise ValueError(f"Unknown AST node type: {t}")
