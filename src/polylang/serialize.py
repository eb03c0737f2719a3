"""Serialization of the AST and compilation context to JSON."""

from __future__ import annotations

from .ast import (
    Add,
    AssignStmt,
    Call,
    Const,
    Expr,
    InputStmt,
    Mul,
    OutputStmt,
    PolyDecl,
    Pow,
    Stmt,
    Sub,
    Var,
    fold,
)
from .context import Context


def serialize(obj: object) -> object:
    """Recursively serialize an object to a JSON-compatible structure."""
    if obj is None:
        return None
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, (int, str)):
        return obj
    if isinstance(obj, (list, tuple)):
        return [serialize(x) for x in obj]
    if isinstance(obj, (set, frozenset)):
        return sorted(serialize(x) for x in obj)
    if isinstance(obj, dict):
        return {str(k): serialize(v) for k, v in obj.items()}
    if isinstance(obj, Expr):
        return _serialize_expr(obj)
    if isinstance(obj, Stmt):
        return _serialize_stmt(obj)
    if isinstance(obj, PolyDecl):
        return {
            "_type": "PolyDecl",
            "name": obj.name,
            "line": obj.line,
            "params": serialize(obj.params),
            "body": serialize(obj.body),
        }
    raise TypeError("cannot serialize " + type(obj).__name__)


def _serialize_expr(obj: Expr) -> dict[str, object]:
    """Serialize Expr subclasses."""
    return fold(obj, _expr_dict)


def _expr_dict(node: Expr, kids: list[dict[str, object]]) -> dict[str, object]:
    d: dict[str, object] = {}
    if isinstance(node, Const):
        d["_type"] = "Const"
        d["value"] = node.value
    elif isinstance(node, Var):
        d["_type"] = "Var"
        d["name"] = node.name
        d["line"] = node.line
    elif isinstance(node, (Add, Sub, Mul)):
        d["_type"] = type(node).__name__
        d["left"] = kids[0]
        d["right"] = kids[1]
    elif isinstance(node, Pow):
        d["_type"] = "Pow"
        d["base"] = kids[0]
        d["exponent"] = node.exponent
    elif isinstance(node, Call):
        d["_type"] = "Call"
        d["name"] = node.name
        d["args"] = kids
        d["line"] = node.line
    else:
        raise TypeError("unknown expression node: " + type(node).__name__)
    return d


def _serialize_stmt(obj: Stmt) -> dict[str, object]:
    """Serialize Stmt subclasses."""
    d: dict[str, object] = {}
    if isinstance(obj, InputStmt):
        d["_type"] = "Input"
        d["var"] = obj.var
    elif isinstance(obj, OutputStmt):
        d["_type"] = "Output"
        d["var"] = obj.var
    elif isinstance(obj, AssignStmt):
        d["_type"] = "Assign"
        d["var"] = obj.var
        d["line"] = obj.line
        d["value"] = serialize(obj.value)
    else:
        raise TypeError("unknown statement node: " + type(obj).__name__)
    return d


def context_to_dict(ctx: Context) -> dict[str, object]:
    """Serialize parse phase output."""
    return {
        "tasks": serialize(ctx.tasks),
        "polys": serialize(ctx.decls_in_order()),
        "stmts": serialize(ctx.stmts),
        "inputs": serialize(ctx.inputs),
        "findings": {
            "duplicate_lines": serialize(ctx.duplicate_lines),
            "invalid_monomial_lines": serialize(ctx.invalid_monomial_lines),
            "undeclared_call_lines": serialize(ctx.undeclared_call_lines),
            "arity_mismatch_lines": serialize(ctx.arity_mismatch_lines),
        },
    }


# --- JSON text ---


def to_json(obj: object, indent: int = 2) -> str:
    """Serialize object to pretty-printed JSON.

    Strings are written unescaped: every string in a dump is a keyword,
    identifier or node type name. Nesting is handled with an explicit stack
    since expression trees can be as deep as the longest operator chain.
    """
    out: list[str] = []
    # str entries are literal text; tuple entries are (value, level) to write
    stack: list[str | tuple[object, int]] = [(obj, 0)]
    while len(stack) > 0:
        item = stack.pop()
        if isinstance(item, str):
            out.append(item)
            continue
        value, level = item
        if value is None:
            out.append("null")
        elif isinstance(value, bool):
            out.append("true" if value else "false")
        elif isinstance(value, int):
            out.append(str(value))
        elif isinstance(value, str):
            out.append('"' + value + '"')
        elif isinstance(value, (list, dict)):
            if len(value) == 0:
                out.append("[]" if isinstance(value, list) else "{}")
                continue
            pad = " " * (indent * (level + 1))
            opener, closer = ("[", "]") if isinstance(value, list) else ("{", "}")
            pieces: list[str | tuple[object, int]] = [opener + "\n"]
            if isinstance(value, list):
                for i, x in enumerate(value):
                    pieces.append((",\n" if i > 0 else "") + pad)
                    pieces.append((x, level + 1))
            else:
                for i, (k, v) in enumerate(value.items()):
                    pieces.append((",\n" if i > 0 else "") + pad + '"' + str(k) + '": ')
                    pieces.append((v, level + 1))
            pieces.append("\n" + " " * (indent * level) + closer)
            stack.extend(reversed(pieces))
        else:
            raise TypeError("cannot write " + type(value).__name__ + " as JSON")
    return "".join(out)
