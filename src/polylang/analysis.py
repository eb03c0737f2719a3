"""Static analyses over the parsed program.

Each pass is a read-only walk: polynomial degrees, reads of uninitialized
variables, and assignments whose value is never used.
"""

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
    Pow,
    Sub,
    Var,
    fold,
    walk,
)
from .context import Context

WARN_UNINITIALIZED = 1
WARN_USELESS = 2


def warning_line(code: int, lines: list[int]) -> str:
    out = "Warning Code " + str(code) + ":"
    for line in lines:
        out += " " + str(line)
    return out


# ============================================================
# DEGREE
# ============================================================


def degree(expr: Expr) -> int:
    """Degree of a polynomial body; calls count as constants."""
    return fold(expr, _degree_of)


def _degree_of(node: Expr, child_degrees: list[int]) -> int:
    if isinstance(node, (Const, Call)):
        return 0
    if isinstance(node, Var):
        return 1
    if isinstance(node, (Add, Sub)):
        return max(child_degrees[0], child_degrees[1])
    if isinstance(node, Mul):
        return child_degrees[0] + child_degrees[1]
    if isinstance(node, Pow):
        return child_degrees[0] * node.exponent
    raise TypeError("unknown expression node: " + type(node).__name__)


def poly_degrees(ctx: Context) -> list[tuple[str, int]]:
    """(name, degree) per declared polynomial, in declaration order."""
    return [(d.name, degree(d.body)) for d in ctx.decls_in_order()]


# ============================================================
# EXPRESSION READS
# ============================================================


def _var_refs(expr: Expr) -> list[Var]:
    """Every variable occurrence in expr, left to right."""
    return [node for node in walk(expr) if isinstance(node, Var)]


def _expr_reads(name: str, expr: Expr) -> bool:
    """Check if expression reads the variable."""
    for ref in _var_refs(expr):
        if ref.name == name:
            return True
    return False


# ============================================================
# UNINITIALIZED USE
# ============================================================


def uninitialized_uses(ctx: Context) -> list[int]:
    """Lines of right-hand-side reads of variables not yet assigned or input."""
    initialized: set[str] = set()
    lines: list[int] = []
    for stmt in ctx.stmts:
        if isinstance(stmt, InputStmt):
            initialized.add(stmt.var)
        elif isinstance(stmt, AssignStmt):
            for ref in _var_refs(stmt.value):
                if ref.name not in initialized:
                    lines.append(ref.line)
            initialized.add(stmt.var)
    return sorted(lines)


# ============================================================
# USELESS ASSIGNMENT
# ============================================================


def _assignment_used(ctx: Context, index: int) -> bool:
    """Check if the value stored by stmts[index] is read before being overwritten."""
    var = ctx.stmts[index].var
    for stmt in ctx.stmts[index + 1 :]:
        if isinstance(stmt, AssignStmt):
            if _expr_reads(var, stmt.value):
                return True
            if stmt.var == var:
                return False
        elif isinstance(stmt, InputStmt):
            if stmt.var == var:
                return False
        elif isinstance(stmt, OutputStmt):
            if stmt.var == var:
                return True
    return False


def useless_assignments(ctx: Context) -> list[int]:
    """Lines of assignments whose value no later statement reads."""
    lines: list[int] = []
    for i, stmt in enumerate(ctx.stmts):
        if isinstance(stmt, AssignStmt) and not _assignment_used(ctx, i):
            lines.append(stmt.line)
    return sorted(lines)
