"""Polylang AST: parse-time node definitions.

Nodes are frozen once built. Every node owns its children; nothing is shared
between polynomials or statements.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, TypeVar

INT_BITS = 32

T = TypeVar("T")


def wrap_int(value: int) -> int:
    """Reduce to signed INT_BITS-bit two's complement."""
    half = 1 << (INT_BITS - 1)
    return ((value + half) % (1 << INT_BITS)) - half


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True)
class Expr:
    """Base for all expressions."""


@dataclass(frozen=True)
class Const(Expr):
    """Integer literal."""

    value: int


@dataclass(frozen=True)
class Var(Expr):
    """Parameter or script variable reference."""

    name: str
    line: int


@dataclass(frozen=True)
class Add(Expr):
    """left + right."""

    left: Expr
    right: Expr


@dataclass(frozen=True)
class Sub(Expr):
    """left - right. Parsed right-associatively."""

    left: Expr
    right: Expr


@dataclass(frozen=True)
class Mul(Expr):
    """Implicit product of adjacent factors."""

    left: Expr
    right: Expr


@dataclass(frozen=True)
class Pow(Expr):
    """base ^ exponent, exponent is a literal."""

    base: Expr
    exponent: int


@dataclass(frozen=True)
class Call(Expr):
    """name(args), a polynomial evaluation."""

    name: str
    args: tuple[Expr, ...]
    line: int


def children(expr: Expr) -> tuple[Expr, ...]:
    """Direct subexpressions of expr, left to right."""
    if isinstance(expr, (Add, Sub, Mul)):
        return (expr.left, expr.right)
    if isinstance(expr, Pow):
        return (expr.base,)
    if isinstance(expr, Call):
        return expr.args
    return ()


def walk(expr: Expr) -> Iterator[Expr]:
    """Yield every node of expr in pre-order, left to right."""
    stack: list[Expr] = [expr]
    while len(stack) > 0:
        node = stack.pop()
        yield node
        stack.extend(reversed(children(node)))


def fold(expr: Expr, combine: Callable[[Expr, list[T]], T]) -> T:
    """Bottom-up fold: combine(node, results of its children) for every node.

    Uses an explicit stack, so long operator chains do not grow the Python
    call stack.
    """
    results: list[T] = []
    stack: list[tuple[Expr, bool]] = [(expr, False)]
    while len(stack) > 0:
        node, expanded = stack.pop()
        kids = children(node)
        if len(kids) > 0 and not expanded:
            stack.append((node, True))
            for kid in reversed(kids):
                stack.append((kid, False))
            continue
        start = len(results) - len(kids)
        values = results[start:]
        del results[start:]
        results.append(combine(node, values))
    return results[0]


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True)
class Stmt:
    """Base for all execution statements."""

    var: str


@dataclass(frozen=True)
class InputStmt(Stmt):
    """INPUT var;"""


@dataclass(frozen=True)
class OutputStmt(Stmt):
    """OUTPUT var;"""


@dataclass(frozen=True)
class AssignStmt(Stmt):
    """var = value;"""

    line: int
    value: Expr


# ============================================================
# DECLARATIONS
# ============================================================


@dataclass(frozen=True)
class PolyHeader:
    """name(params) as written in one declaration."""

    name: str
    line: int
    params: tuple[str, ...]


@dataclass(frozen=True)
class PolyDecl:
    """First successful declaration of a polynomial."""

    name: str
    line: int
    params: tuple[str, ...]
    body: Expr
