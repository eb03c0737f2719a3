"""Compilation context built by the parser and read by every later phase."""

from __future__ import annotations

from dataclasses import dataclass, field

from .ast import Expr, PolyDecl, PolyHeader, Stmt

TASK_EXECUTE = 2
TASK_UNINITIALIZED = 3
TASK_USELESS = 4
TASK_DEGREES = 5


@dataclass
class Context:
    """Declaration table, script, inputs, and semantic findings for one run."""

    tasks: set[int] = field(default_factory=set)
    polys: dict[str, PolyDecl] = field(default_factory=dict)
    stmts: list[Stmt] = field(default_factory=list)
    inputs: list[int] = field(default_factory=list)
    duplicate_lines: list[int] = field(default_factory=list)
    invalid_monomial_lines: list[int] = field(default_factory=list)
    undeclared_call_lines: list[int] = field(default_factory=list)
    arity_mismatch_lines: list[int] = field(default_factory=list)

    def selected(self, task: int) -> bool:
        return task in self.tasks

    def declare(self, header: PolyHeader, body: Expr) -> None:
        """Record a declaration; later declarations of a name only log their line."""
        if header.name in self.polys:
            self.duplicate_lines.append(header.line)
            return
        self.polys[header.name] = PolyDecl(header.name, header.line, header.params, body)

    def lookup(self, name: str) -> PolyDecl | None:
        return self.polys.get(name)

    def decls_in_order(self) -> list[PolyDecl]:
        """Declarations ordered by first-declaration line, then name."""
        return sorted(self.polys.values(), key=lambda d: (d.line, d.name))
