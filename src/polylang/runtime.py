"""Polylang runtime: executes the EXECUTE section of a checked program."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .ast import (
    INT_BITS,
    Add,
    AssignStmt,
    Call,
    Const,
    Expr,
    InputStmt,
    Mul,
    OutputStmt,
    Pow,
    Stmt,
    Sub,
    Var,
    fold,
    wrap_int,
)
from .context import Context

MEMORY_SIZE = 1000


# ============================================================
# Diagnostics
# ============================================================


class RuntimeFault(Exception):
    """Fatal condition during execution (input exhausted, memory full)."""

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg


# ============================================================
# Storage
# ============================================================


class Memory:
    """Fixed-capacity, zero-initialized integer store indexed by slot."""

    def __init__(self, size: int = MEMORY_SIZE):
        self.cells: list[int] = [0] * size

    def load(self, slot: int) -> int:
        return self.cells[slot]

    def store(self, slot: int, value: int) -> None:
        self.cells[slot] = wrap_int(value)

    def capacity(self) -> int:
        return len(self.cells)


class SymbolTable:
    """Variable name to slot, allocated in first-reference order."""

    def __init__(self, memory: Memory):
        self.memory: Memory = memory
        self.slots: dict[str, int] = {}

    def slot(self, name: str) -> int:
        if name in self.slots:
            return self.slots[name]
        loc = len(self.slots)
        if loc >= self.memory.capacity():
            raise RuntimeFault("memory exhausted allocating '" + name + "'")
        self.slots[name] = loc
        return loc

    def snapshot(self) -> dict[str, int]:
        """Current value of every allocated variable."""
        return {name: self.memory.load(loc) for name, loc in self.slots.items()}


# ============================================================
# Expression evaluation
# ============================================================


def _power(base: int, exponent: int) -> int:
    return wrap_int(pow(base, exponent, 1 << INT_BITS))


def evaluate(expr: Expr, env: Mapping[str, int], ctx: Context) -> int:
    """Evaluate expr with names bound by env; unbound names read as zero."""

    def combine(node: Expr, values: list[int]) -> int:
        if isinstance(node, Const):
            return node.value
        if isinstance(node, Var):
            return env.get(node.name, 0)
        if isinstance(node, Add):
            return wrap_int(values[0] + values[1])
        if isinstance(node, Sub):
            return wrap_int(values[0] - values[1])
        if isinstance(node, Mul):
            return wrap_int(values[0] * values[1])
        if isinstance(node, Pow):
            return _power(values[0], node.exponent)
        if isinstance(node, Call):
            return call_poly(node.name, values, ctx)
        raise TypeError("unknown expression node: " + type(node).__name__)

    return fold(expr, combine)


def call_poly(name: str, args: list[int], ctx: Context) -> int:
    """Evaluate a declared polynomial; unknown names evaluate to zero."""
    decl = ctx.lookup(name)
    if decl is None:
        return 0
    env: dict[str, int] = {}
    for i, param in enumerate(decl.params):
        env[param] = args[i] if i < len(args) else 0
    return evaluate(decl.body, env, ctx)


# ============================================================
# Statement execution
# ============================================================


@dataclass
class RunResult:
    exit_code: int
    stdout: str
    stderr: str


class Runtime:
    """Symbol table, memory store and input cursor for one execution pass."""

    def __init__(self, ctx: Context, memory_size: int = MEMORY_SIZE):
        self.ctx: Context = ctx
        self.memory: Memory = Memory(memory_size)
        self.symbols: SymbolTable = SymbolTable(self.memory)
        self.next_input: int = 0
        self.output: list[str] = []

    def read_input(self) -> int:
        if self.next_input >= len(self.ctx.inputs):
            raise RuntimeFault("input exhausted")
        value = self.ctx.inputs[self.next_input]
        self.next_input += 1
        return value

    def exec_stmt(self, stmt: Stmt) -> None:
        loc = self.symbols.slot(stmt.var)
        if isinstance(stmt, InputStmt):
            self.memory.store(loc, self.read_input())
        elif isinstance(stmt, OutputStmt):
            self.output.append(str(self.memory.load(loc)))
        elif isinstance(stmt, AssignStmt):
            env = self.symbols.snapshot()
            self.memory.store(loc, evaluate(stmt.value, env, self.ctx))
        else:
            raise TypeError("unknown statement node: " + type(stmt).__name__)

    def run(self) -> list[str]:
        for stmt in self.ctx.stmts:
            self.exec_stmt(stmt)
        return self.output


def run(ctx: Context) -> list[str]:
    """Execute the script once, returning the OUTPUT lines in order."""
    return Runtime(ctx).run()
