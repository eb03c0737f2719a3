"""Tests for the execution engine."""

import pytest

from polylang import parse
from polylang.ast import Add, Call, Const, Mul, Pow, Sub, Var, wrap_int
from polylang.context import Context
from polylang.runtime import Memory, Runtime, RuntimeFault, SymbolTable, call_poly, evaluate, run


def _ctx(poly: str, execute: str, inputs: str = "1") -> Context:
    return parse("TASKS 2\nPOLY " + poly + "\nEXECUTE " + execute + "\nINPUTS " + inputs)


def test_wrap_int():
    assert wrap_int(2**31) == -(2**31)
    assert wrap_int(-(2**31) - 1) == 2**31 - 1
    assert wrap_int(5) == 5


def test_slots_follow_execution_order():
    ctx = _ctx("f(x) = x;", "OUTPUT c; INPUT a; b = f(a); OUTPUT a;", "3")
    rt = Runtime(ctx)
    rt.run()
    assert rt.symbols.slots == {"c": 0, "a": 1, "b": 2}
    assert rt.memory.load(1) == 3
    assert rt.memory.load(2) == 3


def test_output_lines():
    ctx = _ctx("f(x) = x + 1;", "INPUT a; OUTPUT a; b = f(a); OUTPUT b;", "41")
    assert run(ctx) == ["41", "42"]


def test_assignment_sees_only_allocated_variables():
    ctx = _ctx("f(x) = x;", "a = b + 1; OUTPUT a;")
    assert run(ctx) == ["1"]


def test_callee_does_not_see_caller_variables():
    ctx = _ctx("f(x) = x;", "INPUT x; INPUT y; z = f(y); OUTPUT z;", "5 9")
    assert run(ctx) == ["9"]


def test_input_exhausted():
    ctx = _ctx("f(x) = x;", "INPUT a; INPUT b;", "1")
    rt = Runtime(ctx)
    with pytest.raises(RuntimeFault) as exc:
        rt.run()
    assert exc.value.msg == "input exhausted"
    assert rt.next_input == 1


def test_memory_capacity():
    memory = Memory(2)
    symbols = SymbolTable(memory)
    symbols.slot("a")
    symbols.slot("b")
    assert symbols.slot("a") == 0
    with pytest.raises(RuntimeFault):
        symbols.slot("c")


def test_memory_store_wraps():
    memory = Memory(1)
    memory.store(0, 2**32 + 7)
    assert memory.load(0) == 7


def test_evaluate_operators():
    env = {"x": 3, "y": -2}
    ctx = Context()
    assert evaluate(Add(Var("x", 1), Var("y", 1)), env, ctx) == 1
    assert evaluate(Sub(Var("x", 1), Var("y", 1)), env, ctx) == 5
    assert evaluate(Mul(Var("x", 1), Var("y", 1)), env, ctx) == -6
    assert evaluate(Pow(Var("y", 1), 3), env, ctx) == -8
    assert evaluate(Pow(Var("y", 1), 0), env, ctx) == 1
    assert evaluate(Var("missing", 1), env, ctx) == 0


def test_power_wraps_like_repeated_multiplication():
    ctx = Context()
    assert evaluate(Pow(Const(3), 21), {}, ctx) == wrap_int(3**21)
    assert evaluate(Pow(Const(-7), 13), {}, ctx) == wrap_int((-7) ** 13)


def test_unknown_polynomial_evaluates_to_zero():
    ctx = Context()
    assert evaluate(Call("nope", (Const(1),), 1), {}, ctx) == 0


def test_missing_arguments_default_to_zero():
    ctx = _ctx("g(a, b) = a + b + 1;", "OUTPUT z;")
    assert call_poly("g", [4], ctx) == 5


def test_nested_call_evaluation():
    ctx = _ctx("f(x) = x^2; g(x, y) = x - y;", "OUTPUT z;")
    expr = Call("g", (Call("f", (Const(3),), 1), Const(1)), 1)
    assert evaluate(expr, {}, ctx) == 8


def test_long_chains_evaluate():
    ctx = _ctx("f(x) = " + " + ".join(["x"] * 1500) + ";", "OUTPUT z;")
    assert call_poly("f", [2], ctx) == 3000
    ctx = _ctx("f(x) = " + " - ".join(["x"] * 1501) + ";", "OUTPUT z;")
    assert call_poly("f", [2], ctx) == 2
    ctx = _ctx("f(x) = " + " ".join(["x"] * 1500) + ";", "OUTPUT z;")
    assert call_poly("f", [1], ctx) == 1
