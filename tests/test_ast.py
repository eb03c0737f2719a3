"""Tests for AST traversal helpers."""

from polylang.ast import Add, Call, Const, Mul, Pow, Sub, Var, children, fold, walk


def test_children_left_to_right():
    x = Var("x", 1)
    assert children(Sub(x, Const(1))) == (x, Const(1))
    assert children(Pow(x, 2)) == (x,)
    assert children(Call("f", (Const(1), x), 1)) == (Const(1), x)
    assert children(x) == ()


def test_walk_is_preorder():
    expr = Add(Mul(Var("a", 1), Var("b", 1)), Call("f", (Var("c", 1),), 1))
    names = [n.name for n in walk(expr) if isinstance(n, Var)]
    assert names == ["a", "b", "c"]
    assert isinstance(next(walk(expr)), Add)


def test_fold_counts_nodes():
    expr = Add(Mul(Var("a", 1), Const(2)), Pow(Var("b", 1), 3))
    assert fold(expr, lambda node, counts: 1 + sum(counts)) == 6


def test_fold_handles_deep_chains():
    expr = Const(1)
    for _ in range(5000):
        expr = Add(expr, Const(1))
    assert fold(expr, lambda node, vals: node.value if isinstance(node, Const) else sum(vals)) == 5001
