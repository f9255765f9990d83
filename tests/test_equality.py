from symbolic_calculus import (
    NodeType, OpNode, IntegerNode, RealNode, variable, plus, minus, times, divide, power,
    function, is_equal
)

a, b, c = variable('a'), variable('b'), variable('c')


def test_none_handling():
    assert is_equal(None, None)
    assert not is_equal(None, a)
    assert not is_equal(a, None)


def test_commutative_swap():
    assert is_equal(plus(a, b), plus(b, a))
    assert is_equal(times(a, b), times(b, a))
    assert is_equal(times('x', plus('y', 1)), times(plus(1, 'y'), 'x'))


def test_non_commutative_kinds_compare_in_order():
    assert not is_equal(minus(a, b), minus(b, a))
    assert not is_equal(divide(a, b), divide(b, a))
    assert not is_equal(power(a, b), power(b, a))
    assert not is_equal(function('log', a, b), function('log', b, a))
    assert is_equal(minus(a, b), minus(a, b))


def test_swap_is_pairwise_only():
    # a + (b + c) vs a + (c + b): one swap at the inner level
    assert is_equal(plus(a, b, c), plus(a, c, b))
    # a + (b + c) vs c + (b + a): needs re-association
    assert not is_equal(plus(a, b, c), plus(c, b, a))


def test_n_ary_against_binary():
    assert is_equal(plus(a, b, c), plus(a, plus(b, c)))


def test_literal_payloads():
    assert is_equal(IntegerNode(2), IntegerNode(2))
    assert not is_equal(IntegerNode(2), IntegerNode(3))
    assert not is_equal(IntegerNode(1), RealNode(1.0))
    assert is_equal(RealNode(float('nan')), RealNode(float('nan')))
    assert not is_equal(variable('x'), variable('y'))


def test_relations():
    assert is_equal(OpNode(NodeType.EQ, a, b), OpNode(NodeType.EQ, b, a))
    assert not is_equal(OpNode(NodeType.LT, a, b), OpNode(NodeType.LT, b, a))
    assert is_equal(OpNode(NodeType.AND, a, b), OpNode(NodeType.AND, b, a))


def test_unary_minus_differs_from_binary():
    assert not is_equal(minus(a), minus(a, b))
