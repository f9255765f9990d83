import sympy as sp

from symbolic_calculus import (
    NodeType, OpNode, IntegerNode, TimeNode, variable, rational, plus, minus, times, divide,
    power, function, piecewise, to_sympy, PI
)
from symbolic_calculus.expression_tree.utils.sympy_utils import sympy_equivalent

X, Y = sp.Symbol('x'), sp.Symbol('y')
x, y = variable('x'), variable('y')


def test_arithmetic():
    assert to_sympy(plus(x, times(2, y))) == X + 2 * Y
    assert to_sympy(minus(x, y)) == X - Y
    assert to_sympy(minus(x)) == -X
    assert to_sympy(divide(x, 2)) == X / 2
    assert to_sympy(power(x, rational(1, 3))) == X ** sp.Rational(1, 3)


def test_functions():
    assert to_sympy(function('root', 3, x)) == sp.root(X, 3)
    assert to_sympy(function('log', 10, x)) == sp.log(X, 10)
    assert to_sympy(function('arccsch', x)) == sp.acsch(X)
    assert to_sympy(times(2, PI)) == 2 * sp.pi
    assert to_sympy(TimeNode()) == sp.Symbol('time')


def test_piecewise():
    condition = OpNode(NodeType.LT, x, IntegerNode(0))
    expression = to_sympy(piecewise(minus(x), condition, x))
    assert expression == sp.Piecewise((-X, X < 0), (X, True))


def test_shared_symbols():
    positive = sp.Symbol('x', positive=True)
    assert to_sympy(function('abs', x), {'x': positive}) == positive


def test_equivalence_beyond_structure():
    assert sympy_equivalent(times(2, plus(x, 1)), plus(times(2, x), 2))
    assert sympy_equivalent(plus(power(function('sin', x), 2), power(function('cos', x), 2)),
                            IntegerNode(1))
    assert not sympy_equivalent(x, y)
