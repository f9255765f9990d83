import math

import numpy as np
import pytest

from symbolic_calculus import (
    factorial, int_ceil, int_floor, real_pow, real_exp, real_abs, is_integer_valued
)
from symbolic_calculus.expression_tree.core.operators import (
    NodeType, FACTORIAL_TABLE, arity_accepts
)


def test_factorial_table_exact():
    assert len(FACTORIAL_TABLE) == 20
    for n in range(20):
        assert factorial(n) == math.factorial(n)
    assert factorial(19) == 121645100408832000


def test_factorial_beyond_table():
    assert factorial(20) == pytest.approx(2.43290200817664e18, rel=1e-12)
    assert factorial(25) == pytest.approx(math.factorial(25), rel=1e-12)


def test_factorial_negative():
    with pytest.raises(ValueError):
        factorial(-1)


def test_rounding_helpers():
    assert int_ceil(2.1) == 3
    assert int_floor(2.9) == 2
    assert int_floor(-2.1) == -3
    assert int_ceil(-2.9) == -2


def test_real_helpers():
    assert real_pow(2.0, 0.5) == pytest.approx(math.sqrt(2))
    assert real_exp(1.0) == pytest.approx(math.e)
    assert real_abs(-3.5) == 3.5


def test_is_integer_valued():
    assert is_integer_valued(3.0)
    assert is_integer_valued(-7.0)
    assert not is_integer_valued(3.5)
    assert not is_integer_valued(np.inf)
    assert not is_integer_valued(np.nan)


def test_arity_table():
    assert arity_accepts(NodeType.INTEGER, 0)
    assert arity_accepts(NodeType.SIN, 1)
    assert not arity_accepts(NodeType.SIN, 2)
    assert arity_accepts(NodeType.MINUS, 1)
    assert arity_accepts(NodeType.MINUS, 2)
    assert not arity_accepts(NodeType.MINUS, 3)
    assert arity_accepts(NodeType.PLUS, 5)
    assert arity_accepts(NodeType.PIECEWISE, 3)
    assert not arity_accepts(NodeType.PIECEWISE, 4)
