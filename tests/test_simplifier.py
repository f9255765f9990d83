import math

import pytest

from symbolic_calculus import (
    NodeType, IntegerNode, RealNode, RationalNode, OpNode, variable, rational, real, plus, minus,
    times, divide, power, function, piecewise, simplify, simplify_to_fixed_point,
    differentiate, is_equal, ExpressionDepthError, E
)
from symbolic_calculus.expression_tree.utils.simplifier import ExpressionSimplifier
from symbolic_calculus.expression_tree.utils.tree_utils import get_all_nodes
from symbolic_calculus.logging_system import LogLevel, configure_logging

x, y = variable('x'), variable('y')


# ----------------------------------------------------------------------
# Legacy single pass
# ----------------------------------------------------------------------

def test_identities():
    assert simplify(plus(x, 0)) == x
    assert simplify(plus(0, x)) == x
    assert simplify(minus(x, 0)) == x
    assert simplify(times(x, 1)) == x
    assert simplify(times(1, x)) == x
    assert simplify(divide(x, 1)) == x
    assert simplify(power(x, 1)) == x
    assert simplify(power(x, 0)) == IntegerNode(1)
    assert simplify(power(0, x)) == IntegerNode(0)
    assert simplify(power(1, x)) == IntegerNode(1)


def test_annihilators():
    assert simplify(times(x, 0)) == IntegerNode(0)
    assert simplify(times(0, function('sin', x))) == IntegerNode(0)
    assert simplify(divide(0, x)) == IntegerNode(0)


def test_constant_folding():
    assert simplify(plus(2, 3)) == IntegerNode(5)
    assert simplify(minus(7, 2)) == IntegerNode(5)
    assert simplify(times(2, 2.5)) == RealNode(5.0)
    assert simplify(divide(6, 3)) == IntegerNode(2)
    assert simplify(divide(6.0, 3)) == IntegerNode(2)
    assert simplify(power(2, 10)) == IntegerNode(1024)
    assert simplify(minus(4)) == IntegerNode(-4)


def test_uneven_division_not_folded():
    assert simplify(divide(7, 2)) == divide(7, 2)


def test_zero_over_zero_kept():
    assert simplify(divide(0, 0)) == divide(0, 0)
    assert simplify(divide(0, 0.0)) == divide(0, 0.0)


def test_zero_to_negative_power_kept():
    assert simplify(power(0, -1)) == power(0, -1)


def test_literal_placement():
    assert simplify(plus(3, x)) == plus(x, 3)
    assert simplify(times(x, 2)) == times(2, x)


def test_associative_merge():
    assert simplify(plus(2, x, 3)) == plus(x, 5)
    assert simplify(times(2, x, 3)) == times(6, x)


def test_power_of_power():
    assert simplify(function('pow', power(x, 2), 3)) == power(x, 6)
    assert simplify(function('pow', x, y)) == power(x, y)


def test_function_rules():
    assert simplify(function('ln', E)) == IntegerNode(1)
    assert simplify(function('sin', 0)) == IntegerNode(0)
    assert simplify(function('cos', 0)) == IntegerNode(1)
    assert simplify(function('tan', 0)) == IntegerNode(0)
    assert simplify(function('sin', plus(x, 0))) == function('sin', x)


def test_piecewise_conditions_untouched():
    condition = OpNode(NodeType.GT, plus(x, 0), IntegerNode(0))
    result = simplify(piecewise(plus(x, 0), condition, times(1, y)))
    assert result.children[0] == x
    assert result.children[1] is condition
    assert result.children[2] == y


def test_legacy_pass_leaves_input_alone():
    tree = plus(times(x, 1), 0)
    simplify(tree)
    assert tree == plus(times(x, 1), 0)


def test_derivative_of_cube():
    assert is_equal(simplify(differentiate(power(x, 3), 'x')), times(3, power(x, 2)))


# ----------------------------------------------------------------------
# Two-pass fixed point
# ----------------------------------------------------------------------

def test_rule_one_rewrites():
    assert ExpressionSimplifier.rule_one(minus(x, 2)) == plus(x, -2)
    assert ExpressionSimplifier.rule_one(minus(x, y)) == plus(x, times(-1, y))
    assert ExpressionSimplifier.rule_one(minus(x)) == times(-1, x)
    assert ExpressionSimplifier.rule_one(divide(x, y)) == times(x, power(y, -1))
    assert ExpressionSimplifier.rule_one(divide(x, power(y, 2))) == times(x, power(y, -2))
    assert ExpressionSimplifier.rule_one(plus(x, plus(y, 1))) == plus(x, y, 1)


def test_cancellation():
    assert simplify_to_fixed_point(minus(x, x)) == IntegerNode(0)
    assert simplify_to_fixed_point(plus(minus(x, x), 3)) == IntegerNode(3)


def test_like_terms():
    assert is_equal(simplify_to_fixed_point(plus(x, x)), times(2, x))
    assert is_equal(simplify_to_fixed_point(plus(times(2, x), times(3, x))), times(5, x))


def test_division_by_literal():
    assert is_equal(simplify_to_fixed_point(divide(x, 2)), times(rational(1, 2), x))


def test_exact_literal_accumulation():
    assert simplify_to_fixed_point(plus(rational(1, 2), rational(1, 3))) == RationalNode(5, 6)
    assert simplify_to_fixed_point(times(rational(2, 3), 3)) == IntegerNode(2)
    assert simplify_to_fixed_point(power(2, -1)) == RationalNode(1, 2)


def test_real_absorbs_rational():
    assert is_equal(simplify_to_fixed_point(plus(1, 2.5, x)), plus(x, 3.5))
    assert simplify_to_fixed_point(plus(rational(1, 2), 0.25)) == RealNode(0.75)


def test_empty_sum_and_product():
    assert simplify_to_fixed_point(plus()) == IntegerNode(0)
    assert simplify_to_fixed_point(times()) == IntegerNode(1)
    assert ExpressionSimplifier.rule_two(plus()) == IntegerNode(0)
    assert ExpressionSimplifier.rule_two(times()) == IntegerNode(1)


def _integers_fit_64_bits(tree):
    return all(-2 ** 63 <= node.value < 2 ** 63
               for node in get_all_nodes(tree) if isinstance(node, IntegerNode))


def test_large_exact_literals_become_reals():
    product = simplify_to_fixed_point(times(2 ** 40, 2 ** 40, x))
    assert is_equal(product, times(real(2.0 ** 80), x))
    total = simplify_to_fixed_point(plus(2 ** 62, 2 ** 62, x))
    assert is_equal(total, plus(x, real(2.0 ** 63)))
    assert _integers_fit_64_bits(product)
    assert _integers_fit_64_bits(total)


def test_literals_beyond_double_range_left_unfolded():
    tree = times(*([2 ** 62] * 17), 1.5, x)
    result = simplify_to_fixed_point(tree)
    assert _integers_fit_64_bits(result)
    assert not any(isinstance(node, RealNode) and not math.isfinite(node.value)
                   for node in get_all_nodes(result))
    assert is_equal(simplify_to_fixed_point(result), result)


def test_integral_real_becomes_integer():
    assert simplify_to_fixed_point(real(4.0)) == IntegerNode(4)


def test_nested_powers():
    assert is_equal(simplify_to_fixed_point(power(power(2, x), 3)), power(8, x))
    assert is_equal(simplify_to_fixed_point(power(power(x, 2), 3)), power(x, 6))
    assert is_equal(simplify_to_fixed_point(function('pow', x, y)), power(x, y))


def test_zero_product_short_circuit():
    assert simplify_to_fixed_point(times(x, function('sin', y), 0)) == IntegerNode(0)


@pytest.mark.parametrize("tree", [
    plus(x, x),
    minus(times(2, x), divide(x, 4)),
    divide(plus(x, 1), power(x, 2)),
    times(3, plus(x, 2, 5), minus(y)),
    function('sin', plus(divide(6, 8), times(x, 0))),
    differentiate(times(x, function('sin', x), function('exp', x)), 'x'),
    piecewise(minus(x, x), OpNode(NodeType.LT, x, IntegerNode(0)), divide(x, 2)),
    power(real(float('nan')), x),
])
def test_fixed_point_idempotent(tree):
    once = simplify_to_fixed_point(tree)
    twice = simplify_to_fixed_point(once)
    assert is_equal(once, twice)


def test_iteration_limit(capsys):
    configure_logging(LogLevel.MINIMAL)
    result = simplify_to_fixed_point(plus(x, x), max_iterations=1)
    assert is_equal(result, times(2, x))
    assert "without a fixed point" in capsys.readouterr().err
    with pytest.raises(ValueError):
        simplify_to_fixed_point(x, max_iterations=0)


def test_verbose_trace(capsys):
    configure_logging(LogLevel.VERBOSE)
    simplify_to_fixed_point(plus(x, 0))
    assert "fixed point reached" in capsys.readouterr().err


def test_depth_guard():
    tree = x
    for _ in range(250):
        tree = function('cos', tree)
    with pytest.raises(ExpressionDepthError):
        simplify(tree)
    with pytest.raises(ExpressionDepthError):
        simplify_to_fixed_point(tree)
    assert simplify(tree, max_depth=300) == tree
