import pytest

from symbolic_calculus import (
    ExpressionValidator, ExpressionDepthError, InvalidExpressionError, MAX_EXPRESSION_DEPTH,
    variable, plus, function
)


def _nested(depth):
    tree = variable('x')
    for _ in range(depth - 1):
        tree = function('sin', tree)
    return tree


def test_valid_tree_returned():
    tree = plus('x', function('cos', 'y'))
    assert ExpressionValidator.validate(tree) is tree
    assert ExpressionValidator.is_valid_expression(tree)


def test_non_node_rejected():
    with pytest.raises(InvalidExpressionError):
        ExpressionValidator.validate("x")


def test_depth_limit():
    assert ExpressionValidator.is_valid_expression(_nested(MAX_EXPRESSION_DEPTH))
    assert not ExpressionValidator.is_valid_expression(_nested(MAX_EXPRESSION_DEPTH + 1))
    with pytest.raises(ExpressionDepthError) as excinfo:
        ExpressionValidator.validate(_nested(12), max_depth=10)
    assert excinfo.value.depth == 12
    assert excinfo.value.max_depth == 10


def test_depth_counts_binarized_chains():
    # 30 operands in one Plus become a 30-level chain
    wide = plus(*[variable(f"x{i}") for i in range(30)])
    assert ExpressionValidator.is_valid_expression(wide, max_depth=30)
    assert not ExpressionValidator.is_valid_expression(wide, max_depth=29)
