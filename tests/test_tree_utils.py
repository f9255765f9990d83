import pytest

from symbolic_calculus import (
    NodeType, IntegerNode, VariableNode, OpNode, plus, times, minus, function, piecewise,
    variable, reduce_to_binary
)
from symbolic_calculus.expression_tree.utils.tree_utils import (
    get_all_nodes, find_nodes_by_type, calculate_tree_depth, binary_depth,
    contains_variable, get_variables, substitute_variable
)


def _assert_binary(node):
    for current in get_all_nodes(node):
        if current.kind in (NodeType.PLUS, NodeType.TIMES):
            assert len(current.children) == 2


def test_right_fold():
    a, b, c, d = (variable(name) for name in 'abcd')
    result = reduce_to_binary(plus(a, b, c, d))
    expected = plus(a, plus(b, plus(c, d)))
    assert result == expected


def test_binarize_nested_children():
    tree = function('sin', times('x', 'y', 'z'))
    result = reduce_to_binary(tree)
    assert result == function('sin', times('x', times('y', 'z')))
    _assert_binary(result)


def test_binarize_idempotent():
    tree = plus(times(1, 2, 3), 'x', minus(plus('a', 'b', 'c')))
    once = reduce_to_binary(tree)
    assert reduce_to_binary(once) == once


def test_binary_tree_returned_unchanged():
    tree = plus('x', times(2, 'y'))
    assert reduce_to_binary(tree) is tree


def test_degenerate_sums_and_products():
    assert reduce_to_binary(plus()) == IntegerNode(0)
    assert reduce_to_binary(times()) == IntegerNode(1)
    assert reduce_to_binary(plus('x')) == VariableNode('x')


def test_piecewise_is_not_rechained():
    condition = OpNode(NodeType.GT, variable('x'), IntegerNode(0))
    tree = piecewise(plus('a', 'b', 'c'), condition, 'd')
    result = reduce_to_binary(tree)
    assert result.kind == NodeType.PIECEWISE
    assert len(result.children) == 3
    assert result.children[0] == plus('a', plus('b', 'c'))
    assert result.children[1] is condition


def test_binary_depth_matches_binarized_tree():
    tree = plus('a', 'b', 'c', 'd')
    assert binary_depth(tree) == 4
    assert calculate_tree_depth(reduce_to_binary(tree)) == 4
    # stored depth of the n-ary tree is only 2
    assert calculate_tree_depth(tree) == 2

    nested = function('sin', times('x', plus('y', 'z', 1), 2))
    assert binary_depth(nested) == calculate_tree_depth(reduce_to_binary(nested))


def test_traversal_orders():
    tree = plus(times(2, 'y'), 'x')
    breadth = [node.to_string() for node in get_all_nodes(tree)]
    depth = [node.to_string() for node in get_all_nodes(tree, 'depth_first')]
    assert breadth == ["((2 * y) + x)", "(2 * y)", "x", "2", "y"]
    assert depth == ["((2 * y) + x)", "(2 * y)", "2", "y", "x"]
    with pytest.raises(ValueError):
        get_all_nodes(tree, 'sideways')


def test_find_nodes_by_type():
    tree = plus(times(2, 'y'), times('x', 3))
    assert len(find_nodes_by_type(tree, NodeType.TIMES)) == 2
    assert [n.value for n in find_nodes_by_type(tree, NodeType.INTEGER)] == [2, 3]


def test_variable_queries():
    tree = plus(function('sin', 'y'), times(2, 'x'))
    assert contains_variable(tree, 'x')
    assert not contains_variable(tree, 'z')
    assert get_variables(tree) == {'x', 'y'}


def test_substitute_shares_unchanged_subtrees():
    untouched = function('sin', 'y')
    tree = plus(untouched, times(2, 'x'))
    result = substitute_variable(tree, 'x', IntegerNode(5))
    assert result == plus(untouched, times(2, 5))
    assert result.children[0] is untouched
    # input is left as it was
    assert tree == plus(function('sin', 'y'), times(2, 'x'))
    assert substitute_variable(tree, 'z', IntegerNode(1)) is tree
