"""Utilities for expression trees."""

from .tree_utils import (
    get_all_nodes, find_nodes_by_type, calculate_tree_depth, binary_depth,
    contains_variable, get_variables, substitute_variable, reduce_to_binary
)
from .rational import is_rational_form, reduce_fraction, reduced_number
from .equality import is_equal
from .validator import ExpressionValidator, MAX_EXPRESSION_DEPTH
from .simplifier import (
    ExpressionSimplifier, simplify, simplify_to_fixed_point, DEFAULT_MAX_ITERATIONS
)
from .sympy_utils import to_sympy, sympy_equivalent

__all__ = [
    'get_all_nodes', 'find_nodes_by_type', 'calculate_tree_depth', 'binary_depth',
    'contains_variable', 'get_variables', 'substitute_variable', 'reduce_to_binary',
    'is_rational_form', 'reduce_fraction', 'reduced_number',
    'is_equal',
    'ExpressionValidator', 'MAX_EXPRESSION_DEPTH',
    'ExpressionSimplifier', 'simplify', 'simplify_to_fixed_point', 'DEFAULT_MAX_ITERATIONS',
    'to_sympy', 'sympy_equivalent'
]
