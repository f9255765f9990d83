"""Core expression tree components."""

from .node import (
    Node, IntegerNode, RealNode, RationalNode, VariableNode, TimeNode, ConstantNode, OpNode,
    number, integer, real, rational, variable, as_node,
    plus, minus, times, divide, power, function, piecewise, PI, E
)
from .operators import (
    NodeType, NUMBER_KINDS, LEAF_KINDS, ASSOCIATIVE_KINDS, COMMUTATIVE_KINDS, POWER_KINDS,
    BINARY_OP_MAP, FUNCTION_MAP, ARITY, arity_accepts,
    FACTORIAL_TABLE, factorial, int_ceil, int_floor, real_pow, real_exp, real_abs,
    is_integer_valued
)
from .errors import (
    ExpressionError, InvalidExpressionError, ExpressionDepthError, UnsupportedNodeKindError
)

__all__ = [
    'Node', 'IntegerNode', 'RealNode', 'RationalNode', 'VariableNode', 'TimeNode',
    'ConstantNode', 'OpNode',
    'number', 'integer', 'real', 'rational', 'variable', 'as_node',
    'plus', 'minus', 'times', 'divide', 'power', 'function', 'piecewise', 'PI', 'E',
    'NodeType', 'NUMBER_KINDS', 'LEAF_KINDS', 'ASSOCIATIVE_KINDS', 'COMMUTATIVE_KINDS',
    'POWER_KINDS', 'BINARY_OP_MAP', 'FUNCTION_MAP', 'ARITY', 'arity_accepts',
    'FACTORIAL_TABLE', 'factorial', 'int_ceil', 'int_floor', 'real_pow', 'real_exp',
    'real_abs', 'is_integer_valued',
    'ExpressionError', 'InvalidExpressionError', 'ExpressionDepthError',
    'UnsupportedNodeKindError'
]
