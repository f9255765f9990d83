"""Symbolic Calculus Package

Symbolic differentiation, rule-based simplification, rational reduction and
Taylor expansion over immutable expression trees.
"""

from .expression_tree import (
  Node, IntegerNode, RealNode, RationalNode, VariableNode, TimeNode, ConstantNode, OpNode,
  number, integer, real, rational, variable, as_node,
  plus, minus, times, divide, power, function, piecewise, PI, E,
  NodeType, factorial, int_ceil, int_floor, real_pow, real_exp, real_abs, is_integer_valued,
  ExpressionError, InvalidExpressionError, ExpressionDepthError, UnsupportedNodeKindError,
  reduce_to_binary, is_equal, is_rational_form, reduce_fraction,
  ExpressionValidator, ExpressionSimplifier, simplify, simplify_to_fixed_point,
  MAX_EXPRESSION_DEPTH, DEFAULT_MAX_ITERATIONS, to_sympy
)
from .calculus import differentiate, taylor_series
from .logging_system import LogLevel, configure_logging, set_log_level, get_logger

__version__ = "0.1.0"
__all__ = [
  "Node", "IntegerNode", "RealNode", "RationalNode", "VariableNode", "TimeNode",
  "ConstantNode", "OpNode",
  "number", "integer", "real", "rational", "variable", "as_node",
  "plus", "minus", "times", "divide", "power", "function", "piecewise", "PI", "E",
  "NodeType", "factorial", "int_ceil", "int_floor", "real_pow", "real_exp", "real_abs",
  "is_integer_valued",
  "ExpressionError", "InvalidExpressionError", "ExpressionDepthError",
  "UnsupportedNodeKindError",
  "reduce_to_binary", "is_equal", "is_rational_form", "reduce_fraction",
  "ExpressionValidator", "ExpressionSimplifier", "simplify", "simplify_to_fixed_point",
  "MAX_EXPRESSION_DEPTH", "DEFAULT_MAX_ITERATIONS", "to_sympy",
  "differentiate", "taylor_series",
  "LogLevel", "configure_logging", "set_log_level", "get_logger"
]
