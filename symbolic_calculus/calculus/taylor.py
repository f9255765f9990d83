from typing import Union

from ..expression_tree.core.node import Node, OpNode, IntegerNode, RealNode, VariableNode, number
from ..expression_tree.core.operators import NodeType, factorial
from ..expression_tree.utils.simplifier import ExpressionSimplifier
from ..expression_tree.utils.tree_utils import substitute_variable
from ..expression_tree.utils.validator import ExpressionValidator, MAX_EXPRESSION_DEPTH
from ..logging_system import log_debug, get_logger
from .differentiation import differentiate


def taylor_series(node: Node, variable: str, point: Union[int, float], order: int,
                  max_depth: int = MAX_EXPRESSION_DEPTH) -> Node:
  """
  Truncated Taylor polynomial of `node` around `variable = point`.

      f(x) ~ sum_{k=0}^{order} f^(k)(a) / k! * (x - a)^k

  The k-th derivative is obtained from the (k-1)-th one and simplified with
  the single-pass simplifier before it is evaluated at the point, so every
  term comes from the same differentiation sequence.

  Args:
      node: Expression to expand
      variable: Name of the expansion variable
      point: Expansion point; ints become Integer literals, floats Real
      order: Highest power kept, at least 0
      max_depth: Recursion guard passed to the transforms

  Returns:
      Plus(term_0, ..., term_order), or term_0 alone when order is 0
  """
  if order < 0:
    raise ValueError(f"Taylor order must be non-negative, got {order}")
  ExpressionValidator.validate(node, max_depth)

  at_point = number(point)
  terms = [substitute_variable(node, variable, at_point)]

  derivative = node
  for k in range(1, order + 1):
    derivative = ExpressionSimplifier.simplify(differentiate(derivative, variable, max_depth), max_depth)
    coefficient = OpNode(NodeType.DIVIDE,
                         substitute_variable(derivative, variable, at_point),
                         RealNode(factorial(k)))
    offset = OpNode(NodeType.MINUS, VariableNode(variable), at_point)
    term = OpNode(NodeType.TIMES, coefficient, OpNode(NodeType.POWER, offset, IntegerNode(k)))
    terms.append(term)
    if get_logger().is_verbose():
      log_debug(f"taylor term {k}: {term.to_string()}")

  if len(terms) == 1:
    return terms[0]
  return OpNode(NodeType.PLUS, *terms)
