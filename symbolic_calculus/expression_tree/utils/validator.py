from ..core.node import Node, RationalNode
from ..core.operators import arity_accepts, NodeType
from ..core.errors import InvalidExpressionError, ExpressionDepthError
from .tree_utils import binary_depth, get_all_nodes

# Recursion guard for the public entry points. Transforms recurse a small,
# constant number of frames per tree level.
MAX_EXPRESSION_DEPTH = 200


class ExpressionValidator:

  @staticmethod
  def is_valid_expression(node: Node, max_depth: int = MAX_EXPRESSION_DEPTH) -> bool:
    try:
      ExpressionValidator.validate(node, max_depth)
      return True
    except InvalidExpressionError:
      return False

  @staticmethod
  def validate(node: Node, max_depth: int = MAX_EXPRESSION_DEPTH) -> Node:
    """Reject a tree at the boundary where it is first accepted.

    Checks every node's arity (odd child count for piecewise), rational
    denominators, and the depth the tree reaches once binarized.
    """
    if not isinstance(node, Node):
      raise InvalidExpressionError(f"expected an expression Node, got {type(node).__name__}")

    for current in get_all_nodes(node, 'depth_first'):
      if not arity_accepts(current.kind, len(current.children)):
        if current.kind == NodeType.PIECEWISE:
          raise InvalidExpressionError(
            f"piecewise with {len(current.children)} children: expected an odd count")
        raise InvalidExpressionError(
          f"{current.kind.name} node with {len(current.children)} children")
      if isinstance(current, RationalNode) and current.denominator == 0:
        raise InvalidExpressionError(f"rational {current.numerator}/0 has a zero denominator")

    depth = binary_depth(node)
    if depth > max_depth:
      raise ExpressionDepthError(depth, max_depth)
    return node
