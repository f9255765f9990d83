import math
from typing import Optional

from ..core.node import Node
from ..core.operators import COMMUTATIVE_KINDS
from .tree_utils import reduce_to_binary


def is_equal(first: Optional[Node], second: Optional[Node]) -> bool:
  """Structural equality, tolerant to swapping the two operands of a commutative node.

  Both trees are compared in binary form. The swap is pairwise only: a
  re-associated chain or a permutation of three or more operands can compare
  unequal. Minus, Divide, Power and the functions are compared positionally.
  """
  if first is None and second is None:
    return True
  if first is None or second is None:
    return False
  return _is_equal_binary(reduce_to_binary(first), reduce_to_binary(second))


def _is_equal_binary(first: Node, second: Node) -> bool:
  if first is second:
    return True
  if not _same_attributes(first, second):
    return False

  left_children, right_children = first.children, second.children
  if len(left_children) != len(right_children):
    return False

  if len(left_children) == 2 and first.kind in COMMUTATIVE_KINDS:
    a, b = left_children
    c, d = right_children
    return ((_is_equal_binary(a, c) and _is_equal_binary(b, d))
            or (_is_equal_binary(a, d) and _is_equal_binary(b, c)))

  return all(_is_equal_binary(a, b) for a, b in zip(left_children, right_children))


def _same_attributes(first: Node, second: Node) -> bool:
  if first.kind != second.kind:
    return False
  left_payload, right_payload = first.payload(), second.payload()
  if left_payload == right_payload:
    return True
  # NaN literals: treat as the same value so the fixed-point loop can settle
  return (len(left_payload) == 1 and len(right_payload) == 1
          and isinstance(left_payload[0], float) and isinstance(right_payload[0], float)
          and math.isnan(left_payload[0]) and math.isnan(right_payload[0]))
