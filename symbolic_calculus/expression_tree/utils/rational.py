"""Detection and GCD reduction of the syntactic fraction shapes.

Only four shapes are recognised:

    (a)  rational literal                      3/4
    (b)  Divide(Integer, Integer)              6 / 8
    (c)  Times(Integer, Power(Integer, -k))    3 * 2^(-3)  ->  3/8
    (d)  Times(Integer, Rational)              2 * (3/8)   ->  3/4

Anything else, including algebraically equal forms, is returned untouched.
"""

from math import gcd
from typing import Tuple

from ..core.node import Node, IntegerNode, RationalNode
from ..core.operators import NodeType, POWER_KINDS
from ..core.errors import InvalidExpressionError

# Shape (c) is only recognised while base^k stays a 64-bit integer
_RECIPROCAL_POWER_LIMIT = 64
_INT64_LIMIT = 2 ** 63


def is_rational_form(node: Node) -> bool:
  kind = node.kind
  if kind == NodeType.RATIONAL:
    return True
  if kind == NodeType.DIVIDE:
    left, right = node.children
    return left.is_integer() and right.is_integer() and right.value != 0
  if kind == NodeType.TIMES and len(node.children) == 2 and node.left.is_integer():
    right = node.right
    if right.kind in POWER_KINDS:
      return _is_reciprocal_power(right)
    return right.kind == NodeType.RATIONAL
  return False


def _is_reciprocal_power(node: Node) -> bool:
  """Integer base (non-zero) raised to a negative integer, with base^k in range"""
  base, exponent = node.children
  if not (base.is_integer() and exponent.is_integer()
          and exponent.value < 0 and base.value != 0):
    return False
  k = -exponent.value
  return k <= _RECIPROCAL_POWER_LIMIT and abs(base.value) ** k < _INT64_LIMIT


def _numerator_denominator(node: Node) -> Tuple[int, int]:
  kind = node.kind
  if kind == NodeType.RATIONAL:
    return node.numerator, node.denominator
  if kind == NodeType.DIVIDE:
    return node.left.value, node.right.value
  coefficient, right = node.children
  if right.kind == NodeType.RATIONAL:
    return coefficient.value * right.numerator, right.denominator
  base, exponent = right.children
  return coefficient.value, base.value ** (-exponent.value)


def reduced_number(numerator: int, denominator: int) -> Node:
  """Integer or Rational literal for numerator/denominator in lowest terms"""
  numerator, denominator = int(numerator), int(denominator)
  if denominator == 0:
    raise InvalidExpressionError(f"rational {numerator}/0 has a zero denominator")
  if denominator < 0:
    numerator, denominator = -numerator, -denominator
  divisor = gcd(numerator, denominator)
  numerator //= divisor
  denominator //= divisor
  if denominator == 1:
    return IntegerNode(numerator)
  return RationalNode(numerator, denominator)


def reduce_fraction(node: Node) -> Node:
  """Reduce a recognised fraction shape; other shapes come back unchanged"""
  if not is_rational_form(node):
    return node
  numerator, denominator = _numerator_denominator(node)
  return reduced_number(numerator, denominator)
