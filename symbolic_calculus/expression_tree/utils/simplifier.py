import operator
import numpy as np
from typing import Callable, List, Optional, Sequence, Tuple

from ..core.node import Node, OpNode, IntegerNode, RealNode, RationalNode
from ..core.operators import (
  NodeType, ASSOCIATIVE_KINDS, LEAF_KINDS, POWER_KINDS, is_integer_valued, real_pow
)
from ...logging_system import log_debug, log_warning, log_transform_summary, get_logger
from .equality import is_equal
from .rational import reduce_fraction, reduced_number
from .tree_utils import reduce_to_binary
from .validator import ExpressionValidator, MAX_EXPRESSION_DEPTH

DEFAULT_MAX_ITERATIONS = 100

# Literal folding keeps integers within 64 bits; larger results become reals
_INT64_LIMIT = 2 ** 63
_EXACT_POWER_LIMIT = 64


def _value(node: Node):
  """Numeric value of a literal: int for Integer, float otherwise"""
  if node.kind == NodeType.INTEGER:
    return node.value
  if node.kind == NodeType.RATIONAL:
    return node.numerator / node.denominator
  return node.value


def _is_zero(node: Node) -> bool:
  return node.is_number() and _value(node) == 0


def _is_one(node: Node) -> bool:
  return node.is_number() and _value(node) == 1


def _integral_value(node: Node) -> Optional[int]:
  """Value of an integer-valued Integer/Real literal, None otherwise"""
  if node.kind == NodeType.INTEGER:
    return node.value
  if node.kind == NodeType.REAL and is_integer_valued(node.value):
    return int(node.value)
  return None


def _fits_int64(value: int) -> bool:
  return -_INT64_LIMIT <= value < _INT64_LIMIT


def _ratio(numerator: int, denominator: int) -> float:
  """numerator / denominator as a float, infinite when out of double range"""
  try:
    return numerator / denominator
  except OverflowError:
    return np.inf if (numerator < 0) == (denominator < 0) else -np.inf


def _bounded_number(numerator: int, denominator: int) -> Node:
  """Exact literal in lowest terms while both parts fit 64 bits, a Real otherwise"""
  reduced = reduced_number(numerator, denominator)
  if _fits_int64(reduced.numerator) and _fits_int64(reduced.denominator):
    return reduced
  return RealNode(_ratio(reduced.numerator, reduced.denominator))


def _negate_literal(node: Node) -> Node:
  if node.kind == NodeType.INTEGER:
    return IntegerNode(-node.value)
  if node.kind == NodeType.RATIONAL:
    return RationalNode(-node.numerator, node.denominator)
  return RealNode(-node.value)


def _fold_literals(left: Node, right: Node, op: Callable) -> Node:
  """Integer op Integer stays Integer, anything else is computed as a Real"""
  if left.is_integer() and right.is_integer():
    result = op(left.value, right.value)
    if _fits_int64(result):
      return IntegerNode(result)
  return RealNode(op(float(_value(left)), float(_value(right))))


def _rebuild(node: Node, children: Sequence[Node]) -> Node:
  if all(new is old for new, old in zip(children, node.children)):
    return node
  return node.with_children(children)


def _map_piecewise(node: Node, transform: Callable[[Node], Node]) -> Node:
  """Apply a transform to the expression slots only; conditions are copied"""
  children = [transform(child) if i % 2 == 0 else child
              for i, child in enumerate(node.children)]
  return _rebuild(node, children)


def _flatten(kind: NodeType, operands: Sequence[Node]) -> List[Node]:
  flat = []
  for operand in operands:
    if operand.kind == kind:
      flat.extend(operand.children)
    else:
      flat.append(operand)
  return flat


def _exact_power(base: Node, exponent: Node) -> Optional[Node]:
  """base^exponent for literals; exact for Integer/Rational base and Integer exponent"""
  if base.kind in (NodeType.INTEGER, NodeType.RATIONAL) and exponent.is_integer():
    e = exponent.value
    if abs(e) <= _EXACT_POWER_LIMIT:
      numerator, denominator = base.numerator, base.denominator
      if e < 0:
        if numerator == 0:
          return None
        numerator, denominator, e = denominator, numerator, -e
      numerator, denominator = numerator ** e, denominator ** e
      if _fits_int64(numerator) and _fits_int64(denominator):
        return reduced_number(numerator, denominator)
  value = real_pow(float(_value(base)), float(_value(exponent)))
  if not np.isfinite(value):
    return None
  return RealNode(value)


class ExpressionSimplifier:
  """Rule-based simplification: a legacy single pass and a two-pass fixed point"""

  # ------------------------------------------------------------------
  # Legacy single pass
  # ------------------------------------------------------------------

  @staticmethod
  def simplify(node: Node, max_depth: int = MAX_EXPRESSION_DEPTH) -> Node:
    """One bottom-up pass over the binarized tree.

    Not guaranteed to reach a fixed point: a second pass may find more to do.
    """
    ExpressionValidator.validate(node, max_depth)
    return ExpressionSimplifier._simplify_node(reduce_to_binary(node))

  @staticmethod
  def _simplify_node(node: Node) -> Node:
    if node.is_leaf():
      return node
    if node.kind == NodeType.PIECEWISE:
      return _map_piecewise(node, ExpressionSimplifier._simplify_node)

    children = [ExpressionSimplifier._simplify_node(child) for child in node.children]
    simplified = ExpressionSimplifier._apply_legacy_rules(node.kind, children)
    if simplified is not None:
      return simplified
    return _rebuild(node, children)

  @staticmethod
  def _apply_legacy_rules(kind: NodeType, children: List[Node]) -> Optional[Node]:
    simplify_node = ExpressionSimplifier._simplify_node

    if kind == NodeType.PLUS:
      left, right = children
      if left.is_number():
        if _is_zero(left):
          return right  # 0 + x = x
        if right.is_number():
          return _fold_literals(left, right, operator.add)
        if right.kind != NodeType.PLUS:
          return OpNode(NodeType.PLUS, right, left)  # 3 + x = x + 3
      if right.is_number() and _is_zero(right):
        return left  # x + 0 = x
      # 2 + x + 3 = x + 5
      if left.kind == NodeType.PLUS and left.right.is_number() and right.is_number():
        folded = simplify_node(OpNode(NodeType.PLUS, right, left.right))
        return OpNode(NodeType.PLUS, left.left, folded)
      if right.kind == NodeType.PLUS and right.right.is_number() and left.is_number():
        folded = simplify_node(OpNode(NodeType.PLUS, left, right.right))
        return OpNode(NodeType.PLUS, right.left, folded)
      return None

    if kind == NodeType.MINUS:
      if len(children) == 1:
        operand = children[0]
        return _negate_literal(operand) if operand.is_number() else None
      left, right = children
      if right.is_number():
        if _is_zero(right):
          return left
        if left.is_number():
          return _fold_literals(left, right, operator.sub)
      return None

    if kind == NodeType.TIMES:
      left, right = children
      if left.is_number():
        if _is_zero(left):
          return IntegerNode(0)
        if _is_one(left):
          return right
        if right.is_number():
          return _fold_literals(left, right, operator.mul)
      if right.is_number():
        if _is_zero(right):
          return IntegerNode(0)
        if _is_one(right):
          return left
        if left.kind != NodeType.TIMES:
          return OpNode(NodeType.TIMES, right, left)  # x * 2 = 2 * x
      # 2 * x * 3 = 6 * x
      if left.kind == NodeType.TIMES and left.left.is_number() and right.is_number():
        folded = simplify_node(OpNode(NodeType.TIMES, left.left, right))
        return OpNode(NodeType.TIMES, folded, left.right)
      if right.kind == NodeType.TIMES and right.left.is_number() and left.is_number():
        folded = simplify_node(OpNode(NodeType.TIMES, right.left, left))
        return OpNode(NodeType.TIMES, folded, right.right)
      return None

    if kind == NodeType.DIVIDE:
      left, right = children
      if left.is_number():
        if _is_zero(left) and not _is_zero(right):
          return IntegerNode(0)
        if right.is_number():
          numerator, denominator = _integral_value(left), _integral_value(right)
          if (numerator is not None and denominator
              and numerator % denominator == 0):
            return IntegerNode(numerator // denominator)
      if right.is_number() and _is_one(right):
        return left
      return None

    if kind in POWER_KINDS:
      base, exponent = children
      if exponent.is_number() and _is_zero(exponent):
        return IntegerNode(1)
      if base.is_number():
        if _is_zero(base) and not (exponent.is_number() and _value(exponent) < 0):
          return IntegerNode(0)
        if _is_one(base):
          return IntegerNode(1)
      if exponent.is_number() and _is_one(exponent):
        return base
      if base.is_number() and exponent.is_number():
        folded = _exact_power(base, exponent)
        if folded is not None:
          return folded
      # pow(pow(x, 2), 3) = x^6
      if base.kind in POWER_KINDS:
        product = OpNode(NodeType.TIMES, base.right, exponent)
        return simplify_node(OpNode(NodeType.POWER, base.left, product))
      if kind == NodeType.FUNCTION_POWER:
        return OpNode(NodeType.POWER, base, exponent)
      return None

    if kind == NodeType.LN:
      if children[0].kind == NodeType.CONSTANT_E:
        return IntegerNode(1)
      return None

    if kind in (NodeType.SIN, NodeType.COS, NodeType.TAN):
      if _is_zero(children[0]):
        return IntegerNode(1) if kind == NodeType.COS else IntegerNode(0)
      return None

    return None

  # ------------------------------------------------------------------
  # Two-pass fixed point
  # ------------------------------------------------------------------

  @staticmethod
  def simplify_to_fixed_point(node: Node, max_iterations: int = DEFAULT_MAX_ITERATIONS,
                              max_depth: int = MAX_EXPRESSION_DEPTH) -> Node:
    """Apply rule one then rule two until the tree stops changing.

    Returns the first tree that one more iteration leaves structurally
    equal, so a second call on the result returns it unchanged.
    """
    if max_iterations < 1:
      raise ValueError(f"max_iterations must be positive, got {max_iterations}")
    ExpressionValidator.validate(node, max_depth)

    current = node
    for iteration in range(1, max_iterations + 1):
      candidate = ExpressionSimplifier.simplify_two_pass(current)
      if is_equal(current, candidate):
        log_debug(f"fixed point reached after {iteration} iteration(s)")
        log_transform_summary("simplify_to_fixed_point", node.size(), current.size(), iteration)
        return current
      current = candidate

    log_warning(f"simplification stopped after {max_iterations} iterations without a fixed point")
    return current

  @staticmethod
  def simplify_two_pass(node: Node) -> Node:
    result = ExpressionSimplifier.rule_two(ExpressionSimplifier.rule_one(node))
    if get_logger().is_verbose():
      log_debug(f"two-pass: {node.to_string()} -> {result.to_string()}")
    return result

  @staticmethod
  def rule_one(node: Node) -> Node:
    """Flatten Plus/Times and rewrite Minus and Divide in terms of them.

    a - b -> a + (-1 * b), a / b -> a * b^(-1), a / b^k -> a * b^(-k)
    """
    if node.kind in LEAF_KINDS:
      return node
    if node.kind == NodeType.PIECEWISE:
      return _map_piecewise(node, ExpressionSimplifier.rule_one)

    children = [ExpressionSimplifier.rule_one(child) for child in node.children]
    kind = node.kind

    if kind in ASSOCIATIVE_KINDS:
      return OpNode(kind, *_flatten(kind, children))

    if kind == NodeType.MINUS:
      if len(children) == 1:
        return OpNode(NodeType.TIMES, *_flatten(NodeType.TIMES, [IntegerNode(-1), children[0]]))
      left, right = children
      if right.is_number():
        negated = _negate_literal(right)
      else:
        negated = OpNode(NodeType.TIMES, *_flatten(NodeType.TIMES, [IntegerNode(-1), right]))
      return OpNode(NodeType.PLUS, *_flatten(NodeType.PLUS, [left, negated]))

    if kind == NodeType.DIVIDE:
      left, right = children
      if right.kind in POWER_KINDS and right.right.is_number():
        reciprocal = OpNode(NodeType.POWER, right.left, _negate_literal(right.right))
      else:
        reciprocal = OpNode(NodeType.POWER, right, IntegerNode(-1))
      return OpNode(NodeType.TIMES, *_flatten(NodeType.TIMES, [left, reciprocal]))

    return _rebuild(node, children)

  @staticmethod
  def rule_two(node: Node) -> Node:
    """Fold literals in the flat Plus/Times/Power nodes left by rule one"""
    kind = node.kind
    if kind == NodeType.REAL:
      value = node.value
      if is_integer_valued(value) and _fits_int64(int(value)):
        return IntegerNode(int(value))
      return node
    if kind == NodeType.RATIONAL:
      return reduce_fraction(node)
    if node.kind in LEAF_KINDS:
      return node
    if kind == NodeType.PIECEWISE:
      return _map_piecewise(node, ExpressionSimplifier.rule_two)

    children = [ExpressionSimplifier.rule_two(child) for child in node.children]

    if kind == NodeType.PLUS:
      return ExpressionSimplifier._fold_sum(children)
    if kind == NodeType.TIMES:
      return ExpressionSimplifier._fold_product(children)
    if kind in POWER_KINDS:
      return ExpressionSimplifier._fold_power(children)
    return _rebuild(node, children)

  @staticmethod
  def _partition(children: Sequence[Node]) -> Tuple[List[Node], List[Node], List[Node]]:
    exact, reals, residue = [], [], []
    for child in children:
      if child.kind in (NodeType.INTEGER, NodeType.RATIONAL):
        exact.append(child)
      elif child.kind == NodeType.REAL:
        reals.append(child)
      else:
        residue.append(child)
    return exact, reals, residue

  @staticmethod
  def _fold_sum(children: Sequence[Node]) -> Node:
    exact, reals, residue = ExpressionSimplifier._partition(children)

    numerator, denominator = 0, 1
    for literal in exact:
      numerator = numerator * literal.denominator + literal.numerator * denominator
      denominator *= literal.denominator
    exact_sum = _bounded_number(numerator, denominator)
    inexact = list(reals)
    if exact_sum.kind == NodeType.REAL:
      inexact.append(exact_sum)
      exact_sum = IntegerNode(0)

    literal = None
    kept: List[Node] = []
    if inexact:
      # a real operand makes the whole literal part inexact
      total = sum(r.value for r in inexact) + float(_value(exact_sum))
      if not np.isfinite(total):
        kept = exact + reals  # out of double range, left unfolded
      elif total != 0.0 or not residue:
        literal = RealNode(total)
    elif exact and (not _is_zero(exact_sum) or not residue):
      literal = exact_sum

    tail = kept + ([literal] if literal is not None else [])
    if not residue:
      if not tail:
        return IntegerNode(0)
      return tail[0] if len(tail) == 1 else OpNode(NodeType.PLUS, *tail)

    # a*f(x) + b*f(x) -> (a+b)*f(x)
    if len(residue) > 1:
      collected = ExpressionSimplifier._collect_like_terms(residue)
      if collected is not None and collected.is_number():
        # x - x + 3 -> 3
        return ExpressionSimplifier._fold_sum([collected] + tail)
      if collected is not None:
        residue = [collected]

    terms = residue + tail
    if len(terms) == 1:
      return terms[0]
    return OpNode(NodeType.PLUS, *terms)

  @staticmethod
  def _split_coefficient(term: Node) -> Tuple[Node, Node]:
    if term.kind == NodeType.TIMES and len(term.children) >= 2 and term.left.is_number():
      rest = term.children[1:]
      return term.left, rest[0] if len(rest) == 1 else OpNode(NodeType.TIMES, *rest)
    return IntegerNode(1), term

  @staticmethod
  def _collect_like_terms(terms: Sequence[Node]) -> Optional[Node]:
    """(sum of coefficients) * common if every term is coefficient * common"""
    coefficients = []
    common = None
    for term in terms:
      coefficient, rest = ExpressionSimplifier._split_coefficient(term)
      if common is None:
        common = rest
      elif not is_equal(common, rest):
        return None
      coefficients.append(coefficient)
    total = ExpressionSimplifier._fold_sum(coefficients)
    return ExpressionSimplifier._fold_product([total, common])

  @staticmethod
  def _fold_product(children: Sequence[Node]) -> Node:
    exact, reals, residue = ExpressionSimplifier._partition(children)

    numerator, denominator = 1, 1
    for literal in exact:
      if literal.numerator == 0:
        return IntegerNode(0)  # x * 0 = 0
      numerator *= literal.numerator
      denominator *= literal.denominator
    for literal in reals:
      if literal.value == 0.0:
        return IntegerNode(0)
    exact_product = _bounded_number(numerator, denominator)
    inexact = list(reals)
    if exact_product.kind == NodeType.REAL:
      inexact.append(exact_product)
      exact_product = IntegerNode(1)

    literal = None
    kept: List[Node] = []
    if inexact:
      product = float(np.prod([r.value for r in inexact])) * float(_value(exact_product))
      if not np.isfinite(product):
        kept = exact + reals  # out of double range, left unfolded
      elif product != 1.0 or not residue:
        literal = RealNode(product)
    elif exact and (not _is_one(exact_product) or not residue):
      literal = exact_product

    factors = ([literal] if literal is not None else []) + kept + residue
    if not factors:
      return IntegerNode(1)
    if len(factors) == 1:
      return factors[0]
    # keep "coefficient * rest" shape for like-term collection in sums
    return reduce_to_binary(OpNode(NodeType.TIMES, *factors))

  @staticmethod
  def _fold_power(children: Sequence[Node]) -> Node:
    base, exponent = children
    if exponent.is_number() and _is_zero(exponent):
      return IntegerNode(1)  # x^0 = 1
    if base.is_number():
      if _is_zero(base) and not (exponent.is_number() and _value(exponent) < 0):
        return IntegerNode(0)  # 0^n = 0
      if _is_one(base):
        return IntegerNode(1)  # 1^n = 1
      if exponent.is_number():
        folded = _exact_power(base, exponent)
        if folded is not None:
          return folded
    if exponent.is_number() and _is_one(exponent):
      return base  # x^1 = x

    if base.kind in POWER_KINDS:
      inner_base, inner_exponent = base.children
      if inner_base.is_number() and exponent.is_number():
        # pow(pow(2, x), 3) = pow(8, x)
        folded = _exact_power(inner_base, exponent)
        if folded is not None:
          return ExpressionSimplifier.rule_two(OpNode(NodeType.POWER, folded, inner_exponent))
      # pow(pow(x, 2), 3) = pow(x, 2*3)
      product = OpNode(NodeType.TIMES, inner_exponent, exponent)
      return ExpressionSimplifier.rule_two(OpNode(NodeType.POWER, inner_base, product))

    return OpNode(NodeType.POWER, base, exponent)


def simplify(node: Node, max_depth: int = MAX_EXPRESSION_DEPTH) -> Node:
  return ExpressionSimplifier.simplify(node, max_depth)


def simplify_to_fixed_point(node: Node, max_iterations: int = DEFAULT_MAX_ITERATIONS,
                            max_depth: int = MAX_EXPRESSION_DEPTH) -> Node:
  return ExpressionSimplifier.simplify_to_fixed_point(node, max_iterations, max_depth)
