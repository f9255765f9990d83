"""
Symbolic differentiation

Each node kind maps to one derivative rule in `_RULES`. The dispatcher
binarizes its input, returns 0 for any subtree that does not mention the
target variable, and binarizes the tree each rule builds.

Approximations (documented behaviour, not defects):
    |u|              -> du * u / |u|     undefined where u == 0
    ceiling, floor   -> 0                wrong where u crosses an integer
    factorial(n)     -> derivative of Stirling's sqrt(2*pi*n) * (n/e)^n
"""

from typing import Callable, Dict

from ..expression_tree.core.node import Node, OpNode, IntegerNode, PI, E
from ..expression_tree.core.operators import NodeType
from ..expression_tree.core.errors import UnsupportedNodeKindError
from ..expression_tree.utils.tree_utils import reduce_to_binary, contains_variable
from ..expression_tree.utils.validator import ExpressionValidator, MAX_EXPRESSION_DEPTH
from ..logging_system import log_approximation

DerivativeRule = Callable[[Node, str], Node]

_RULES: Dict[NodeType, DerivativeRule] = {}


def _rule(*kinds: NodeType):
  def register(func: DerivativeRule) -> DerivativeRule:
    for kind in kinds:
      _RULES[kind] = func
    return func
  return register


def differentiate(node: Node, variable: str, max_depth: int = MAX_EXPRESSION_DEPTH) -> Node:
  """d(node)/d(variable) as a new binary tree.

  Raises:
      UnsupportedNodeKindError: a node kind without a derivative rule
          depends on the variable.
      InvalidExpressionError: the tree fails validation.
  """
  ExpressionValidator.validate(node, max_depth)
  return _differentiate(node, variable)


def supported_kinds() -> frozenset:
  """Node kinds with a derivative rule"""
  return frozenset(_RULES)


def _differentiate(node: Node, variable: str) -> Node:
  tree = reduce_to_binary(node)
  # constant rule, also the base case of the recursion
  if not contains_variable(tree, variable):
    return IntegerNode(0)

  rule = _RULES.get(tree.kind)
  if rule is None:
    raise UnsupportedNodeKindError(tree.kind)
  return reduce_to_binary(rule(tree, variable))


# Small builders keep the rules close to the formulas they implement

def _n(value: int) -> IntegerNode:
  return IntegerNode(value)


def _plus(*args: Node) -> OpNode:
  return OpNode(NodeType.PLUS, *args)


def _minus(left: Node, right: Node) -> OpNode:
  return OpNode(NodeType.MINUS, left, right)


def _times(*args: Node) -> OpNode:
  return OpNode(NodeType.TIMES, *args)


def _divide(left: Node, right: Node) -> OpNode:
  return OpNode(NodeType.DIVIDE, left, right)


def _power(base: Node, exponent: Node) -> OpNode:
  return OpNode(NodeType.POWER, base, exponent)


def _square(u: Node) -> OpNode:
  return _power(u, _n(2))


def _sqrt(u: Node) -> OpNode:
  return OpNode(NodeType.ROOT, _n(2), u)


def _call(kind: NodeType, *args: Node) -> OpNode:
  return OpNode(kind, *args)


# ----------------------------------------------------------------------
# Variables and arithmetic
# ----------------------------------------------------------------------

@_rule(NodeType.NAME)
def _d_name(node: Node, variable: str) -> Node:
  # only reached when the name is the target
  return _n(1)


@_rule(NodeType.PLUS)
def _d_plus(node: Node, variable: str) -> Node:
  u, v = node.children
  return _plus(_differentiate(u, variable), _differentiate(v, variable))


@_rule(NodeType.MINUS)
def _d_minus(node: Node, variable: str) -> Node:
  if len(node.children) == 1:
    return OpNode(NodeType.MINUS, _differentiate(node.left, variable))
  u, v = node.children
  return _minus(_differentiate(u, variable), _differentiate(v, variable))


@_rule(NodeType.TIMES)
def _d_times(node: Node, variable: str) -> Node:
  # d(u*v) = u*dv + v*du
  u, v = node.children
  return _plus(_times(u, _differentiate(v, variable)),
               _times(v, _differentiate(u, variable)))


@_rule(NodeType.DIVIDE)
def _d_divide(node: Node, variable: str) -> Node:
  u, v = node.children
  du = _differentiate(u, variable)
  if not contains_variable(v, variable):
    return _divide(du, v)
  # d(u/v) = (du*v - u*dv) / v^2
  numerator = _minus(_times(du, v), _times(u, _differentiate(v, variable)))
  return _divide(numerator, _square(v))


@_rule(NodeType.POWER, NodeType.FUNCTION_POWER)
def _d_power(node: Node, variable: str) -> Node:
  # d(u^v) = v * u^(v-1) * du + u^v * ln(u) * dv
  u, v = node.children
  du = _differentiate(u, variable)
  dv = _differentiate(v, variable)
  return _plus(_times(v, _power(u, _minus(v, _n(1))), du),
               _times(_power(u, v), _call(NodeType.LN, u), dv))


@_rule(NodeType.ROOT)
def _d_root(node: Node, variable: str) -> Node:
  # root(n, u) = u^(1/n)
  degree, u = node.children
  return _differentiate(_power(u, _divide(_n(1), degree)), variable)


# ----------------------------------------------------------------------
# Trigonometric
# ----------------------------------------------------------------------

@_rule(NodeType.SIN)
def _d_sin(node: Node, variable: str) -> Node:
  u = node.left
  return _times(_differentiate(u, variable), _call(NodeType.COS, u))


@_rule(NodeType.COS)
def _d_cos(node: Node, variable: str) -> Node:
  u = node.left
  return _times(_times(_n(-1), _differentiate(u, variable)), _call(NodeType.SIN, u))


@_rule(NodeType.TAN)
def _d_tan(node: Node, variable: str) -> Node:
  u = node.left
  return _times(_differentiate(u, variable), _square(_call(NodeType.SEC, u)))


@_rule(NodeType.SEC)
def _d_sec(node: Node, variable: str) -> Node:
  u = node.left
  return _times(_differentiate(u, variable),
                _times(_call(NodeType.SEC, u), _call(NodeType.TAN, u)))


@_rule(NodeType.CSC)
def _d_csc(node: Node, variable: str) -> Node:
  u = node.left
  return _times(_n(-1), _differentiate(u, variable),
                _call(NodeType.CSC, u), _call(NodeType.COT, u))


@_rule(NodeType.COT)
def _d_cot(node: Node, variable: str) -> Node:
  # -du * csc(u)^2 = du * (-1 / sin(u)^2)
  u = node.left
  return _times(_differentiate(u, variable),
                _divide(_n(-1), _square(_call(NodeType.SIN, u))))


# ----------------------------------------------------------------------
# Hyperbolic
# ----------------------------------------------------------------------

@_rule(NodeType.SINH)
def _d_sinh(node: Node, variable: str) -> Node:
  u = node.left
  return _times(_differentiate(u, variable), _call(NodeType.COSH, u))


@_rule(NodeType.COSH)
def _d_cosh(node: Node, variable: str) -> Node:
  u = node.left
  return _times(_differentiate(u, variable), _call(NodeType.SINH, u))


@_rule(NodeType.TANH)
def _d_tanh(node: Node, variable: str) -> Node:
  u = node.left
  return _times(_differentiate(u, variable), _square(_call(NodeType.SECH, u)))


@_rule(NodeType.SECH)
def _d_sech(node: Node, variable: str) -> Node:
  u = node.left
  return _times(_n(-1), _differentiate(u, variable),
                _call(NodeType.SECH, u), _call(NodeType.TANH, u))


@_rule(NodeType.CSCH)
def _d_csch(node: Node, variable: str) -> Node:
  u = node.left
  return _times(_n(-1), _differentiate(u, variable),
                _call(NodeType.CSCH, u), _call(NodeType.COTH, u))


@_rule(NodeType.COTH)
def _d_coth(node: Node, variable: str) -> Node:
  # -du * csch(u)^2 = du * (-1 / sinh(u)^2)
  u = node.left
  return _times(_differentiate(u, variable),
                _divide(_n(-1), _square(_call(NodeType.SINH, u))))


# ----------------------------------------------------------------------
# Inverse trigonometric
# ----------------------------------------------------------------------

@_rule(NodeType.ARCSIN)
def _d_arcsin(node: Node, variable: str) -> Node:
  # du / sqrt(1 - u^2)
  u = node.left
  return _divide(_differentiate(u, variable), _sqrt(_minus(_n(1), _square(u))))


@_rule(NodeType.ARCCOS)
def _d_arccos(node: Node, variable: str) -> Node:
  # -du / sqrt(1 - u^2)
  u = node.left
  return _divide(_times(_n(-1), _differentiate(u, variable)),
                 _sqrt(_minus(_n(1), _square(u))))


@_rule(NodeType.ARCTAN)
def _d_arctan(node: Node, variable: str) -> Node:
  # du / (1 + u^2)
  u = node.left
  return _divide(_differentiate(u, variable), _plus(_n(1), _square(u)))


@_rule(NodeType.ARCSEC)
def _d_arcsec(node: Node, variable: str) -> Node:
  # du / (|u| * sqrt(u^2 - 1))
  u = node.left
  return _divide(_differentiate(u, variable),
                 _times(_call(NodeType.ABS, u), _sqrt(_minus(_square(u), _n(1)))))


@_rule(NodeType.ARCCSC)
def _d_arccsc(node: Node, variable: str) -> Node:
  # -du / (|u| * sqrt(u^2 - 1))
  u = node.left
  return _times(_n(-1),
                _divide(_differentiate(u, variable),
                        _times(_call(NodeType.ABS, u), _sqrt(_minus(_square(u), _n(1))))))


@_rule(NodeType.ARCCOT)
def _d_arccot(node: Node, variable: str) -> Node:
  # -du / (1 + u^2)
  u = node.left
  return _times(_n(-1), _divide(_differentiate(u, variable), _plus(_n(1), _square(u))))


# ----------------------------------------------------------------------
# Inverse hyperbolic
# ----------------------------------------------------------------------

@_rule(NodeType.ARCSINH)
def _d_arcsinh(node: Node, variable: str) -> Node:
  # du / sqrt(1 + u^2)
  u = node.left
  return _divide(_differentiate(u, variable), _sqrt(_plus(_n(1), _square(u))))


@_rule(NodeType.ARCCOSH)
def _d_arccosh(node: Node, variable: str) -> Node:
  # du / sqrt(u^2 - 1)
  u = node.left
  return _divide(_differentiate(u, variable), _sqrt(_minus(_square(u), _n(1))))


@_rule(NodeType.ARCTANH, NodeType.ARCCOTH)
def _d_arctanh(node: Node, variable: str) -> Node:
  # du / (1 - u^2), same closed form for arctanh and arccoth
  u = node.left
  return _divide(_differentiate(u, variable), _minus(_n(1), _square(u)))


@_rule(NodeType.ARCSECH)
def _d_arcsech(node: Node, variable: str) -> Node:
  # -du / (u * sqrt(1 - u^2))
  u = node.left
  return _times(_n(-1),
                _divide(_differentiate(u, variable),
                        _times(u, _sqrt(_minus(_n(1), _square(u))))))


@_rule(NodeType.ARCCSCH)
def _d_arccsch(node: Node, variable: str) -> Node:
  # -du / (|u| * sqrt(1 + u^2))
  u = node.left
  return _times(_n(-1),
                _divide(_differentiate(u, variable),
                        _times(_call(NodeType.ABS, u), _sqrt(_plus(_square(u), _n(1))))))


# ----------------------------------------------------------------------
# Exponential and logarithms
# ----------------------------------------------------------------------

@_rule(NodeType.EXP)
def _d_exp(node: Node, variable: str) -> Node:
  return _times(_differentiate(node.left, variable), node)


@_rule(NodeType.LN)
def _d_ln(node: Node, variable: str) -> Node:
  u = node.left
  return _divide(_differentiate(u, variable), u)


@_rule(NodeType.LOG)
def _d_log(node: Node, variable: str) -> Node:
  base, u = node.children
  if contains_variable(base, variable):
    # log_b(u) = ln(u) / ln(b) when the base moves too
    return _differentiate(_divide(_call(NodeType.LN, u), _call(NodeType.LN, base)), variable)
  # du / (u * ln(b))
  return _divide(_differentiate(u, variable), _times(u, _call(NodeType.LN, base)))


# ----------------------------------------------------------------------
# Piecewise
# ----------------------------------------------------------------------

@_rule(NodeType.PIECEWISE)
def _d_piecewise(node: Node, variable: str) -> Node:
  children = [_differentiate(child, variable) if i % 2 == 0 else child
              for i, child in enumerate(node.children)]
  return node.with_children(children)


# ----------------------------------------------------------------------
# Approximations
# ----------------------------------------------------------------------

@_rule(NodeType.ABS)
def _d_abs(node: Node, variable: str) -> Node:
  log_approximation("|u|", "du * u / |u|, undefined where u == 0")
  u = node.left
  return _times(_differentiate(u, variable), _divide(u, node))


@_rule(NodeType.CEILING, NodeType.FLOOR)
def _d_step(node: Node, variable: str) -> Node:
  log_approximation(f"{node.kind.name.lower()}(u)", "0, wrong at integer crossings")
  return _n(0)


@_rule(NodeType.FACTORIAL)
def _d_factorial(node: Node, variable: str) -> Node:
  log_approximation("factorial(n)", "through Stirling's sqrt(2*pi*n) * (n/e)^n")
  n = node.left
  stirling = _times(_sqrt(_times(_n(2), PI, n)), _power(_divide(n, E), n))
  return _differentiate(stirling, variable)
