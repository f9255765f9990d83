import sympy as sp
from typing import Callable, Dict, Optional

from ..core.node import Node
from ..core.operators import NodeType

# One-argument functions with a direct SymPy counterpart
_SYMPY_UNARY: Dict[NodeType, Callable] = {
  NodeType.ABS: sp.Abs, NodeType.CEILING: sp.ceiling, NodeType.FLOOR: sp.floor,
  NodeType.FACTORIAL: sp.factorial, NodeType.EXP: sp.exp, NodeType.LN: sp.log,
  NodeType.SIN: sp.sin, NodeType.COS: sp.cos, NodeType.TAN: sp.tan,
  NodeType.SEC: sp.sec, NodeType.CSC: sp.csc, NodeType.COT: sp.cot,
  NodeType.SINH: sp.sinh, NodeType.COSH: sp.cosh, NodeType.TANH: sp.tanh,
  NodeType.SECH: sp.sech, NodeType.CSCH: sp.csch, NodeType.COTH: sp.coth,
  NodeType.ARCSIN: sp.asin, NodeType.ARCCOS: sp.acos, NodeType.ARCTAN: sp.atan,
  NodeType.ARCSEC: sp.asec, NodeType.ARCCSC: sp.acsc, NodeType.ARCCOT: sp.acot,
  NodeType.ARCSINH: sp.asinh, NodeType.ARCCOSH: sp.acosh, NodeType.ARCTANH: sp.atanh,
  NodeType.ARCSECH: sp.asech, NodeType.ARCCSCH: sp.acsch, NodeType.ARCCOTH: sp.acoth,
  NodeType.NOT: sp.Not,
}

_SYMPY_RELATIONS: Dict[NodeType, Callable] = {
  NodeType.EQ: sp.Eq, NodeType.NEQ: sp.Ne, NodeType.LT: sp.Lt,
  NodeType.GT: sp.Gt, NodeType.LEQ: sp.Le, NodeType.GEQ: sp.Ge,
  NodeType.AND: sp.And, NodeType.OR: sp.Or, NodeType.XOR: sp.Xor,
}


def to_sympy(node: Node, symbols: Optional[Dict[str, sp.Symbol]] = None) -> sp.Expr:
  """
  Convert an expression tree to a SymPy expression.

  Args:
      node: Tree to convert
      symbols: Optional name -> Symbol map so callers can share symbols
          (with assumptions) between conversions

  Returns:
      Equivalent SymPy expression; piecewise defaults become the (expr, True) branch
  """
  if symbols is None:
    symbols = {}
  return _convert(node, symbols)


def _symbol(name: str, symbols: Dict[str, sp.Symbol]) -> sp.Symbol:
  if name not in symbols:
    symbols[name] = sp.Symbol(name)
  return symbols[name]


def _convert(node: Node, symbols: Dict[str, sp.Symbol]) -> sp.Expr:
  kind = node.kind
  if kind == NodeType.INTEGER:
    return sp.Integer(node.value)
  if kind == NodeType.REAL:
    return sp.Float(node.value)
  if kind == NodeType.RATIONAL:
    return sp.Rational(node.numerator, node.denominator)
  if kind in (NodeType.NAME, NodeType.NAME_TIME):
    return _symbol(node.name, symbols)
  if kind == NodeType.CONSTANT_PI:
    return sp.pi
  if kind == NodeType.CONSTANT_E:
    return sp.E

  args = [_convert(child, symbols) for child in node.children]

  if kind == NodeType.PLUS:
    return sp.Add(*args)
  if kind == NodeType.MINUS:
    return -args[0] if len(args) == 1 else args[0] - args[1]
  if kind == NodeType.TIMES:
    return sp.Mul(*args)
  if kind == NodeType.DIVIDE:
    return args[0] / args[1]
  if kind in (NodeType.POWER, NodeType.FUNCTION_POWER):
    return sp.Pow(args[0], args[1])
  if kind == NodeType.ROOT:
    return sp.root(args[1], args[0])
  if kind == NodeType.LOG:
    return sp.log(args[1], args[0])
  if kind == NodeType.PIECEWISE:
    pairs = [(args[i], args[i + 1]) for i in range(0, len(args) - 1, 2)]
    pairs.append((args[-1], True))
    return sp.Piecewise(*pairs)
  if kind in _SYMPY_RELATIONS:
    return _SYMPY_RELATIONS[kind](*args)
  return _SYMPY_UNARY[kind](*args)


def sympy_equivalent(first: Node, second: Node) -> bool:
  """Algebraic equivalence through SymPy, stronger than structural equality.

  Tries the cheap strategies before sp.simplify.
  """
  symbols: Dict[str, sp.Symbol] = {}
  difference = to_sympy(first, symbols) - to_sympy(second, symbols)
  for strategy in (sp.expand, sp.trigsimp, sp.simplify):
    if strategy(difference) == 0:
      return True
  return False
