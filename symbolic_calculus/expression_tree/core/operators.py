import math
import numpy as np
import numba
from enum import IntEnum


class NodeType(IntEnum):
  # Numeric literals
  INTEGER = 0
  REAL = 1
  RATIONAL = 2
  # References
  NAME = 3
  NAME_TIME = 4
  # Constants
  CONSTANT_PI = 5
  CONSTANT_E = 6
  # Operators
  PLUS = 10
  MINUS = 11
  TIMES = 12
  DIVIDE = 13
  POWER = 14
  FUNCTION_POWER = 15
  # Functions
  ROOT = 20
  ABS = 21
  CEILING = 22
  FLOOR = 23
  FACTORIAL = 24
  EXP = 25
  LN = 26
  LOG = 27
  SIN = 30
  COS = 31
  TAN = 32
  SEC = 33
  CSC = 34
  COT = 35
  SINH = 36
  COSH = 37
  TANH = 38
  SECH = 39
  CSCH = 40
  COTH = 41
  ARCSIN = 42
  ARCCOS = 43
  ARCTAN = 44
  ARCSEC = 45
  ARCCSC = 46
  ARCCOT = 47
  ARCSINH = 48
  ARCCOSH = 49
  ARCTANH = 50
  ARCSECH = 51
  ARCCSCH = 52
  ARCCOTH = 53
  # Conditional
  PIECEWISE = 60
  # Relational and logical (piecewise conditions)
  EQ = 70
  NEQ = 71
  LT = 72
  GT = 73
  LEQ = 74
  GEQ = 75
  AND = 80
  OR = 81
  XOR = 82
  NOT = 83


NUMBER_KINDS = frozenset({NodeType.INTEGER, NodeType.REAL, NodeType.RATIONAL})
LEAF_KINDS = NUMBER_KINDS | {
  NodeType.NAME, NodeType.NAME_TIME, NodeType.CONSTANT_PI, NodeType.CONSTANT_E
}
ASSOCIATIVE_KINDS = frozenset({NodeType.PLUS, NodeType.TIMES})
COMMUTATIVE_KINDS = frozenset({
  NodeType.PLUS, NodeType.TIMES, NodeType.EQ, NodeType.NEQ,
  NodeType.AND, NodeType.OR, NodeType.XOR
})
POWER_KINDS = frozenset({NodeType.POWER, NodeType.FUNCTION_POWER})

# Infix spelling of the arithmetic operators and relations
BINARY_OP_MAP = {
  '+': NodeType.PLUS, '-': NodeType.MINUS, '*': NodeType.TIMES,
  '/': NodeType.DIVIDE, '^': NodeType.POWER,
  '==': NodeType.EQ, '!=': NodeType.NEQ, '<': NodeType.LT,
  '>': NodeType.GT, '<=': NodeType.LEQ, '>=': NodeType.GEQ,
}
INFIX_SYMBOLS = {kind: symbol for symbol, kind in BINARY_OP_MAP.items()}

# Prefix (function call) spelling
FUNCTION_MAP = {
  'pow': NodeType.FUNCTION_POWER, 'root': NodeType.ROOT,
  'abs': NodeType.ABS, 'ceiling': NodeType.CEILING, 'floor': NodeType.FLOOR,
  'factorial': NodeType.FACTORIAL, 'exp': NodeType.EXP,
  'ln': NodeType.LN, 'log': NodeType.LOG,
  'sin': NodeType.SIN, 'cos': NodeType.COS, 'tan': NodeType.TAN,
  'sec': NodeType.SEC, 'csc': NodeType.CSC, 'cot': NodeType.COT,
  'sinh': NodeType.SINH, 'cosh': NodeType.COSH, 'tanh': NodeType.TANH,
  'sech': NodeType.SECH, 'csch': NodeType.CSCH, 'coth': NodeType.COTH,
  'arcsin': NodeType.ARCSIN, 'arccos': NodeType.ARCCOS,
  'arctan': NodeType.ARCTAN, 'arcsec': NodeType.ARCSEC,
  'arccsc': NodeType.ARCCSC, 'arccot': NodeType.ARCCOT,
  'arcsinh': NodeType.ARCSINH, 'arccosh': NodeType.ARCCOSH,
  'arctanh': NodeType.ARCTANH, 'arcsech': NodeType.ARCSECH,
  'arccsch': NodeType.ARCCSCH, 'arccoth': NodeType.ARCCOTH,
  'piecewise': NodeType.PIECEWISE,
  'and': NodeType.AND, 'or': NodeType.OR, 'xor': NodeType.XOR,
  'not': NodeType.NOT,
}
FUNCTION_NAMES = {kind: name for name, kind in FUNCTION_MAP.items()}

UNARY_FUNCTION_KINDS = frozenset(
  kind for kind in FUNCTION_MAP.values()
  if kind not in (NodeType.FUNCTION_POWER, NodeType.ROOT, NodeType.LOG,
                  NodeType.PIECEWISE, NodeType.AND, NodeType.OR, NodeType.XOR)
)

# Allowed child counts: an int for a fixed arity, a (min, max) range where
# max None means unbounded.
ARITY = {}
for _kind in LEAF_KINDS:
  ARITY[_kind] = 0
for _kind in UNARY_FUNCTION_KINDS:
  ARITY[_kind] = 1
for _kind in (NodeType.DIVIDE, NodeType.POWER, NodeType.FUNCTION_POWER,
              NodeType.ROOT, NodeType.LOG, NodeType.EQ, NodeType.NEQ,
              NodeType.LT, NodeType.GT, NodeType.LEQ, NodeType.GEQ):
  ARITY[_kind] = 2
ARITY[NodeType.MINUS] = (1, 2)
for _kind in (NodeType.PLUS, NodeType.TIMES, NodeType.AND, NodeType.OR, NodeType.XOR):
  ARITY[_kind] = (0, None)
ARITY[NodeType.PIECEWISE] = (1, None)
del _kind


def arity_accepts(kind: NodeType, count: int) -> bool:
  """Check a child count against the ARITY table (Piecewise must also be odd)"""
  expected = ARITY[kind]
  if isinstance(expected, int):
    return count == expected
  low, high = expected
  if count < low or (high is not None and count > high):
    return False
  if kind == NodeType.PIECEWISE:
    return count % 2 == 1
  return True


# Exact in double precision up to 19!
FACTORIAL_TABLE = np.array([
  1, 1, 2, 6, 24, 120, 720, 5040, 40320, 362880, 3628800, 39916800,
  479001600, 6227020800, 87178291200, 1307674368000, 20922789888000,
  355687428096000, 6402373705728000, 121645100408832000
], dtype=np.int64)
FACTORIAL_TABLE_MAX = len(FACTORIAL_TABLE) - 1


@numba.njit(cache=True)
def _factorial_kernel(n, table):
  if n <= 19:
    return float(table[n])
  # Past 19! the product accumulates floating-point rounding error
  result = float(table[19])
  for i in range(20, n + 1):
    result *= float(i)
  return result


def factorial(n: int) -> float:
  """n! from the table, or an iterative floating-point product beyond 19!"""
  n = int(n)
  if n < 0:
    raise ValueError(f"factorial is undefined for negative n: {n}")
  return _factorial_kernel(n, FACTORIAL_TABLE)


@numba.njit(cache=True, inline='always')
def int_ceil(value):
  return np.int64(math.ceil(value))


@numba.njit(cache=True, inline='always')
def int_floor(value):
  return np.int64(math.floor(value))


@numba.njit(cache=True)
def real_pow(base, exponent):
  return np.power(np.float64(base), np.float64(exponent))


@numba.njit(cache=True)
def real_exp(value):
  return np.exp(np.float64(value))


@numba.njit(cache=True, inline='always')
def real_abs(value):
  return np.abs(np.float64(value))


@numba.njit(cache=True)
def is_integer_valued(value):
  x = np.float64(value)
  if not np.isfinite(x):
    return False
  return math.floor(x) == x
