import numpy as np
import sympy as sp
from abc import ABC, abstractmethod
from typing import Optional, Tuple, Union
from .operators import (
  NodeType, NUMBER_KINDS, LEAF_KINDS, INFIX_SYMBOLS, FUNCTION_NAMES, FUNCTION_MAP,
  arity_accepts
)
from .errors import InvalidExpressionError


class Node(ABC):
  """Immutable expression tree node with hash/size caching"""

  __slots__ = ('kind', '_hash_cache', '_size_cache')

  def __init__(self, kind: NodeType):
    self.kind = kind
    self._hash_cache: Optional[int] = None
    self._size_cache: Optional[int] = None

  @property
  def children(self) -> Tuple['Node', ...]:
    return ()

  @property
  def left(self) -> Optional['Node']:
    children = self.children
    return children[0] if children else None

  @property
  def right(self) -> Optional['Node']:
    children = self.children
    return children[1] if len(children) > 1 else None

  def is_leaf(self) -> bool:
    return not self.children

  def is_number(self) -> bool:
    return self.kind in NUMBER_KINDS

  def is_integer(self) -> bool:
    return self.kind == NodeType.INTEGER

  @abstractmethod
  def to_string(self) -> str:
    pass

  @abstractmethod
  def payload(self) -> tuple:
    """Literal value / name carried by the node, compared by equality"""
    pass

  def with_children(self, children) -> 'Node':
    """Same kind with new children. Leaves have none and return themselves."""
    return self

  def to_sympy(self) -> sp.Expr:
    from ..utils.sympy_utils import to_sympy
    return to_sympy(self)

  def size(self) -> int:
    """Node count"""
    if self._size_cache is None:
      self._size_cache = 1 + sum(child.size() for child in self.children)
    return self._size_cache

  def __eq__(self, other) -> bool:
    # Exact ordered comparison; see utils.equality for the commutative one
    if self is other:
      return True
    if not isinstance(other, Node):
      return NotImplemented
    return (self.kind == other.kind
            and self.payload() == other.payload()
            and self.children == other.children)

  def __ne__(self, other) -> bool:
    result = self.__eq__(other)
    if result is NotImplemented:
      return result
    return not result

  def __hash__(self) -> int:
    if self._hash_cache is None:
      self._hash_cache = hash((self.kind, self.payload(), self.children))
    return self._hash_cache

  def __repr__(self) -> str:
    return self.to_string()


class IntegerNode(Node):
  __slots__ = ('value',)

  def __init__(self, value: int):
    super().__init__(NodeType.INTEGER)
    self.value = int(value)

  @property
  def numerator(self) -> int:
    return self.value

  @property
  def denominator(self) -> int:
    return 1

  def to_string(self) -> str:
    return str(self.value)

  def payload(self) -> tuple:
    return (self.value,)


class RealNode(Node):
  __slots__ = ('value',)

  def __init__(self, value: float):
    super().__init__(NodeType.REAL)
    self.value = float(value)

  def to_string(self) -> str:
    return repr(self.value)

  def payload(self) -> tuple:
    return (self.value,)


class RationalNode(Node):
  __slots__ = ('numerator', 'denominator')

  def __init__(self, numerator: int, denominator: int):
    super().__init__(NodeType.RATIONAL)
    if int(denominator) == 0:
      raise InvalidExpressionError(f"rational {numerator}/0 has a zero denominator")
    self.numerator = int(numerator)
    self.denominator = int(denominator)

  @property
  def value(self) -> float:
    return self.numerator / self.denominator

  def to_string(self) -> str:
    return f"({self.numerator}/{self.denominator})"

  def payload(self) -> tuple:
    return (self.numerator, self.denominator)


class VariableNode(Node):
  __slots__ = ('name',)

  def __init__(self, name: str):
    super().__init__(NodeType.NAME)
    if not name:
      raise InvalidExpressionError("variable name must be a non-empty string")
    self.name = str(name)

  def to_string(self) -> str:
    return self.name

  def payload(self) -> tuple:
    return (self.name,)


class TimeNode(Node):
  """Reference to simulation time; never a differentiation target"""
  __slots__ = ('name',)

  def __init__(self, name: str = 'time'):
    super().__init__(NodeType.NAME_TIME)
    self.name = str(name)

  def to_string(self) -> str:
    return self.name

  def payload(self) -> tuple:
    return (self.name,)


class ConstantNode(Node):
  __slots__ = ()

  _SPELLING = {NodeType.CONSTANT_PI: 'pi', NodeType.CONSTANT_E: 'e'}

  def __init__(self, kind: NodeType):
    if kind not in self._SPELLING:
      raise InvalidExpressionError(f"{kind!r} is not a named constant")
    super().__init__(NodeType(kind))

  def to_string(self) -> str:
    return self._SPELLING[self.kind]

  def payload(self) -> tuple:
    return ()


class OpNode(Node):
  """Operator, function, relation or piecewise node"""
  __slots__ = ('_children',)

  def __init__(self, kind: NodeType, *children: Node):
    kind = NodeType(kind)
    if kind in LEAF_KINDS:
      raise InvalidExpressionError(f"{kind.name} is a leaf kind, use its literal node class")
    for child in children:
      if not isinstance(child, Node):
        raise InvalidExpressionError(f"child of {kind.name} is not a Node: {child!r}")
    if not arity_accepts(kind, len(children)):
      if kind == NodeType.PIECEWISE:
        raise InvalidExpressionError(
          f"piecewise needs an odd number of children (pairs plus a default), got {len(children)}")
      raise InvalidExpressionError(f"{kind.name} does not accept {len(children)} children")
    super().__init__(kind)
    self._children = tuple(children)

  @property
  def children(self) -> Tuple[Node, ...]:
    return self._children

  def with_children(self, children) -> 'OpNode':
    return OpNode(self.kind, *children)

  def payload(self) -> tuple:
    return ()

  def to_string(self) -> str:
    args = [child.to_string() for child in self._children]
    if self.kind == NodeType.PLUS and args:
      return "(" + " + ".join(args) + ")"
    if self.kind == NodeType.TIMES and args:
      return "(" + " * ".join(args) + ")"
    if self.kind == NodeType.MINUS and len(args) == 1:
      return f"(-{args[0]})"
    if self.kind in INFIX_SYMBOLS and len(args) == 2:
      return f"({args[0]} {INFIX_SYMBOLS[self.kind]} {args[1]})"
    name = FUNCTION_NAMES.get(self.kind, self.kind.name.lower())
    return f"{name}({', '.join(args)})"


Operand = Union[Node, int, float, str]


def number(value) -> Node:
  """Literal node for a Python/NumPy number: ints become Integer, floats Real"""
  if isinstance(value, Node):
    return value
  if isinstance(value, (bool, np.bool_)):
    raise InvalidExpressionError(f"booleans are not numeric literals: {value!r}")
  if isinstance(value, (int, np.integer)):
    return IntegerNode(int(value))
  return RealNode(float(value))


def integer(value: int) -> IntegerNode:
  return IntegerNode(value)


def real(value: float) -> RealNode:
  return RealNode(value)


def rational(numerator: int, denominator: int) -> RationalNode:
  return RationalNode(numerator, denominator)


def variable(name: str) -> VariableNode:
  return VariableNode(name)


def as_node(operand: Operand) -> Node:
  """Builders accept nodes, numbers, and strings (variable names)"""
  if isinstance(operand, str):
    return VariableNode(operand)
  return number(operand)


def plus(*operands: Operand) -> OpNode:
  return OpNode(NodeType.PLUS, *[as_node(op) for op in operands])


def minus(left: Operand, right: Optional[Operand] = None) -> OpNode:
  if right is None:
    return OpNode(NodeType.MINUS, as_node(left))
  return OpNode(NodeType.MINUS, as_node(left), as_node(right))


def times(*operands: Operand) -> OpNode:
  return OpNode(NodeType.TIMES, *[as_node(op) for op in operands])


def divide(left: Operand, right: Operand) -> OpNode:
  return OpNode(NodeType.DIVIDE, as_node(left), as_node(right))


def power(base: Operand, exponent: Operand) -> OpNode:
  return OpNode(NodeType.POWER, as_node(base), as_node(exponent))


def function(kind: Union[NodeType, str], *args: Operand) -> OpNode:
  """Function node by kind or by name, e.g. function('sin', 'x')"""
  if isinstance(kind, str):
    try:
      kind = FUNCTION_MAP[kind]
    except KeyError:
      raise InvalidExpressionError(f"unknown function name: {kind}") from None
  return OpNode(kind, *[as_node(arg) for arg in args])


def piecewise(*args: Operand) -> OpNode:
  """piecewise(value1, condition1, ..., default)"""
  return OpNode(NodeType.PIECEWISE, *[as_node(arg) for arg in args])


PI = ConstantNode(NodeType.CONSTANT_PI)
E = ConstantNode(NodeType.CONSTANT_E)
