"""Exceptions raised by the expression tree and its transforms."""


class ExpressionError(Exception):
  """Base class for expression tree failures"""


class InvalidExpressionError(ExpressionError, ValueError):
  """A node or tree violates a structural rule (arity, zero denominator, ...)"""


class ExpressionDepthError(InvalidExpressionError):
  """Tree is deeper than the recursion guard allows"""

  def __init__(self, depth: int, max_depth: int):
    super().__init__(f"expression depth {depth} exceeds the limit of {max_depth}")
    self.depth = depth
    self.max_depth = max_depth


class UnsupportedNodeKindError(ExpressionError):
  """No differentiation rule exists for a node kind"""

  def __init__(self, kind, operation: str = "differentiate"):
    name = getattr(kind, 'name', str(kind))
    super().__init__(f"cannot {operation} node of kind {name}")
    self.kind = kind
    self.operation = operation
