"""Differentiation and series expansion."""

from .differentiation import differentiate, supported_kinds
from .taylor import taylor_series

__all__ = ['differentiate', 'supported_kinds', 'taylor_series']
