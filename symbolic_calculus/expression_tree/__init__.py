"""Expression Tree Module

Immutable expression trees and the structural transforms over them.
"""

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all
from .utils import *  # noqa: F401,F403
from .utils import __all__ as _utils_all

__all__ = list(_core_all) + list(_utils_all)
