"""Pure Python utilities for FamilyFlow.

Submodules:
    - dt_utils: Date/time parsing and calendar-month windows
    - math_utils: Amount rounding and summing

Usage:
    from . import dt_utils
    from .math_utils import round_amount
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
