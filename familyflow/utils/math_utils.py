# File: utils/math_utils.py
"""Amount arithmetic utilities for FamilyFlow.

Pure Python math functions with no store or service dependencies.

Functions:
    - round_amount: Consistent rounding to configured precision
    - sum_amounts: Rounded sum of an iterable of amounts
"""

from __future__ import annotations

from collections.abc import Iterable
import logging

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# Default float precision for currency amounts
DATA_FLOAT_PRECISION = 2


def round_amount(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a money amount to the configured precision.

    Prevents float arithmetic drift (e.g., 0.1 + 0.2 → 0.30000000000000004).

    Examples:
        round_amount(10.456) → 10.46
        round_amount(10.454) → 10.45
        round_amount(10.0) → 10.0
    """
    return round(value, precision)


def sum_amounts(
    values: Iterable[float], precision: int = DATA_FLOAT_PRECISION
) -> float:
    """Sum amounts and round the result once.

    Examples:
        sum_amounts([0.1, 0.2]) → 0.3
        sum_amounts([]) → 0.0
    """
    return round_amount(float(sum(values)), precision)
