"""Engine modules for FamilyFlow.

Contains specialized computation engines:
- allowance_engine: Monthly base allowance and bonus totals
- bonus_task_engine: Bonus task / reservation state machine
"""

# Use relative imports within package to avoid mypy module resolution issues
from .allowance_engine import AllowanceEngine
from .bonus_task_engine import BonusTaskEngine, BonusTaskStateError

__all__ = [
    "AllowanceEngine",
    "BonusTaskEngine",
    "BonusTaskStateError",
]
