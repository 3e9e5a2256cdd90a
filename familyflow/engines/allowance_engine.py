"""Allowance Engine - Pure logic for monthly allowance calculations.

This engine provides stateless, pure Python functions for:
- Base allowance (all-or-nothing on a month's chores)
- Bonus totals (completed reservations windowed by completion month)
- Summary assembly for one child and zero rows for the family overview

ARCHITECTURE: This is a pure logic engine with NO store dependencies.
All functions are static methods that operate on passed-in data.
FamilyStore gathers the records and hands them in.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from .. import const
from ..utils.dt_utils import dt_in_month
from ..utils.math_utils import round_amount, sum_amounts

if TYPE_CHECKING:
    from ..type_defs import (
        AllowanceSummaryData,
        BonusTaskData,
        ChoreData,
        MonthlySummaryRow,
        ReservationData,
        UserData,
    )


class AllowanceEngine:
    """Pure logic engine for a child's monthly earnings.

    All methods are static - no instance state.
    """

    @staticmethod
    def is_child(user: UserData | None) -> bool:
        """Return True if the user exists and has the child role."""
        return user is not None and user[const.DATA_USER_ROLE] == const.ROLE_CHILD

    @staticmethod
    def calculate_base_allowance(
        child: UserData,
        chores: Iterable[ChoreData],
        month: int,
        year: int,
    ) -> float:
        """Return the base allowance earned for the period.

        All-or-nothing: the child's monthly_allowance is earned only if at
        least one chore is assigned for (month, year) and every one of them
        is completed. No chores means nothing earned.
        """
        period_chores = [
            chore
            for chore in chores
            if chore[const.DATA_CHORE_CHILD_ID] == child[const.DATA_USER_ID]
            and chore[const.DATA_CHORE_MONTH] == month
            and chore[const.DATA_CHORE_YEAR] == year
        ]
        if not period_chores:
            return 0.0
        if not all(chore[const.DATA_CHORE_IS_COMPLETED] for chore in period_chores):
            return 0.0
        return round_amount(child[const.DATA_USER_MONTHLY_ALLOWANCE])

    @staticmethod
    def calculate_bonus_total(
        child_id: str,
        reservations: Iterable[ReservationData],
        tasks_by_id: Mapping[str, BonusTaskData],
        month: int,
        year: int,
    ) -> float:
        """Sum rewards of the child's reservations completed within the month.

        The window uses completed_at, not reserved_at. Reservations whose task
        no longer resolves contribute nothing.
        """
        rewards: list[float] = []
        for reservation in reservations:
            if reservation[const.DATA_RESERVATION_CHILD_ID] != child_id:
                continue
            if not reservation[const.DATA_RESERVATION_IS_COMPLETED]:
                continue
            if not dt_in_month(
                reservation[const.DATA_RESERVATION_COMPLETED_AT], month, year
            ):
                continue
            task = tasks_by_id.get(reservation[const.DATA_RESERVATION_TASK_ID])
            if task is None:
                continue
            rewards.append(task[const.DATA_BONUS_TASK_REWARD_AMOUNT])
        return sum_amounts(rewards)

    @staticmethod
    def calculate_summary(
        child: UserData | None,
        chores: Iterable[ChoreData],
        reservations: Iterable[ReservationData],
        tasks_by_id: Mapping[str, BonusTaskData],
        month: int,
        year: int,
    ) -> AllowanceSummaryData | None:
        """Build the allowance summary for one child.

        Returns:
            AllowanceSummaryData, or None if the user is missing or not a child.
        """
        if child is None or not AllowanceEngine.is_child(child):
            return None

        child_id = child[const.DATA_USER_ID]
        base_allowance = AllowanceEngine.calculate_base_allowance(
            child, chores, month, year
        )
        bonus_total = AllowanceEngine.calculate_bonus_total(
            child_id, reservations, tasks_by_id, month, year
        )
        return {
            const.DATA_SUMMARY_CHILD_ID: child_id,
            const.DATA_SUMMARY_MONTH: month,
            const.DATA_SUMMARY_YEAR: year,
            const.DATA_SUMMARY_BASE_ALLOWANCE: base_allowance,
            const.DATA_SUMMARY_BONUS_TOTAL: bonus_total,
            const.DATA_SUMMARY_TOTAL: round_amount(base_allowance + bonus_total),
        }

    @staticmethod
    def to_summary_row(
        child_id: str, summary: AllowanceSummaryData | None
    ) -> MonthlySummaryRow:
        """Project a summary onto a family overview row.

        A missing summary becomes a zero-filled row so no child is dropped.
        """
        if summary is None:
            return {
                const.DATA_SUMMARY_CHILD_ID: child_id,
                const.DATA_SUMMARY_BASE_ALLOWANCE: 0.0,
                const.DATA_SUMMARY_BONUS_TOTAL: 0.0,
                const.DATA_SUMMARY_TOTAL: 0.0,
            }
        return {
            const.DATA_SUMMARY_CHILD_ID: child_id,
            const.DATA_SUMMARY_BASE_ALLOWANCE: summary[
                const.DATA_SUMMARY_BASE_ALLOWANCE
            ],
            const.DATA_SUMMARY_BONUS_TOTAL: summary[const.DATA_SUMMARY_BONUS_TOTAL],
            const.DATA_SUMMARY_TOTAL: summary[const.DATA_SUMMARY_TOTAL],
        }
