"""Bonus Task Engine - Pure logic for the bonus task / reservation lifecycle.

This engine provides stateless, pure Python functions for:
- Task and reservation state derivation
- State transition validation
- Reservation id derivation
- Reserve eligibility checks

ARCHITECTURE: This is a pure logic engine with NO store dependencies.
All functions are static methods that operate on passed-in data.
State management belongs in FamilyStore.

Lifecycle:
    BonusTask:   available --reserve--> reserved --delete--> deleted
                 available --delete--> deleted
    Reservation: open --complete--> completed (terminal)

A reservation is never created directly; it only appears as the side
effect of a successful reserve. There is no release/cancel transition, so
a reserved task never returns to available.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from ..type_defs import BonusTaskData, ReservationData


class BonusTaskStateError(Exception):
    """Raised when an update would break the task/reservation invariant.

    A task is available iff no reservation references it, so a parent may
    not flip is_available to disagree with the reservation state.

    Attributes:
        task_id: The task being updated
        requested_available: The availability the caller asked for
    """

    def __init__(self, task_id: str, requested_available: bool) -> None:
        """Initialize BonusTaskStateError."""
        self.task_id = task_id
        self.requested_available = requested_available
        super().__init__(
            f"Bonus task {task_id}: is_available={requested_available} "
            "does not match its reservation state"
        )


class BonusTaskEngine:
    """Pure logic engine for bonus task and reservation state.

    All methods are static - no instance state.
    """

    VALID_TASK_TRANSITIONS: dict[str, list[str]] = {
        const.TASK_STATE_AVAILABLE: [
            const.TASK_STATE_RESERVED,
            const.TASK_STATE_DELETED,
        ],
        const.TASK_STATE_RESERVED: [
            const.TASK_STATE_DELETED,  # Cascades reservation deletion
        ],
        const.TASK_STATE_DELETED: [],
    }

    VALID_RESERVATION_TRANSITIONS: dict[str, list[str]] = {
        const.RESERVATION_STATE_OPEN: [const.RESERVATION_STATE_COMPLETED],
        const.RESERVATION_STATE_COMPLETED: [],
    }

    # =========================================================================
    # STATE DERIVATION
    # =========================================================================

    @staticmethod
    def get_task_state(task: BonusTaskData | None) -> str:
        """Return the lifecycle state of a task (deleted if it is gone)."""
        if task is None:
            return const.TASK_STATE_DELETED
        if task[const.DATA_BONUS_TASK_IS_AVAILABLE]:
            return const.TASK_STATE_AVAILABLE
        return const.TASK_STATE_RESERVED

    @staticmethod
    def get_reservation_state(reservation: ReservationData) -> str:
        """Return the lifecycle state of a reservation."""
        if reservation[const.DATA_RESERVATION_IS_COMPLETED]:
            return const.RESERVATION_STATE_COMPLETED
        return const.RESERVATION_STATE_OPEN

    @staticmethod
    def can_transition_task(from_state: str, to_state: str) -> bool:
        """Check whether a task may move from one state to another."""
        return to_state in BonusTaskEngine.VALID_TASK_TRANSITIONS.get(from_state, [])

    @staticmethod
    def can_transition_reservation(from_state: str, to_state: str) -> bool:
        """Check whether a reservation may move from one state to another."""
        return to_state in BonusTaskEngine.VALID_RESERVATION_TRANSITIONS.get(
            from_state, []
        )

    # =========================================================================
    # RESERVATIONS
    # =========================================================================

    @staticmethod
    def reservation_id_for(task_id: str, child_id: str) -> str:
        """Derive the deterministic reservation id "<task_id>:<child_id>"."""
        return f"{task_id}{const.RESERVATION_ID_SEPARATOR}{child_id}"

    @staticmethod
    def is_task_referenced(
        task_id: str, reservations: Iterable[ReservationData]
    ) -> bool:
        """Return True if any reservation references the task."""
        return any(
            res[const.DATA_RESERVATION_TASK_ID] == task_id for res in reservations
        )

    @staticmethod
    def can_reserve(
        task: BonusTaskData | None,
        reservations: Iterable[ReservationData],
    ) -> bool:
        """Check all reserve preconditions.

        The task must exist, must be flagged available, and no reservation
        may already reference it.
        """
        if task is None:
            return False
        if not BonusTaskEngine.can_transition_task(
            BonusTaskEngine.get_task_state(task), const.TASK_STATE_RESERVED
        ):
            return False
        return not BonusTaskEngine.is_task_referenced(
            task[const.DATA_BONUS_TASK_ID], reservations
        )

    @staticmethod
    def availability_matches(is_referenced: bool, is_available: bool) -> bool:
        """Return True if an availability flag agrees with the reservation state."""
        return is_available != is_referenced
