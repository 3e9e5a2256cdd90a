# File: store.py
"""In-memory domain store for FamilyFlow.

FamilyStore is the single authoritative owner of users, chores, bonus tasks
and task reservations. Every read hands back an independent copy built by
data_builders.clone_*(); every write checks all of its preconditions before
touching state, so a refused call leaves the store exactly as it was.

Writes run under one re-entrant lock that spans read-check-and-write, so
"at most one reservation per task" holds even when several threads share a
store instance.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from . import const
from .data_builders import (
    build_bonus_task,
    build_chore,
    build_reservation,
    clone_bonus_task,
    clone_chore,
    clone_reservation,
    clone_user,
)
from .demo_data import build_demo_family
from .engines.allowance_engine import AllowanceEngine
from .engines.bonus_task_engine import BonusTaskEngine, BonusTaskStateError
from .utils.dt_utils import dt_now_iso

if TYPE_CHECKING:
    from .type_defs import (
        AllowanceSummaryData,
        BonusTaskData,
        BonusTaskUpdate,
        ChoreData,
        ChoreUpdate,
        MonthlySummaryRow,
        ReservationData,
        StoreData,
        UserData,
    )


class FamilyStore:
    """Authoritative in-memory repository for one household.

    Buckets are dicts keyed by entity id, in insertion order. Construct one
    store per household (or per test) and hand it to FamilyFlowService.
    """

    def __init__(self, seed: StoreData | dict[str, Any] | None = None) -> None:
        """Initialize the store.

        Args:
            seed: Optional structure shaped like get_default_structure().
                Records are copied in; the caller keeps ownership of seed.
        """
        self._lock = threading.RLock()
        self._data: StoreData = FamilyStore.get_default_structure()

        if seed:
            for user in seed.get(const.DATA_USERS, {}).values():
                self._data[const.DATA_USERS][user[const.DATA_USER_ID]] = clone_user(
                    user
                )
            for chore in seed.get(const.DATA_CHORES, {}).values():
                self._data[const.DATA_CHORES][chore[const.DATA_CHORE_ID]] = (
                    clone_chore(chore)
                )
            for task in seed.get(const.DATA_BONUS_TASKS, {}).values():
                self._data[const.DATA_BONUS_TASKS][task[const.DATA_BONUS_TASK_ID]] = (
                    clone_bonus_task(task)
                )
            for res in seed.get(const.DATA_RESERVATIONS, {}).values():
                self._data[const.DATA_RESERVATIONS][res[const.DATA_RESERVATION_ID]] = (
                    clone_reservation(res)
                )

        const.LOGGER.debug(
            "DEBUG: FamilyStore: Initialized with %s",
            {bucket: len(records) for bucket, records in self._data.items()},
        )

    @staticmethod
    def get_default_structure() -> StoreData:
        """Return the canonical empty data structure."""
        return {
            const.DATA_USERS: {},
            const.DATA_CHORES: {},
            const.DATA_BONUS_TASKS: {},
            const.DATA_RESERVATIONS: {},
        }

    @classmethod
    def with_demo_family(cls) -> FamilyStore:
        """Return a store seeded with the demo household for the current month."""
        return cls(build_demo_family())

    # -------------------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------------------

    def get_user(self, user_id: str) -> UserData | None:
        """Return a copy of a user, or None."""
        with self._lock:
            user = self._data[const.DATA_USERS].get(user_id)
            return clone_user(user) if user else None

    def list_users(self) -> list[UserData]:
        """Return copies of every family member."""
        with self._lock:
            return [clone_user(u) for u in self._data[const.DATA_USERS].values()]

    def list_children(self) -> list[UserData]:
        """Return copies of every user with the child role."""
        with self._lock:
            return [
                clone_user(u)
                for u in self._data[const.DATA_USERS].values()
                if u[const.DATA_USER_ROLE] == const.ROLE_CHILD
            ]

    def _resolve_role(self, user_id: str, role: str) -> UserData | None:
        """Return the stored user if it exists with the given role."""
        user = self._data[const.DATA_USERS].get(user_id)
        if user is None or user[const.DATA_USER_ROLE] != role:
            return None
        return user

    # -------------------------------------------------------------------------------------
    # Chores
    # -------------------------------------------------------------------------------------

    def get_chore(self, chore_id: str) -> ChoreData | None:
        """Return a copy of a chore, or None."""
        with self._lock:
            chore = self._data[const.DATA_CHORES].get(chore_id)
            return clone_chore(chore) if chore else None

    def list_chores_for_child(
        self, child_id: str, month: int, year: int
    ) -> list[ChoreData]:
        """Return copies of the child's chores for exactly (month, year)."""
        with self._lock:
            return [
                clone_chore(c)
                for c in self._data[const.DATA_CHORES].values()
                if c[const.DATA_CHORE_CHILD_ID] == child_id
                and c[const.DATA_CHORE_MONTH] == month
                and c[const.DATA_CHORE_YEAR] == year
            ]

    def complete_chore(self, chore_id: str) -> ChoreData | None:
        """Mark a chore completed and stamp completed_at.

        Completing an already completed chore stamps completed_at again.
        """
        with self._lock:
            chore = self._data[const.DATA_CHORES].get(chore_id)
            if chore is None:
                const.LOGGER.debug("DEBUG: Complete chore: '%s' not found", chore_id)
                return None
            chore[const.DATA_CHORE_IS_COMPLETED] = True
            chore[const.DATA_CHORE_COMPLETED_AT] = dt_now_iso()
            const.LOGGER.info(
                "INFO: Chore '%s' completed by child '%s'",
                chore[const.DATA_CHORE_TITLE],
                chore[const.DATA_CHORE_CHILD_ID],
            )
            return clone_chore(chore)

    def create_chore(
        self,
        child_id: str,
        title: str,
        description: str | None,
        month: int,
        year: int,
    ) -> ChoreData | None:
        """Create a chore for a child. Returns None if child_id is not a child."""
        with self._lock:
            if self._resolve_role(child_id, const.ROLE_CHILD) is None:
                const.LOGGER.debug(
                    "DEBUG: Create chore refused: '%s' is not a child", child_id
                )
                return None
            chore = self._insert_chore(child_id, title, description, month, year)
            return clone_chore(chore)

    def _insert_chore(
        self,
        child_id: str,
        title: str,
        description: str | None,
        month: int,
        year: int,
    ) -> ChoreData:
        """Build and store a chore. Caller holds the lock."""
        chore = build_chore(
            {
                const.DATA_CHORE_CHILD_ID: child_id,
                const.DATA_CHORE_TITLE: title,
                const.DATA_CHORE_DESCRIPTION: description,
                const.DATA_CHORE_MONTH: month,
                const.DATA_CHORE_YEAR: year,
            }
        )
        self._data[const.DATA_CHORES][chore[const.DATA_CHORE_ID]] = chore
        const.LOGGER.info(
            "INFO: Chore '%s' created for child '%s' (%s/%s)",
            chore[const.DATA_CHORE_TITLE],
            child_id,
            month,
            year,
        )
        return chore

    def update_chore(self, chore_id: str, updates: ChoreUpdate) -> ChoreData | None:
        """Apply a partial update (title, description, is_completed)."""
        with self._lock:
            existing = self._data[const.DATA_CHORES].get(chore_id)
            if existing is None:
                const.LOGGER.debug("DEBUG: Update chore: '%s' not found", chore_id)
                return None
            allowed = {
                key: value
                for key, value in updates.items()
                if key in const.CHORE_UPDATABLE_FIELDS
            }
            updated = build_chore(allowed, existing=existing)
            self._data[const.DATA_CHORES][chore_id] = updated
            const.LOGGER.debug(
                "DEBUG: Chore '%s' updated fields %s", chore_id, list(allowed)
            )
            return clone_chore(updated)

    def delete_chore(self, chore_id: str) -> bool:
        """Delete a chore. Returns True if a record was removed."""
        with self._lock:
            removed = self._data[const.DATA_CHORES].pop(chore_id, None)
            if removed is not None:
                const.LOGGER.info("INFO: Chore '%s' deleted", chore_id)
            return removed is not None

    def add_chores_for_all_children(
        self,
        title: str,
        description: str | None,
        month: int,
        year: int,
    ) -> list[ChoreData]:
        """Create the same chore once for every child, in user order."""
        with self._lock:
            created = [
                self._insert_chore(
                    user[const.DATA_USER_ID], title, description, month, year
                )
                for user in self._data[const.DATA_USERS].values()
                if user[const.DATA_USER_ROLE] == const.ROLE_CHILD
            ]
            return [clone_chore(c) for c in created]

    # -------------------------------------------------------------------------------------
    # Bonus Tasks
    # -------------------------------------------------------------------------------------

    def get_bonus_task(self, task_id: str) -> BonusTaskData | None:
        """Return a copy of a bonus task, or None."""
        with self._lock:
            task = self._data[const.DATA_BONUS_TASKS].get(task_id)
            return clone_bonus_task(task) if task else None

    def list_bonus_tasks(self) -> list[BonusTaskData]:
        """Return copies of every bonus task, available or not."""
        with self._lock:
            return [
                clone_bonus_task(t) for t in self._data[const.DATA_BONUS_TASKS].values()
            ]

    def list_available_bonus_tasks(self) -> list[BonusTaskData]:
        """Return copies of every task still open for reservation."""
        with self._lock:
            return [
                clone_bonus_task(t)
                for t in self._data[const.DATA_BONUS_TASKS].values()
                if t[const.DATA_BONUS_TASK_IS_AVAILABLE]
            ]

    def create_bonus_task(
        self,
        created_by: str,
        title: str,
        description: str | None,
        reward_amount: float,
    ) -> BonusTaskData | None:
        """Create an available bonus task. Returns None if created_by is not a parent."""
        with self._lock:
            if self._resolve_role(created_by, const.ROLE_PARENT) is None:
                const.LOGGER.debug(
                    "DEBUG: Create bonus task refused: '%s' is not a parent",
                    created_by,
                )
                return None
            task = build_bonus_task(
                {
                    const.DATA_BONUS_TASK_CREATED_BY: created_by,
                    const.DATA_BONUS_TASK_TITLE: title,
                    const.DATA_BONUS_TASK_DESCRIPTION: description,
                    const.DATA_BONUS_TASK_REWARD_AMOUNT: reward_amount,
                }
            )
            self._data[const.DATA_BONUS_TASKS][task[const.DATA_BONUS_TASK_ID]] = task
            const.LOGGER.info(
                "INFO: Bonus task '%s' created (reward %s)",
                task[const.DATA_BONUS_TASK_TITLE],
                task[const.DATA_BONUS_TASK_REWARD_AMOUNT],
            )
            return clone_bonus_task(task)

    def update_bonus_task(
        self, task_id: str, updates: BonusTaskUpdate
    ) -> BonusTaskData | None:
        """Apply a partial update (title, description, reward_amount, is_available).

        Raises:
            BonusTaskStateError: If is_available would disagree with whether a
                reservation references the task. Nothing is changed.
        """
        with self._lock:
            existing = self._data[const.DATA_BONUS_TASKS].get(task_id)
            if existing is None:
                const.LOGGER.debug("DEBUG: Update bonus task: '%s' not found", task_id)
                return None
            allowed = {
                key: value
                for key, value in updates.items()
                if key in const.BONUS_TASK_UPDATABLE_FIELDS
            }
            if const.DATA_BONUS_TASK_IS_AVAILABLE in allowed:
                requested = bool(allowed[const.DATA_BONUS_TASK_IS_AVAILABLE])
                referenced = BonusTaskEngine.is_task_referenced(
                    task_id, self._data[const.DATA_RESERVATIONS].values()
                )
                if not BonusTaskEngine.availability_matches(referenced, requested):
                    raise BonusTaskStateError(task_id, requested)
            updated = build_bonus_task(allowed, existing=existing)
            self._data[const.DATA_BONUS_TASKS][task_id] = updated
            const.LOGGER.debug(
                "DEBUG: Bonus task '%s' updated fields %s", task_id, list(allowed)
            )
            return clone_bonus_task(updated)

    def delete_bonus_task(self, task_id: str) -> bool:
        """Delete a task and every reservation that references it."""
        with self._lock:
            removed = self._data[const.DATA_BONUS_TASKS].pop(task_id, None)
            if removed is None:
                return False
            reservations = self._data[const.DATA_RESERVATIONS]
            orphaned = [
                res_id
                for res_id, res in reservations.items()
                if res[const.DATA_RESERVATION_TASK_ID] == task_id
            ]
            for res_id in orphaned:
                del reservations[res_id]
            const.LOGGER.info(
                "INFO: Bonus task '%s' deleted with %s reservation(s)",
                task_id,
                len(orphaned),
            )
            return True

    # -------------------------------------------------------------------------------------
    # Task Reservations
    # -------------------------------------------------------------------------------------

    def get_reservation(self, reservation_id: str) -> ReservationData | None:
        """Return a copy of a reservation, or None."""
        with self._lock:
            res = self._data[const.DATA_RESERVATIONS].get(reservation_id)
            return clone_reservation(res) if res else None

    def list_reservations_for_child(self, child_id: str) -> list[ReservationData]:
        """Return copies of every reservation held by the child."""
        with self._lock:
            return [
                clone_reservation(r)
                for r in self._data[const.DATA_RESERVATIONS].values()
                if r[const.DATA_RESERVATION_CHILD_ID] == child_id
            ]

    def reserve_task(self, task_id: str, child_id: str) -> ReservationData | None:
        """Reserve an available task for a child.

        Check and write happen under one lock hold: either the task flips to
        unavailable and exactly one reservation is added, or nothing changes
        and None is returned.
        """
        with self._lock:
            task = self._data[const.DATA_BONUS_TASKS].get(task_id)
            reservations = self._data[const.DATA_RESERVATIONS]
            if not BonusTaskEngine.can_reserve(task, reservations.values()):
                const.LOGGER.debug(
                    "DEBUG: Reserve refused for task '%s' by child '%s'",
                    task_id,
                    child_id,
                )
                return None
            task[const.DATA_BONUS_TASK_IS_AVAILABLE] = False
            reservation = build_reservation(task_id, child_id)
            reservations[reservation[const.DATA_RESERVATION_ID]] = reservation
            const.LOGGER.info(
                "INFO: Bonus task '%s' reserved by child '%s'",
                task[const.DATA_BONUS_TASK_TITLE],
                child_id,
            )
            return clone_reservation(reservation)

    def complete_reservation(self, reservation_id: str) -> ReservationData | None:
        """Mark a reservation completed and stamp completed_at.

        Completed is terminal: an already completed reservation is returned
        as-is, so its reward stays in the month it was first completed.
        """
        with self._lock:
            res = self._data[const.DATA_RESERVATIONS].get(reservation_id)
            if res is None:
                const.LOGGER.debug(
                    "DEBUG: Complete reservation: '%s' not found", reservation_id
                )
                return None
            if BonusTaskEngine.can_transition_reservation(
                BonusTaskEngine.get_reservation_state(res),
                const.RESERVATION_STATE_COMPLETED,
            ):
                res[const.DATA_RESERVATION_IS_COMPLETED] = True
                res[const.DATA_RESERVATION_COMPLETED_AT] = dt_now_iso()
                const.LOGGER.info(
                    "INFO: Reservation '%s' completed by child '%s'",
                    reservation_id,
                    res[const.DATA_RESERVATION_CHILD_ID],
                )
            return clone_reservation(res)

    def approve_reservation(
        self, reservation_id: str, approved_by: str
    ) -> ReservationData | None:
        """Record parent approval on a completed reservation.

        Returns None if the reservation is missing, the approver is not a
        parent, or the reservation is still open.
        """
        with self._lock:
            res = self._data[const.DATA_RESERVATIONS].get(reservation_id)
            if res is None or self._resolve_role(approved_by, const.ROLE_PARENT) is None:
                return None
            if not res[const.DATA_RESERVATION_IS_COMPLETED]:
                const.LOGGER.debug(
                    "DEBUG: Approve refused: reservation '%s' still open",
                    reservation_id,
                )
                return None
            res[const.DATA_RESERVATION_APPROVED_BY] = approved_by
            res[const.DATA_RESERVATION_APPROVED_AT] = dt_now_iso()
            const.LOGGER.info(
                "INFO: Reservation '%s' approved by parent '%s'",
                reservation_id,
                approved_by,
            )
            return clone_reservation(res)

    # -------------------------------------------------------------------------------------
    # Allowance
    # -------------------------------------------------------------------------------------

    def calculate_allowance(
        self, child_id: str, month: int, year: int
    ) -> AllowanceSummaryData | None:
        """Return the child's allowance summary, or None if not a child."""
        with self._lock:
            return AllowanceEngine.calculate_summary(
                self._data[const.DATA_USERS].get(child_id),
                self._data[const.DATA_CHORES].values(),
                self._data[const.DATA_RESERVATIONS].values(),
                self._data[const.DATA_BONUS_TASKS],
                month,
                year,
            )

    def list_monthly_summaries(self, month: int, year: int) -> list[MonthlySummaryRow]:
        """Return one overview row per child; uncalculable children get zeros."""
        with self._lock:
            return [
                AllowanceEngine.to_summary_row(
                    user[const.DATA_USER_ID],
                    self.calculate_allowance(user[const.DATA_USER_ID], month, year),
                )
                for user in self._data[const.DATA_USERS].values()
                if user[const.DATA_USER_ROLE] == const.ROLE_CHILD
            ]
