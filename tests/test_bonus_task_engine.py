"""Unit tests for BonusTaskEngine - pure Python logic tests.

Test Categories:
- BonusTaskStateError
- State derivation and transition tables
- Reservation ids and reserve eligibility
- Availability/reservation agreement
"""

from __future__ import annotations

import pytest

from familyflow import const
from familyflow.engines.bonus_task_engine import BonusTaskEngine, BonusTaskStateError
from familyflow.type_defs import BonusTaskData, ReservationData


def _task(task_id: str = "t1", available: bool = True) -> BonusTaskData:
    return {
        "id": task_id,
        "created_by": "p1",
        "title": "Wash the car",
        "description": None,
        "reward_amount": 5.0,
        "is_available": available,
    }


def _reservation(task_id: str = "t1", child_id: str = "c1") -> ReservationData:
    return {
        "id": f"{task_id}:{child_id}",
        "task_id": task_id,
        "child_id": child_id,
        "is_completed": False,
        "completed_at": None,
        "reserved_at": "2025-03-01T08:00:00+00:00",
    }


# =============================================================================
# Test: BonusTaskStateError
# =============================================================================


class TestBonusTaskStateError:
    """Tests for the BonusTaskStateError exception."""

    def test_error_attributes(self) -> None:
        """Error records the task and the requested flag."""
        error = BonusTaskStateError("t1", True)
        assert error.task_id == "t1"
        assert error.requested_available is True

    def test_error_message(self) -> None:
        """Message names the task."""
        assert "t1" in str(BonusTaskStateError("t1", False))


# =============================================================================
# Test: state derivation
# =============================================================================


class TestStates:
    """Tests for task and reservation state derivation."""

    def test_task_states(self) -> None:
        """Available flag and existence map onto states."""
        assert BonusTaskEngine.get_task_state(_task()) == const.TASK_STATE_AVAILABLE
        assert (
            BonusTaskEngine.get_task_state(_task(available=False))
            == const.TASK_STATE_RESERVED
        )
        assert BonusTaskEngine.get_task_state(None) == const.TASK_STATE_DELETED

    def test_reservation_states(self) -> None:
        """Completion flag maps onto open/completed."""
        res = _reservation()
        assert (
            BonusTaskEngine.get_reservation_state(res) == const.RESERVATION_STATE_OPEN
        )
        res["is_completed"] = True
        assert (
            BonusTaskEngine.get_reservation_state(res)
            == const.RESERVATION_STATE_COMPLETED
        )

    @pytest.mark.parametrize(
        ("from_state", "to_state", "expected"),
        [
            (const.TASK_STATE_AVAILABLE, const.TASK_STATE_RESERVED, True),
            (const.TASK_STATE_AVAILABLE, const.TASK_STATE_DELETED, True),
            (const.TASK_STATE_RESERVED, const.TASK_STATE_DELETED, True),
            (const.TASK_STATE_RESERVED, const.TASK_STATE_AVAILABLE, False),
            (const.TASK_STATE_DELETED, const.TASK_STATE_AVAILABLE, False),
        ],
    )
    def test_task_transitions(
        self, from_state: str, to_state: str, expected: bool
    ) -> None:
        """A reserved task never returns to available."""
        assert BonusTaskEngine.can_transition_task(from_state, to_state) is expected

    def test_completed_reservation_is_terminal(self) -> None:
        """Completed reservations cannot move anywhere."""
        assert BonusTaskEngine.can_transition_reservation(
            const.RESERVATION_STATE_OPEN, const.RESERVATION_STATE_COMPLETED
        )
        assert not BonusTaskEngine.can_transition_reservation(
            const.RESERVATION_STATE_COMPLETED, const.RESERVATION_STATE_COMPLETED
        )
        assert not BonusTaskEngine.can_transition_reservation(
            const.RESERVATION_STATE_COMPLETED, const.RESERVATION_STATE_OPEN
        )


# =============================================================================
# Test: reservations
# =============================================================================


class TestReserveEligibility:
    """Tests for reservation ids and can_reserve."""

    def test_reservation_id_is_deterministic(self) -> None:
        """Id is task id and child id joined by a colon."""
        assert BonusTaskEngine.reservation_id_for("t1", "c1") == "t1:c1"

    def test_available_unreferenced_task_can_be_reserved(self) -> None:
        """The happy path."""
        assert BonusTaskEngine.can_reserve(_task(), [])

    def test_missing_task_cannot_be_reserved(self) -> None:
        """Nothing to reserve."""
        assert not BonusTaskEngine.can_reserve(None, [])

    def test_unavailable_task_cannot_be_reserved(self) -> None:
        """A task already flagged unavailable is refused."""
        assert not BonusTaskEngine.can_reserve(_task(available=False), [])

    def test_referenced_task_cannot_be_reserved(self) -> None:
        """Even a task flagged available is refused once referenced."""
        assert not BonusTaskEngine.can_reserve(_task(), [_reservation(child_id="c2")])

    def test_other_task_reservations_do_not_block(self) -> None:
        """Reservations of other tasks are irrelevant."""
        assert BonusTaskEngine.can_reserve(_task(), [_reservation(task_id="t2")])

    def test_is_task_referenced(self) -> None:
        """Detects a reservation of the task."""
        assert BonusTaskEngine.is_task_referenced("t1", [_reservation()])
        assert not BonusTaskEngine.is_task_referenced("t2", [_reservation()])


class TestAvailabilityMatches:
    """Tests for availability_matches."""

    @pytest.mark.parametrize(
        ("referenced", "available", "expected"),
        [
            (False, True, True),
            (True, False, True),
            (False, False, False),
            (True, True, False),
        ],
    )
    def test_matrix(self, referenced: bool, available: bool, expected: bool) -> None:
        """Available exactly when unreferenced."""
        assert BonusTaskEngine.availability_matches(referenced, available) is expected
