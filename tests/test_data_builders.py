"""Tests for data_builders: validation, building and cloning of entities."""

from __future__ import annotations

from freezegun import freeze_time
import pytest

from familyflow import const
from familyflow.data_builders import (
    EntityValidationError,
    build_bonus_task,
    build_chore,
    build_reservation,
    build_user,
    clone_chore,
    clone_reservation,
    validate_bonus_task_data,
    validate_chore_data,
)

# =============================================================================
# Users
# =============================================================================


class TestBuildUser:
    """Tests for build_user."""

    def test_builds_child(self) -> None:
        """Fields are normalized and the allowance rounded."""
        user = build_user(
            {
                "id": "c1",
                "username": "  child.sam ",
                "display_name": "Sam",
                "role": "child",
                "monthly_allowance": 20.456,
            }
        )
        assert user["username"] == "child.sam"
        assert user["monthly_allowance"] == 20.46

    def test_generates_id(self) -> None:
        """Missing id gets a generated one."""
        user = build_user({"role": "parent"})
        assert user["id"]

    def test_unknown_role_rejected(self) -> None:
        """Only parent and child exist."""
        with pytest.raises(EntityValidationError) as exc_info:
            build_user({"role": "guest"})
        assert exc_info.value.field == const.DATA_USER_ROLE

    def test_negative_allowance_rejected(self) -> None:
        """Allowance cannot be negative."""
        with pytest.raises(EntityValidationError):
            build_user({"role": "child", "monthly_allowance": -1})


# =============================================================================
# Chores
# =============================================================================


class TestValidateChoreData:
    """Tests for validate_chore_data."""

    def test_valid_create(self) -> None:
        """No errors for a complete chore."""
        assert validate_chore_data({"title": "Bed", "month": 3, "year": 2025}) == {}

    def test_blank_title(self) -> None:
        """Whitespace-only titles are rejected."""
        errors = validate_chore_data({"title": "   ", "month": 3, "year": 2025})
        assert errors == {const.DATA_CHORE_TITLE: const.ERROR_MSG_TITLE_REQUIRED}

    def test_bad_month_and_year(self) -> None:
        """Month and year are range-checked on create."""
        errors = validate_chore_data({"title": "Bed", "month": 13, "year": 1900})
        assert set(errors) == {const.DATA_CHORE_MONTH, const.DATA_CHORE_YEAR}

    def test_update_checks_only_provided_fields(self) -> None:
        """Partial updates skip absent fields."""
        assert validate_chore_data({"is_completed": True}, is_update=True) == {}
        assert validate_chore_data({"title": ""}, is_update=True)


class TestBuildChore:
    """Tests for build_chore."""

    def test_create_defaults(self) -> None:
        """New chores start open with a blank description mapped to None."""
        chore = build_chore(
            {"child_id": "c1", "title": " Bed ", "description": "  ", "month": 3, "year": 2025}
        )
        assert chore["title"] == "Bed"
        assert chore["description"] is None
        assert chore["is_completed"] is False
        assert chore["completed_at"] is None
        assert chore["id"]

    def test_create_blank_title_raises(self) -> None:
        """Builders enforce the title rule too."""
        with pytest.raises(EntityValidationError):
            build_chore({"child_id": "c1", "title": "", "month": 3, "year": 2025})

    @freeze_time("2025-03-15 12:00:00", tz_offset=0)
    def test_update_completion_stamps_and_clears(self) -> None:
        """Setting is_completed stamps now; clearing it removes the stamp."""
        chore = build_chore({"child_id": "c1", "title": "Bed", "month": 3, "year": 2025})
        done = build_chore({"is_completed": True}, existing=chore)
        assert done["id"] == chore["id"]
        assert done["completed_at"] == "2025-03-15T12:00:00+00:00"

        undone = build_chore({"is_completed": False}, existing=done)
        assert undone["is_completed"] is False
        assert undone["completed_at"] is None

    def test_update_keeps_untouched_fields(self) -> None:
        """Only provided fields change."""
        chore = build_chore(
            {"child_id": "c1", "title": "Bed", "description": "Daily", "month": 3, "year": 2025}
        )
        renamed = build_chore({"title": "Make bed"}, existing=chore)
        assert renamed["title"] == "Make bed"
        assert renamed["description"] == "Daily"
        assert renamed["child_id"] == "c1"

    def test_clone_is_independent(self) -> None:
        """Mutating a clone leaves the original alone."""
        chore = build_chore({"child_id": "c1", "title": "Bed", "month": 3, "year": 2025})
        copy = clone_chore(chore)
        copy["title"] = "changed"
        assert chore["title"] == "Bed"


# =============================================================================
# Bonus tasks
# =============================================================================


class TestBonusTaskBuilders:
    """Tests for validate_bonus_task_data and build_bonus_task."""

    @pytest.mark.parametrize(
        "reward", [0, -3, None, "abc", 0.004, float("nan"), float("inf")]
    )
    def test_non_positive_reward_rejected(self, reward: object) -> None:
        """Reward must be a finite number that stays positive after rounding."""
        errors = validate_bonus_task_data({"title": "Wash", "reward_amount": reward})
        assert errors == {
            const.DATA_BONUS_TASK_REWARD_AMOUNT: const.ERROR_MSG_REWARD_NOT_POSITIVE
        }

    def test_new_task_is_available(self) -> None:
        """Creation always yields an available task."""
        task = build_bonus_task(
            {"created_by": "p1", "title": "Wash", "reward_amount": 5, "is_available": False}
        )
        assert task["is_available"] is True
        assert task["reward_amount"] == 5.0

    def test_update_reward_must_stay_positive(self) -> None:
        """Updating the reward to zero raises."""
        task = build_bonus_task({"created_by": "p1", "title": "Wash", "reward_amount": 5})
        with pytest.raises(EntityValidationError):
            build_bonus_task({"reward_amount": 0}, existing=task)

    @pytest.mark.parametrize("reward", [0.004, float("nan")])
    def test_build_refuses_reward_that_is_not_storable(self, reward: float) -> None:
        """Builders apply the same rounded, finite check as validation."""
        task = build_bonus_task({"created_by": "p1", "title": "Wash", "reward_amount": 5})
        with pytest.raises(EntityValidationError) as exc_info:
            build_bonus_task({"reward_amount": reward}, existing=task)
        assert exc_info.value.field == const.DATA_BONUS_TASK_REWARD_AMOUNT

    def test_reward_is_stored_rounded(self) -> None:
        """A reward just above half a cent rounds up and is kept."""
        task = build_bonus_task(
            {"created_by": "p1", "title": "Wash", "reward_amount": 0.006}
        )
        assert task["reward_amount"] == 0.01


# =============================================================================
# Reservations
# =============================================================================


class TestReservationBuilders:
    """Tests for build_reservation and clone_reservation."""

    @freeze_time("2025-03-15 12:00:00", tz_offset=0)
    def test_build_reservation(self) -> None:
        """Fresh reservations are open and stamped now."""
        res = build_reservation("t1", "c1")
        assert res == {
            "id": "t1:c1",
            "task_id": "t1",
            "child_id": "c1",
            "is_completed": False,
            "completed_at": None,
            "reserved_at": "2025-03-15T12:00:00+00:00",
        }

    def test_clone_keeps_approval(self) -> None:
        """Approval fields survive a clone when present."""
        res = build_reservation("t1", "c1")
        res["approved_by"] = "p1"
        res["approved_at"] = "2025-03-16T09:00:00+00:00"
        copy = clone_reservation(res)
        assert copy["approved_by"] == "p1"
        assert copy["approved_at"] == "2025-03-16T09:00:00+00:00"

    def test_clone_without_approval(self) -> None:
        """Unapproved reservations carry no approval keys."""
        copy = clone_reservation(build_reservation("t1", "c1"))
        assert "approved_by" not in copy
