"""Entity lifecycle helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Entity field defaults
- Business rule validation
- Complete entity structure building
- Explicit per-entity copies handed out by the store

### Build Functions
Each entity type has a `build_<entity>()` function that:
- Takes data keyed by DATA_* constants
- Generates an id for new entities
- Sets timestamps where the entity carries them
- Applies field defaults
- Returns a complete entity dict ready for storage

### Validation Functions
Each creatable entity has a `validate_<entity>_data()` function that:
- Takes data with DATA_* keys
- Performs business rule validation
- Returns dict of errors (empty if valid)

### Clone Functions
Each entity type has a `clone_<entity>()` function that builds a brand new
dict field by field. The store never returns its own records; callers
always receive one of these copies.
"""

from __future__ import annotations

import math
from typing import Any
import uuid

from . import const
from .engines.bonus_task_engine import BonusTaskEngine
from .type_defs import BonusTaskData, ChoreData, ReservationData, UserData
from .utils.dt_utils import dt_now_iso
from .utils.math_utils import round_amount

# ==============================================================================
# HELPER FUNCTIONS FOR FIELD NORMALIZATION
# ==============================================================================


def _normalize_text(value: Any) -> str:
    """Return a stripped string, or an empty string for None."""
    if value is None:
        return ""
    return str(value).strip()


def _normalize_description(value: Any) -> str | None:
    """Normalize an optional description.

    Blank or whitespace-only descriptions are stored as None so the
    "description?" field is either meaningful text or absent.
    """
    text = _normalize_text(value)
    return text or None


def _normalize_reward(value: Any) -> float | None:
    """Return the reward as it will be stored, or None if it is not positive.

    The check runs on the rounded amount so a reward that rounds to zero is
    refused. NaN and infinities are refused too.
    """
    try:
        reward = round_amount(float(value))
    except (ValueError, TypeError):
        return None
    if not math.isfinite(reward) or reward <= 0:
        return None
    return reward


# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class EntityValidationError(Exception):
    """Validation error with field-specific information.

    Raised when a builder is handed data that fails a business rule.

    Attributes:
        field: The DATA_* key identifying the field that failed
        message: Human readable error message
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize EntityValidationError."""
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


# ==============================================================================
# USERS
# ==============================================================================


def build_user(user_input: dict[str, Any]) -> UserData:
    """Build a user record for seeding.

    Raises:
        EntityValidationError: If the role is unknown or the allowance is negative
    """
    role = user_input.get(const.DATA_USER_ROLE)
    if role not in const.ROLES:
        raise EntityValidationError(const.DATA_USER_ROLE, f"Unknown role '{role}'")

    allowance = float(user_input.get(const.DATA_USER_MONTHLY_ALLOWANCE, 0.0))
    if allowance < 0:
        raise EntityValidationError(
            const.DATA_USER_MONTHLY_ALLOWANCE, "Monthly allowance cannot be negative"
        )

    return UserData(
        id=str(user_input.get(const.DATA_USER_ID) or uuid.uuid4()),
        username=_normalize_text(user_input.get(const.DATA_USER_USERNAME)),
        display_name=_normalize_text(user_input.get(const.DATA_USER_DISPLAY_NAME)),
        role=role,
        monthly_allowance=round_amount(allowance),
    )


def clone_user(user: UserData) -> UserData:
    """Return an independent copy of a user record."""
    return UserData(
        id=user[const.DATA_USER_ID],
        username=user[const.DATA_USER_USERNAME],
        display_name=user[const.DATA_USER_DISPLAY_NAME],
        role=user[const.DATA_USER_ROLE],
        monthly_allowance=user[const.DATA_USER_MONTHLY_ALLOWANCE],
    )


# ==============================================================================
# CHORES
# ==============================================================================


def validate_chore_data(
    data: dict[str, Any],
    *,
    is_update: bool = False,
) -> dict[str, str]:
    """Validate chore business rules.

    Args:
        data: Chore data dict with DATA_* keys
        is_update: True if validating a partial update (only provided
            fields are checked)

    Returns:
        Dict of errors: {field: message}. Empty dict means validation passed.

    Validation Rules:
        1. Title not blank (create) or not blank if provided (update)
        2. Month within 1-12 (create only, month is not updatable)
        3. Year within the supported range (create only)
    """
    errors: dict[str, str] = {}

    if not is_update or const.DATA_CHORE_TITLE in data:
        if not _normalize_text(data.get(const.DATA_CHORE_TITLE)):
            errors[const.DATA_CHORE_TITLE] = const.ERROR_MSG_TITLE_REQUIRED

    if not is_update:
        month = data.get(const.DATA_CHORE_MONTH)
        if not isinstance(month, int) or not (
            const.MONTH_MIN <= month <= const.MONTH_MAX
        ):
            errors[const.DATA_CHORE_MONTH] = "Month must be between 1 and 12"

        year = data.get(const.DATA_CHORE_YEAR)
        if not isinstance(year, int) or not (const.YEAR_MIN <= year <= const.YEAR_MAX):
            errors[const.DATA_CHORE_YEAR] = "Year is out of range"

    return errors


def build_chore(
    user_input: dict[str, Any],
    existing: ChoreData | None = None,
) -> ChoreData:
    """Build chore data for create or update operations.

    One function handles both create (existing=None) and update
    (existing=ChoreData). In update mode only the fields present in
    user_input change; setting is_completed to True stamps completed_at
    with the current time, setting it to False clears it.

    Raises:
        EntityValidationError: If the title is blank
    """
    is_create = existing is None

    def get_field(data_key: str, default: Any) -> Any:
        """Get field value: user_input > existing > default."""
        if data_key in user_input:
            return user_input[data_key]
        if existing is not None:
            return existing.get(data_key, default)
        return default

    title = _normalize_text(get_field(const.DATA_CHORE_TITLE, ""))
    if (is_create or const.DATA_CHORE_TITLE in user_input) and not title:
        raise EntityValidationError(
            const.DATA_CHORE_TITLE, const.ERROR_MSG_TITLE_REQUIRED
        )

    is_completed = bool(get_field(const.DATA_CHORE_IS_COMPLETED, False))
    if const.DATA_CHORE_IS_COMPLETED in user_input:
        completed_at = dt_now_iso() if is_completed else None
    else:
        completed_at = get_field(const.DATA_CHORE_COMPLETED_AT, None)

    if existing is None:
        chore_id = str(uuid.uuid4())
    else:
        chore_id = existing[const.DATA_CHORE_ID]

    return ChoreData(
        id=chore_id,
        child_id=str(get_field(const.DATA_CHORE_CHILD_ID, "")),
        title=title,
        description=_normalize_description(
            get_field(const.DATA_CHORE_DESCRIPTION, None)
        ),
        is_completed=is_completed,
        completed_at=completed_at,
        month=int(get_field(const.DATA_CHORE_MONTH, 0)),
        year=int(get_field(const.DATA_CHORE_YEAR, 0)),
    )


def clone_chore(chore: ChoreData) -> ChoreData:
    """Return an independent copy of a chore record."""
    return ChoreData(
        id=chore[const.DATA_CHORE_ID],
        child_id=chore[const.DATA_CHORE_CHILD_ID],
        title=chore[const.DATA_CHORE_TITLE],
        description=chore[const.DATA_CHORE_DESCRIPTION],
        is_completed=chore[const.DATA_CHORE_IS_COMPLETED],
        completed_at=chore[const.DATA_CHORE_COMPLETED_AT],
        month=chore[const.DATA_CHORE_MONTH],
        year=chore[const.DATA_CHORE_YEAR],
    )


# ==============================================================================
# BONUS TASKS
# ==============================================================================


def validate_bonus_task_data(
    data: dict[str, Any],
    *,
    is_update: bool = False,
) -> dict[str, str]:
    """Validate bonus task business rules.

    Validation Rules:
        1. Title not blank (create) or not blank if provided (update)
        2. Reward amount > 0 and finite after rounding to cents (create) or
           > 0 and finite if provided (update)

    Returns:
        Dict of errors: {field: message}. Empty dict means validation passed.
    """
    errors: dict[str, str] = {}

    if not is_update or const.DATA_BONUS_TASK_TITLE in data:
        if not _normalize_text(data.get(const.DATA_BONUS_TASK_TITLE)):
            errors[const.DATA_BONUS_TASK_TITLE] = const.ERROR_MSG_TITLE_REQUIRED

    if not is_update or const.DATA_BONUS_TASK_REWARD_AMOUNT in data:
        if _normalize_reward(data.get(const.DATA_BONUS_TASK_REWARD_AMOUNT)) is None:
            errors[const.DATA_BONUS_TASK_REWARD_AMOUNT] = (
                const.ERROR_MSG_REWARD_NOT_POSITIVE
            )

    return errors


def build_bonus_task(
    user_input: dict[str, Any],
    existing: BonusTaskData | None = None,
) -> BonusTaskData:
    """Build bonus task data for create or update operations.

    New tasks always start available; availability of an existing task only
    changes when user_input carries is_available.

    Raises:
        EntityValidationError: If the title is blank or the reward is not positive
    """
    is_create = existing is None

    def get_field(data_key: str, default: Any) -> Any:
        """Get field value: user_input > existing > default."""
        if data_key in user_input:
            return user_input[data_key]
        if existing is not None:
            return existing.get(data_key, default)
        return default

    title = _normalize_text(get_field(const.DATA_BONUS_TASK_TITLE, ""))
    if (is_create or const.DATA_BONUS_TASK_TITLE in user_input) and not title:
        raise EntityValidationError(
            const.DATA_BONUS_TASK_TITLE, const.ERROR_MSG_TITLE_REQUIRED
        )

    reward_amount = _normalize_reward(
        get_field(const.DATA_BONUS_TASK_REWARD_AMOUNT, 0.0)
    )
    if reward_amount is None:
        raise EntityValidationError(
            const.DATA_BONUS_TASK_REWARD_AMOUNT, const.ERROR_MSG_REWARD_NOT_POSITIVE
        )

    if existing is None:
        task_id = str(uuid.uuid4())
        is_available = True
    else:
        task_id = existing[const.DATA_BONUS_TASK_ID]
        is_available = bool(get_field(const.DATA_BONUS_TASK_IS_AVAILABLE, True))

    return BonusTaskData(
        id=task_id,
        created_by=str(get_field(const.DATA_BONUS_TASK_CREATED_BY, "")),
        title=title,
        description=_normalize_description(
            get_field(const.DATA_BONUS_TASK_DESCRIPTION, None)
        ),
        reward_amount=reward_amount,
        is_available=is_available,
    )


def clone_bonus_task(task: BonusTaskData) -> BonusTaskData:
    """Return an independent copy of a bonus task record."""
    return BonusTaskData(
        id=task[const.DATA_BONUS_TASK_ID],
        created_by=task[const.DATA_BONUS_TASK_CREATED_BY],
        title=task[const.DATA_BONUS_TASK_TITLE],
        description=task[const.DATA_BONUS_TASK_DESCRIPTION],
        reward_amount=task[const.DATA_BONUS_TASK_REWARD_AMOUNT],
        is_available=task[const.DATA_BONUS_TASK_IS_AVAILABLE],
    )


# ==============================================================================
# TASK RESERVATIONS
# ==============================================================================


def build_reservation(task_id: str, child_id: str) -> ReservationData:
    """Build a fresh, open reservation stamped with the current time."""
    return ReservationData(
        id=BonusTaskEngine.reservation_id_for(task_id, child_id),
        task_id=task_id,
        child_id=child_id,
        is_completed=False,
        completed_at=None,
        reserved_at=dt_now_iso(),
    )


def clone_reservation(reservation: ReservationData) -> ReservationData:
    """Return an independent copy of a reservation record."""
    copy = ReservationData(
        id=reservation[const.DATA_RESERVATION_ID],
        task_id=reservation[const.DATA_RESERVATION_TASK_ID],
        child_id=reservation[const.DATA_RESERVATION_CHILD_ID],
        is_completed=reservation[const.DATA_RESERVATION_IS_COMPLETED],
        completed_at=reservation[const.DATA_RESERVATION_COMPLETED_AT],
        reserved_at=reservation[const.DATA_RESERVATION_RESERVED_AT],
    )
    if const.DATA_RESERVATION_APPROVED_BY in reservation:
        copy[const.DATA_RESERVATION_APPROVED_BY] = reservation[
            const.DATA_RESERVATION_APPROVED_BY
        ]
        copy[const.DATA_RESERVATION_APPROVED_AT] = reservation.get(
            const.DATA_RESERVATION_APPROVED_AT
        )
    return copy
