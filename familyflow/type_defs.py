"""Type definitions for FamilyFlow data structures.

Every stored entity is a plain dict with fixed keys, so each one gets a
TypedDict here. TypedDict is STATIC ANALYSIS ONLY: the store and the
builders still do their own runtime checks.

IMPORTANT: This file must NOT import from store.py, services.py or any
helper module to avoid circular dependencies.
"""

from typing import Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

UserId = str  # Opaque string
ChoreId = str  # Opaque string
BonusTaskId = str  # Opaque string
ReservationId = str  # "<task_id>:<child_id>"
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
UserRole = Literal["parent", "child"]


# =============================================================================
# Stored Entities
# =============================================================================


class UserData(TypedDict):
    """A family member. Seeded at store creation, immutable afterwards."""

    id: UserId
    username: str
    display_name: str
    role: UserRole
    monthly_allowance: float  # Only meaningful for children


class ChoreData(TypedDict):
    """A monthly chore assigned to one child.

    completed_at is set iff is_completed is True.
    """

    id: ChoreId
    child_id: UserId
    title: str
    description: str | None
    is_completed: bool
    completed_at: ISODatetime | None
    month: int  # 1-12
    year: int


class BonusTaskData(TypedDict):
    """A one-off parent-created task with a fixed reward.

    is_available is True iff no reservation references the task.
    """

    id: BonusTaskId
    created_by: UserId
    title: str
    description: str | None
    reward_amount: float  # > 0
    is_available: bool


class ReservationData(TypedDict):
    """Binding of a bonus task to the child who claimed it."""

    id: ReservationId
    task_id: BonusTaskId
    child_id: UserId
    is_completed: bool
    completed_at: ISODatetime | None
    reserved_at: ISODatetime
    approved_by: NotRequired[UserId | None]  # Only set once a parent approves
    approved_at: NotRequired[ISODatetime | None]


class StoreData(TypedDict):
    """Complete in-memory structure owned by FamilyStore.

    Each bucket is keyed by entity id; dict order is insertion order.
    """

    users: dict[UserId, UserData]
    chores: dict[ChoreId, ChoreData]
    bonus_tasks: dict[BonusTaskId, BonusTaskData]
    reservations: dict[ReservationId, ReservationData]


# =============================================================================
# Derived Payloads
# =============================================================================


class AllowanceSummaryData(TypedDict):
    """Monthly earnings for one child. Computed on demand, never stored."""

    child_id: UserId
    month: int
    year: int
    base_allowance: float
    bonus_total: float
    total: float  # base_allowance + bonus_total


class MonthlySummaryRow(TypedDict):
    """One row of the parent's monthly overview."""

    child_id: UserId
    base_allowance: float
    bonus_total: float
    total: float


class DeletedEntityData(TypedDict):
    """Payload returned by delete operations."""

    id: str


# =============================================================================
# Partial Updates
# =============================================================================


class ChoreUpdate(TypedDict, total=False):
    """Fields a parent may change on an existing chore."""

    title: str
    description: str | None
    is_completed: bool


class BonusTaskUpdate(TypedDict, total=False):
    """Fields a parent may change on an existing bonus task."""

    title: str
    description: str | None
    reward_amount: float
    is_available: bool
