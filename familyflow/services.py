# File: services.py
"""Access-controlled service facade for FamilyFlow.

FamilyFlowService is the only entry point callers use. Each call:
1. waits one simulated network round trip,
2. checks authentication, then role, then ownership,
3. validates its input (voluptuous schemas for shape, data_builders for
   business rules),
4. invokes the store,
5. translates the outcome into ApiSuccess / ApiFailure.

Nothing is raised to the caller; every refusal comes back as a typed error
and leaves the store untouched.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any

import voluptuous as vol

from . import const
from .data_builders import (
    clone_user,
    validate_bonus_task_data,
    validate_chore_data,
)
from .engines.bonus_task_engine import BonusTaskStateError
from .helpers.auth_helpers import (
    require_authenticated,
    require_child_owner,
    require_role,
)
from .helpers.transport_helpers import SimulatedTransport, TransportSettings
from .results import ApiErrorDetail, ApiFailure, failure, success

if TYPE_CHECKING:
    from .context import RequestContext
    from .results import ApiResult
    from .store import FamilyStore
    from .type_defs import (
        AllowanceSummaryData,
        BonusTaskData,
        ChoreData,
        DeletedEntityData,
        MonthlySummaryRow,
        ReservationData,
        UserData,
    )

# --- Service Schemas ---
_OPTIONAL_TEXT = vol.Any(str, None)
_WHOLE_NUMBER = vol.Any(int, vol.All(str, vol.Coerce(int)))
_MONTH = vol.All(
    _WHOLE_NUMBER, vol.Range(min=const.MONTH_MIN, max=const.MONTH_MAX)
)
_YEAR = vol.All(_WHOLE_NUMBER, vol.Range(min=const.YEAR_MIN, max=const.YEAR_MAX))
_REWARD = vol.Coerce(float)

CREATE_CHORE_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_CHILD_ID): str,
        vol.Required(const.FIELD_TITLE): str,
        vol.Optional(const.FIELD_DESCRIPTION, default=None): _OPTIONAL_TEXT,
        vol.Required(const.FIELD_MONTH): _MONTH,
        vol.Required(const.FIELD_YEAR): _YEAR,
    }
)

UPDATE_CHORE_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_TITLE): str,
        vol.Optional(const.FIELD_DESCRIPTION): _OPTIONAL_TEXT,
        vol.Optional(const.FIELD_IS_COMPLETED): bool,
    }
)

CREATE_BONUS_TASK_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TITLE): str,
        vol.Optional(const.FIELD_DESCRIPTION, default=None): _OPTIONAL_TEXT,
        vol.Required(const.FIELD_REWARD_AMOUNT): _REWARD,
    }
)

UPDATE_BONUS_TASK_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_TITLE): str,
        vol.Optional(const.FIELD_DESCRIPTION): _OPTIONAL_TEXT,
        vol.Optional(const.FIELD_REWARD_AMOUNT): _REWARD,
        vol.Optional(const.FIELD_IS_AVAILABLE): bool,
    }
)

CREATE_CHORES_FOR_ALL_CHILDREN_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_TITLE): vol.Any(str, None),
        vol.Optional(const.FIELD_DESCRIPTION, default=None): _OPTIONAL_TEXT,
        vol.Required(const.FIELD_MONTH): _MONTH,
        vol.Required(const.FIELD_YEAR): _YEAR,
    }
)


def _validate_call(
    schema: vol.Schema, data: dict[str, Any], action: str
) -> tuple[dict[str, Any], ApiFailure | None]:
    """Run a call schema, turning voluptuous errors into a BAD_REQUEST failure."""
    try:
        return schema(data), None
    except vol.MultipleInvalid as err:
        details = [
            ApiErrorDetail(
                message=error.msg,
                field=str(error.path[0]) if error.path else None,
            )
            for error in err.errors
        ]
        const.LOGGER.debug("DEBUG: %s: Invalid call data: %s", action, err)
        return data, failure(
            const.ERROR_CODE_BAD_REQUEST, const.ERROR_MSG_INVALID_REQUEST, details
        )


def _rule_failure(errors: dict[str, str], code: str) -> ApiFailure:
    """Turn a validate_*() error dict into a failure; first message leads."""
    details = [ApiErrorDetail(message=msg, field=key) for key, msg in errors.items()]
    return failure(code, details[0].message, details)


def _strip_optional(value: str | None) -> str | None:
    """Strip a text value, mapping blank to None."""
    if value is None:
        return None
    return value.strip() or None


class FamilyFlowService:
    """Remote-call style boundary over one FamilyStore."""

    def __init__(
        self,
        store: FamilyStore,
        settings: TransportSettings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: The store this service fronts; callers never see it directly
            settings: Simulated transport settings (defaults if omitted)
            rng: Random source for latency and fault draws
        """
        self._store = store
        self._transport = SimulatedTransport(settings, rng)

    @property
    def settings(self) -> TransportSettings:
        """Active transport settings."""
        return self._transport.settings

    # -------------------------------------------------------------------------------------
    # Any authenticated caller
    # -------------------------------------------------------------------------------------

    async def get_me(self, ctx: RequestContext) -> ApiResult[UserData]:
        """Return a copy of the caller's own user record."""
        await self._transport.round_trip()
        if refused := require_authenticated(ctx, "Get Me"):
            return refused
        return success(clone_user(ctx.current_user))

    async def get_bonus_task(
        self, ctx: RequestContext, task_id: str
    ) -> ApiResult[BonusTaskData]:
        """Return one bonus task by id."""
        await self._transport.round_trip()
        if refused := require_authenticated(ctx, "Get Bonus Task"):
            return refused
        task = self._store.get_bonus_task(task_id)
        if task is None:
            return failure(
                const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_BONUS_TASK_NOT_FOUND
            )
        return success(task)

    # -------------------------------------------------------------------------------------
    # Child-facing
    # -------------------------------------------------------------------------------------

    async def list_chores_for_child(
        self, ctx: RequestContext, child_id: str, month: int, year: int
    ) -> ApiResult[list[ChoreData]]:
        """Return the calling child's chores for (month, year)."""
        await self._transport.round_trip()
        if refused := require_child_owner(
            ctx, child_id, "List Chores", const.ERROR_MSG_CHILD_ONLY_CHORES
        ):
            return refused
        return success(self._store.list_chores_for_child(child_id, month, year))

    async def list_available_bonus_tasks(
        self, ctx: RequestContext
    ) -> ApiResult[list[BonusTaskData]]:
        """Return every task still open for reservation.

        Subject to synthetic INTERNAL failures at the configured rate; an
        injected failure replaces the store call entirely.
        """
        await self._transport.round_trip()
        if refused := require_role(
            ctx,
            const.ROLE_CHILD,
            "List Bonus Tasks",
            const.ERROR_MSG_CHILD_ONLY_BONUS_TASKS,
        ):
            return refused
        if self._transport.should_fail("List Bonus Tasks"):
            return failure(const.ERROR_CODE_INTERNAL, const.ERROR_MSG_TRANSIENT_FAILURE)
        return success(self._store.list_available_bonus_tasks())

    async def list_reservations_for_child(
        self, ctx: RequestContext, child_id: str
    ) -> ApiResult[list[ReservationData]]:
        """Return the calling child's reservations."""
        await self._transport.round_trip()
        if refused := require_child_owner(
            ctx,
            child_id,
            "List Reservations",
            const.ERROR_MSG_CHILD_ONLY_RESERVATIONS,
        ):
            return refused
        return success(self._store.list_reservations_for_child(child_id))

    async def reserve_bonus_task(
        self, ctx: RequestContext, task_id: str
    ) -> ApiResult[ReservationData]:
        """Reserve an available task for the calling child."""
        await self._transport.round_trip()
        if refused := require_role(
            ctx, const.ROLE_CHILD, "Reserve Task", const.ERROR_MSG_CHILD_ONLY_RESERVE
        ):
            return refused
        reservation = self._store.reserve_task(task_id, ctx.user_id)
        if reservation is None:
            return failure(const.ERROR_CODE_CONFLICT, const.ERROR_MSG_TASK_UNAVAILABLE)
        return success(reservation)

    async def complete_chore(
        self, ctx: RequestContext, chore_id: str
    ) -> ApiResult[ChoreData]:
        """Mark one of the calling child's chores completed."""
        await self._transport.round_trip()
        action = "Complete Chore"
        if refused := require_role(
            ctx, const.ROLE_CHILD, action, const.ERROR_MSG_CHILD_ONLY_COMPLETE_CHORE
        ):
            return refused
        chore = self._store.get_chore(chore_id)
        if chore is None:
            return failure(const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_CHORE_NOT_FOUND)
        if refused := require_child_owner(
            ctx,
            chore[const.DATA_CHORE_CHILD_ID],
            action,
            const.ERROR_MSG_NOT_OWNER_CHORE,
        ):
            return refused
        updated = self._store.complete_chore(chore_id)
        if updated is None:
            return failure(const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_CHORE_NOT_FOUND)
        return success(updated)

    async def complete_reservation(
        self, ctx: RequestContext, reservation_id: str
    ) -> ApiResult[ReservationData]:
        """Mark one of the calling child's reservations completed."""
        await self._transport.round_trip()
        action = "Complete Reservation"
        if refused := require_role(
            ctx,
            const.ROLE_CHILD,
            action,
            const.ERROR_MSG_CHILD_ONLY_COMPLETE_RESERVATION,
        ):
            return refused
        reservation = self._store.get_reservation(reservation_id)
        if reservation is None:
            return failure(
                const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_RESERVATION_NOT_FOUND
            )
        if refused := require_child_owner(
            ctx,
            reservation[const.DATA_RESERVATION_CHILD_ID],
            action,
            const.ERROR_MSG_NOT_OWNER_RESERVATION,
        ):
            return refused
        updated = self._store.complete_reservation(reservation_id)
        if updated is None:
            return failure(
                const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_RESERVATION_NOT_FOUND
            )
        return success(updated)

    async def get_allowance_summary(
        self, ctx: RequestContext, child_id: str, month: int, year: int
    ) -> ApiResult[AllowanceSummaryData]:
        """Return the calling child's allowance summary for (month, year)."""
        await self._transport.round_trip()
        if refused := require_child_owner(
            ctx, child_id, "Allowance Summary", const.ERROR_MSG_CHILD_ONLY_ALLOWANCE
        ):
            return refused
        summary = self._store.calculate_allowance(child_id, month, year)
        if summary is None:
            return failure(const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_CHILD_NOT_FOUND)
        return success(summary)

    # -------------------------------------------------------------------------------------
    # Parent-facing
    # -------------------------------------------------------------------------------------

    async def list_family(self, ctx: RequestContext) -> ApiResult[list[UserData]]:
        """Return every family member."""
        await self._transport.round_trip()
        if refused := require_role(
            ctx, const.ROLE_PARENT, "List Family", const.ERROR_MSG_PARENT_ONLY_FAMILY
        ):
            return refused
        return success(self._store.list_users())

    async def list_monthly_summaries(
        self, ctx: RequestContext, month: int, year: int
    ) -> ApiResult[list[MonthlySummaryRow]]:
        """Return one earnings row per child for (month, year)."""
        await self._transport.round_trip()
        if refused := require_role(
            ctx,
            const.ROLE_PARENT,
            "Monthly Summaries",
            const.ERROR_MSG_PARENT_ONLY_SUMMARIES,
        ):
            return refused
        return success(self._store.list_monthly_summaries(month, year))

    async def create_chore(
        self,
        ctx: RequestContext,
        child_id: str,
        title: str,
        month: int,
        year: int,
        description: str | None = None,
    ) -> ApiResult[ChoreData]:
        """Create a chore for one child."""
        await self._transport.round_trip()
        action = "Create Chore"
        if refused := require_role(
            ctx, const.ROLE_PARENT, action, const.ERROR_MSG_PARENT_ONLY_CREATE_CHORE
        ):
            return refused
        data, invalid = _validate_call(
            CREATE_CHORE_SCHEMA,
            {
                const.FIELD_CHILD_ID: child_id,
                const.FIELD_TITLE: title,
                const.FIELD_DESCRIPTION: description,
                const.FIELD_MONTH: month,
                const.FIELD_YEAR: year,
            },
            action,
        )
        if invalid:
            return invalid
        if errors := validate_chore_data(data):
            return _rule_failure(errors, const.ERROR_CODE_BAD_REQUEST)

        created = self._store.create_chore(
            data[const.FIELD_CHILD_ID],
            data[const.FIELD_TITLE].strip(),
            _strip_optional(data[const.FIELD_DESCRIPTION]),
            data[const.FIELD_MONTH],
            data[const.FIELD_YEAR],
        )
        if created is None:
            return failure(
                const.ERROR_CODE_BAD_REQUEST, const.ERROR_MSG_INVALID_CHILD_FOR_CHORE
            )
        return success(created)

    async def update_chore(
        self, ctx: RequestContext, chore_id: str, updates: dict[str, Any]
    ) -> ApiResult[ChoreData]:
        """Apply a partial update (title, description, is_completed) to a chore."""
        await self._transport.round_trip()
        action = "Update Chore"
        if refused := require_role(
            ctx, const.ROLE_PARENT, action, const.ERROR_MSG_PARENT_ONLY_UPDATE_CHORE
        ):
            return refused
        data, invalid = _validate_call(UPDATE_CHORE_SCHEMA, dict(updates), action)
        if invalid:
            return invalid
        if errors := validate_chore_data(data, is_update=True):
            return _rule_failure(errors, const.ERROR_CODE_BAD_REQUEST)

        updated = self._store.update_chore(chore_id, data)
        if updated is None:
            return failure(const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_CHORE_NOT_FOUND)
        return success(updated)

    async def delete_chore(
        self, ctx: RequestContext, chore_id: str
    ) -> ApiResult[DeletedEntityData]:
        """Delete a chore."""
        await self._transport.round_trip()
        if refused := require_role(
            ctx,
            const.ROLE_PARENT,
            "Delete Chore",
            const.ERROR_MSG_PARENT_ONLY_DELETE_CHORE,
        ):
            return refused
        if not self._store.delete_chore(chore_id):
            return failure(const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_CHORE_NOT_FOUND)
        return success({"id": chore_id})

    async def create_bonus_task(
        self,
        ctx: RequestContext,
        title: str,
        reward_amount: float,
        description: str | None = None,
    ) -> ApiResult[BonusTaskData]:
        """Create an available bonus task owned by the calling parent."""
        await self._transport.round_trip()
        action = "Create Bonus Task"
        if refused := require_role(
            ctx,
            const.ROLE_PARENT,
            action,
            const.ERROR_MSG_PARENT_ONLY_CREATE_BONUS_TASK,
        ):
            return refused
        data, invalid = _validate_call(
            CREATE_BONUS_TASK_SCHEMA,
            {
                const.FIELD_TITLE: title,
                const.FIELD_DESCRIPTION: description,
                const.FIELD_REWARD_AMOUNT: reward_amount,
            },
            action,
        )
        if invalid:
            return invalid
        if errors := validate_bonus_task_data(data):
            return _rule_failure(errors, const.ERROR_CODE_BAD_REQUEST)

        created = self._store.create_bonus_task(
            ctx.user_id,
            data[const.FIELD_TITLE].strip(),
            _strip_optional(data[const.FIELD_DESCRIPTION]),
            data[const.FIELD_REWARD_AMOUNT],
        )
        if created is None:
            return failure(
                const.ERROR_CODE_BAD_REQUEST,
                const.ERROR_MSG_INVALID_PARENT_FOR_BONUS_TASK,
            )
        return success(created)

    async def update_bonus_task(
        self, ctx: RequestContext, task_id: str, updates: dict[str, Any]
    ) -> ApiResult[BonusTaskData]:
        """Apply a partial update to a bonus task.

        is_available may only be set to a value that agrees with the task's
        reservation state; anything else is a CONFLICT.
        """
        await self._transport.round_trip()
        action = "Update Bonus Task"
        if refused := require_role(
            ctx,
            const.ROLE_PARENT,
            action,
            const.ERROR_MSG_PARENT_ONLY_UPDATE_BONUS_TASK,
        ):
            return refused
        data, invalid = _validate_call(UPDATE_BONUS_TASK_SCHEMA, dict(updates), action)
        if invalid:
            return invalid
        if errors := validate_bonus_task_data(data, is_update=True):
            return _rule_failure(errors, const.ERROR_CODE_BAD_REQUEST)

        try:
            updated = self._store.update_bonus_task(task_id, data)
        except BonusTaskStateError as err:
            const.LOGGER.debug("DEBUG: %s: %s", action, err)
            return failure(
                const.ERROR_CODE_CONFLICT, const.ERROR_MSG_AVAILABILITY_CONFLICT
            )
        if updated is None:
            return failure(
                const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_BONUS_TASK_NOT_FOUND
            )
        return success(updated)

    async def delete_bonus_task(
        self, ctx: RequestContext, task_id: str
    ) -> ApiResult[DeletedEntityData]:
        """Delete a bonus task and any reservation of it."""
        await self._transport.round_trip()
        if refused := require_role(
            ctx,
            const.ROLE_PARENT,
            "Delete Bonus Task",
            const.ERROR_MSG_PARENT_ONLY_DELETE_BONUS_TASK,
        ):
            return refused
        if not self._store.delete_bonus_task(task_id):
            return failure(
                const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_BONUS_TASK_NOT_FOUND
            )
        return success({"id": task_id})

    async def approve_reservation(
        self, ctx: RequestContext, reservation_id: str
    ) -> ApiResult[ReservationData]:
        """Record the calling parent's approval of a completed reservation."""
        await self._transport.round_trip()
        if refused := require_role(
            ctx,
            const.ROLE_PARENT,
            "Approve Reservation",
            const.ERROR_MSG_PARENT_ONLY_APPROVE_RESERVATION,
        ):
            return refused
        reservation = self._store.get_reservation(reservation_id)
        if reservation is None:
            return failure(
                const.ERROR_CODE_NOT_FOUND, const.ERROR_MSG_RESERVATION_NOT_FOUND
            )
        if not reservation[const.DATA_RESERVATION_IS_COMPLETED]:
            return failure(
                const.ERROR_CODE_CONFLICT, const.ERROR_MSG_RESERVATION_NOT_COMPLETED
            )
        approved = self._store.approve_reservation(reservation_id, ctx.user_id)
        if approved is None:
            return failure(
                const.ERROR_CODE_BAD_REQUEST, const.ERROR_MSG_INVALID_PARENT_FOR_APPROVAL
            )
        return success(approved)

    async def create_chores_for_all_children(
        self,
        ctx: RequestContext,
        title: str | None,
        month: int,
        year: int,
        description: str | None = None,
    ) -> ApiResult[list[ChoreData]]:
        """Create the same chore for every child in the family."""
        await self._transport.round_trip()
        action = "Create Chores For All"
        if refused := require_role(
            ctx, const.ROLE_PARENT, action, const.ERROR_MSG_PARENT_ONLY_CREATE_CHORE
        ):
            return refused
        data, invalid = _validate_call(
            CREATE_CHORES_FOR_ALL_CHILDREN_SCHEMA,
            {
                const.FIELD_TITLE: title,
                const.FIELD_DESCRIPTION: description,
                const.FIELD_MONTH: month,
                const.FIELD_YEAR: year,
            },
            action,
        )
        if invalid:
            return invalid
        clean_title = (data[const.FIELD_TITLE] or "").strip()
        if not clean_title:
            return failure(
                const.ERROR_CODE_INVALID_ARGUMENT, const.ERROR_MSG_TITLE_REQUIRED
            )

        return success(
            self._store.add_chores_for_all_children(
                clean_title,
                _strip_optional(data[const.FIELD_DESCRIPTION]),
                data[const.FIELD_MONTH],
                data[const.FIELD_YEAR],
            )
        )
