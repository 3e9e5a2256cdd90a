# File: helpers/auth_helpers.py
"""Authorization helper functions for FamilyFlow.

Functions that check a caller's identity, role and ownership for service
calls. Each check returns None when the caller may proceed, or the
ApiFailure to hand straight back when it may not.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const
from ..results import ApiFailure, failure

if TYPE_CHECKING:
    from ..context import RequestContext


# ==============================================================================
# Authentication
# ==============================================================================


def require_authenticated(ctx: RequestContext, action: str) -> ApiFailure | None:
    """Refuse calls that carry no caller identity.

    Args:
        ctx: Request context of the call
        action: Action name for logging purposes

    Returns:
        UNAUTHENTICATED failure, or None if a caller is present
    """
    if ctx.is_authenticated:
        return None

    const.LOGGER.warning("WARNING: %s: Call without caller identity", action)
    return failure(const.ERROR_CODE_UNAUTHENTICATED, const.ERROR_MSG_UNAUTHENTICATED)


# ==============================================================================
# Authorization Checks
# ==============================================================================


def require_role(
    ctx: RequestContext,
    role: str,
    action: str,
    message: str,
) -> ApiFailure | None:
    """Refuse callers without the given role.

    Authorization rules:
      - Unauthenticated => UNAUTHENTICATED
      - Caller role != role => FORBIDDEN
      - Otherwise => allowed

    Args:
        ctx: Request context of the call
        role: Required role (const.ROLE_PARENT or const.ROLE_CHILD)
        action: Action name for logging purposes
        message: Message for the FORBIDDEN error

    Returns:
        Failure result, or None if allowed
    """
    if refused := require_authenticated(ctx, action):
        return refused

    if ctx.role == role:
        return None

    const.LOGGER.warning(
        "WARNING: %s: User '%s' with role '%s' is not a %s",
        action,
        ctx.user_id,
        ctx.role,
        role,
    )
    return failure(const.ERROR_CODE_FORBIDDEN, message)


def require_child_owner(
    ctx: RequestContext,
    child_id: str,
    action: str,
    message: str,
) -> ApiFailure | None:
    """Refuse callers that are not the targeted child themselves.

    Authorization rules:
      - Unauthenticated => UNAUTHENTICATED
      - Caller not a child => FORBIDDEN
      - Caller id != child_id => FORBIDDEN
      - Otherwise => allowed
    """
    if refused := require_role(ctx, const.ROLE_CHILD, action, message):
        return refused

    if ctx.user_id == child_id:
        return None

    const.LOGGER.warning(
        "WARNING: %s: Child '%s' attempted to act for child '%s'",
        action,
        ctx.user_id,
        child_id,
    )
    return failure(const.ERROR_CODE_FORBIDDEN, message)
