# File: utils/dt_utils.py
"""Date and time utilities for FamilyFlow.

Pure Python date/time functions with no store or service dependencies.
All functions here can be unit tested in isolation.

Uses standard library: datetime, zoneinfo, dateutil.

Functions:
    - set_default_timezone / get_default_timezone: Month-window timezone
    - dt_now_utc: Current datetime in UTC
    - dt_now_iso: Current UTC datetime as ISO string
    - dt_now_local: Current datetime in the default timezone
    - dt_parse: Parse an ISO string into an aware datetime
    - dt_month_bounds: Start/end of a calendar month
    - dt_in_month: Check whether a timestamp falls inside a calendar month
"""

from __future__ import annotations

from datetime import UTC, datetime
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities
from dateutil.relativedelta import relativedelta

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Timezone Configuration
# ==============================================================================

# Default timezone used to decide which calendar month a timestamp belongs to
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for month-window calculations.

    Args:
        tz: ZoneInfo object representing the household's timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def dt_now_iso() -> str:
    """Return the current UTC datetime as an ISO 8601 string.

    Example:
        "2025-04-07T14:30:00+00:00"
    """
    return dt_now_utc().isoformat()


def dt_now_local(tz: ZoneInfo | None = None) -> datetime:
    """Return the current datetime in the default timezone."""
    return datetime.now(tz or DEFAULT_TIME_ZONE)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse(dt_str: str | None) -> datetime | None:
    """Parse an ISO 8601 string into a timezone-aware datetime.

    Accepts the trailing "Z" form as well as explicit offsets. Naive strings
    are taken to be UTC.

    Args:
        dt_str: ISO datetime string, or None

    Returns:
        Aware datetime, or None if the input is empty or unparseable.
    """
    if not dt_str:
        return None

    try:
        result = datetime.fromisoformat(dt_str.replace("Z", "+00:00"))
    except ValueError:
        _LOGGER.debug("Could not parse datetime string '%s'", dt_str)
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=UTC)
    return result


# ==============================================================================
# Month Windows
# ==============================================================================


def dt_month_bounds(
    month: int, year: int, tz: ZoneInfo | None = None
) -> tuple[datetime, datetime]:
    """Return the half-open [start, end) window of a calendar month.

    Args:
        month: Calendar month, 1-12
        year: Calendar year
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Tuple of aware datetimes: first instant of the month and first
        instant of the following month.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    start = datetime(year, month, 1, tzinfo=tz_info)
    return start, start + relativedelta(months=1)


def dt_in_month(
    dt_str: str | None, month: int, year: int, tz: ZoneInfo | None = None
) -> bool:
    """Return True if an ISO timestamp falls inside the given calendar month.

    The month is evaluated in the default timezone. Missing or unparseable
    timestamps are never inside any month.
    """
    parsed = dt_parse(dt_str)
    if parsed is None:
        return False

    start, end = dt_month_bounds(month, year, tz)
    return start <= parsed < end
