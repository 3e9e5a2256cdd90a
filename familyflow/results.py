"""Tagged result types returned by every FamilyFlowService call.

A call returns exactly one of:
- ApiSuccess(data=...)   the operation succeeded
- ApiFailure(error=...)  the operation was refused or failed

Callers branch on the type (or on `.ok`); errors are never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ApiErrorDetail:
    """One field-level problem attached to an error."""

    message: str
    field: str | None = None


@dataclass(frozen=True)
class ApiError:
    """Error payload: a code from const.ERROR_CODE_*, a message, optional details."""

    code: str
    message: str
    details: list[ApiErrorDetail] | None = field(default=None)


@dataclass(frozen=True)
class ApiSuccess(Generic[T]):
    """Successful call carrying its data."""

    data: T

    @property
    def ok(self) -> bool:
        """Always True."""
        return True


@dataclass(frozen=True)
class ApiFailure:
    """Failed call carrying its error."""

    error: ApiError

    @property
    def ok(self) -> bool:
        """Always False."""
        return False


ApiResult = ApiSuccess[T] | ApiFailure


def success(data: T) -> ApiSuccess[T]:
    """Wrap data in a success result."""
    return ApiSuccess(data=data)


def failure(
    code: str,
    message: str,
    details: list[ApiErrorDetail] | None = None,
) -> ApiFailure:
    """Build a failure result."""
    return ApiFailure(error=ApiError(code=code, message=message, details=details))
