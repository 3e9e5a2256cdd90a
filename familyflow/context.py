"""Request context carried into every service call.

There is no session state anywhere in FamilyFlow: the caller's identity (or
its absence) travels with each call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from . import const

if TYPE_CHECKING:
    from .type_defs import UserData


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller for a single service call.

    Attributes:
        current_user: The calling user, or None for an anonymous caller
    """

    current_user: UserData | None = None

    @classmethod
    def anonymous(cls) -> RequestContext:
        """Return a context with no caller identity."""
        return cls(current_user=None)

    @classmethod
    def for_user(cls, user: UserData) -> RequestContext:
        """Return a context acting as the given user."""
        return cls(current_user=user)

    @property
    def is_authenticated(self) -> bool:
        """True if the context carries a caller."""
        return self.current_user is not None

    @property
    def user_id(self) -> str | None:
        """The caller's id, or None."""
        if self.current_user is None:
            return None
        return self.current_user[const.DATA_USER_ID]

    @property
    def role(self) -> str | None:
        """The caller's role, or None."""
        if self.current_user is None:
            return None
        return self.current_user[const.DATA_USER_ROLE]
