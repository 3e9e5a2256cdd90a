# File: __init__.py
"""FamilyFlow: household chores, bonus tasks and monthly allowance.

The core is an in-memory store fronted by an access-controlled service:

    store = FamilyStore.with_demo_family()
    service = FamilyFlowService(store)
    result = await service.get_allowance_summary(
        RequestContext.for_user(child), child["id"], month, year
    )

Every service call returns ApiSuccess or ApiFailure; nothing is raised.
"""

from .context import RequestContext
from .helpers.transport_helpers import TransportSettings
from .results import ApiError, ApiErrorDetail, ApiFailure, ApiSuccess
from .services import FamilyFlowService
from .store import FamilyStore

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "ApiErrorDetail",
    "ApiFailure",
    "ApiSuccess",
    "FamilyFlowService",
    "FamilyStore",
    "RequestContext",
    "TransportSettings",
]
