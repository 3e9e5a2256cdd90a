"""Shared fixtures for FamilyFlow tests."""

from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from familyflow.context import RequestContext
from familyflow.helpers.transport_helpers import TransportSettings
from familyflow.services import FamilyFlowService
from familyflow.store import FamilyStore
from familyflow.utils import dt_utils
from tests.helpers import SetupResult, setup_from_yaml

PARENT_ID = "parent-1"
CHILD_ID = "child-1"
OTHER_CHILD_ID = "child-2"


@pytest.fixture(autouse=True)
def reset_default_timezone() -> Iterator[None]:
    """Keep month windows in UTC unless a test changes them."""
    original = dt_utils.get_default_timezone()
    yield
    dt_utils.set_default_timezone(original)


@pytest.fixture
def scenario() -> SetupResult:
    """Minimal household seeded from YAML."""
    return setup_from_yaml("scenario_minimal.yaml")


@pytest.fixture
def history_scenario() -> SetupResult:
    """Household with bonus history across month boundaries."""
    return setup_from_yaml("scenario_bonus_history.yaml")


@pytest.fixture
def store(scenario: SetupResult) -> FamilyStore:  # pylint: disable=redefined-outer-name
    """Store seeded with the minimal household."""
    return scenario.store


@pytest.fixture
def service(store: FamilyStore) -> FamilyFlowService:  # pylint: disable=redefined-outer-name
    """Service over the minimal household with zero latency and no faults."""
    return FamilyFlowService(store, TransportSettings.instant())


@pytest.fixture
def store_spy(store: FamilyStore) -> MagicMock:  # pylint: disable=redefined-outer-name
    """Spy that records every store call while delegating to the real store."""
    return MagicMock(wraps=store)


@pytest.fixture
def spied_service(store_spy: MagicMock) -> FamilyFlowService:  # pylint: disable=redefined-outer-name
    """Service whose store access is recorded by store_spy."""
    return FamilyFlowService(store_spy, TransportSettings.instant())


@pytest.fixture
def parent_ctx(scenario: SetupResult) -> RequestContext:  # pylint: disable=redefined-outer-name
    """Context for the parent."""
    return RequestContext.for_user(scenario.users[PARENT_ID])


@pytest.fixture
def child_ctx(scenario: SetupResult) -> RequestContext:  # pylint: disable=redefined-outer-name
    """Context for the first child (Zoë)."""
    return RequestContext.for_user(scenario.users[CHILD_ID])


@pytest.fixture
def other_child_ctx(scenario: SetupResult) -> RequestContext:  # pylint: disable=redefined-outer-name
    """Context for the second child (Max)."""
    return RequestContext.for_user(scenario.users[OTHER_CHILD_ID])


@pytest.fixture
def anon_ctx() -> RequestContext:
    """Context without a caller."""
    return RequestContext.anonymous()
