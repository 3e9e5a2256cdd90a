"""Setup helpers for FamilyFlow test configuration.

This module provides declarative test setup that builds a seeded store from
a scenario dictionary, so tests can focus on behavior rather than on record
construction boilerplate.

Example:
    result = setup_scenario({
        "period": {"month": 3, "year": 2025},
        "users": [{"id": "child-1", "role": "child", "monthly_allowance": 20}],
        "chores": [{"key": "bed", "child": "child-1", "title": "Make bed"}],
    })
    # Access: result.store, result.chore_ids["bed"], result.users["child-1"]

YAML-based setup:
    result = setup_from_yaml("scenario_minimal.yaml")
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from familyflow import const
from familyflow.data_builders import build_bonus_task, build_chore, build_reservation
from familyflow.store import FamilyStore
from familyflow.type_defs import UserData

SCENARIO_DIR = Path(__file__).resolve().parent.parent / "scenarios"

# =============================================================================
# DATACLASSES
# =============================================================================


@dataclass
class SetupResult:
    """Result from setup_scenario containing the seeded store.

    Attributes:
        store: The FamilyStore seeded from the scenario
        month: Scenario period month
        year: Scenario period year
        users: Map of user ids to their seeded records
        chore_ids: Map of chore keys to their generated ids
        task_ids: Map of bonus task keys to their generated ids
        reservation_ids: Map of "<task key>:<child id>" to reservation ids
    """

    store: FamilyStore
    month: int
    year: int
    users: dict[str, UserData] = field(default_factory=dict)
    chore_ids: dict[str, str] = field(default_factory=dict)
    task_ids: dict[str, str] = field(default_factory=dict)
    reservation_ids: dict[str, str] = field(default_factory=dict)


# =============================================================================
# SETUP
# =============================================================================


def setup_scenario(scenario: dict[str, Any]) -> SetupResult:
    """Build a seeded store from a scenario dictionary.

    Scenario keys:
        period: {month, year} used for chores that omit them
        users: full user records (id, username, display_name, role, monthly_allowance)
        chores: {key, child, title, description?, completed_at?, month?, year?}
        bonus_tasks: {key, created_by, title, description?, reward_amount}
        reservations: {task, child, reserved_at, completed_at?}
    """
    period = scenario.get("period", {})
    month = int(period.get("month", 1))
    year = int(period.get("year", 2025))

    seed = FamilyStore.get_default_structure()
    users: dict[str, UserData] = {}
    for raw in scenario.get("users", []):
        user = UserData(
            id=raw["id"],
            username=raw.get("username", raw["id"]),
            display_name=raw.get("display_name", raw["id"]),
            role=raw["role"],
            monthly_allowance=float(raw.get("monthly_allowance", 0)),
        )
        users[user[const.DATA_USER_ID]] = user
    seed[const.DATA_USERS] = users

    chore_ids: dict[str, str] = {}
    for raw in scenario.get("chores", []) or []:
        chore = build_chore(
            {
                const.DATA_CHORE_CHILD_ID: raw["child"],
                const.DATA_CHORE_TITLE: raw["title"],
                const.DATA_CHORE_DESCRIPTION: raw.get("description"),
                const.DATA_CHORE_MONTH: raw.get("month", month),
                const.DATA_CHORE_YEAR: raw.get("year", year),
            }
        )
        if raw.get("completed_at"):
            chore[const.DATA_CHORE_IS_COMPLETED] = True
            chore[const.DATA_CHORE_COMPLETED_AT] = raw["completed_at"]
        seed[const.DATA_CHORES][chore[const.DATA_CHORE_ID]] = chore
        chore_ids[raw["key"]] = chore[const.DATA_CHORE_ID]

    task_ids: dict[str, str] = {}
    for raw in scenario.get("bonus_tasks", []) or []:
        task = build_bonus_task(
            {
                const.DATA_BONUS_TASK_CREATED_BY: raw["created_by"],
                const.DATA_BONUS_TASK_TITLE: raw["title"],
                const.DATA_BONUS_TASK_DESCRIPTION: raw.get("description"),
                const.DATA_BONUS_TASK_REWARD_AMOUNT: raw["reward_amount"],
            }
        )
        seed[const.DATA_BONUS_TASKS][task[const.DATA_BONUS_TASK_ID]] = task
        task_ids[raw["key"]] = task[const.DATA_BONUS_TASK_ID]

    reservation_ids: dict[str, str] = {}
    for raw in scenario.get("reservations", []) or []:
        task_id = task_ids[raw["task"]]
        reservation = build_reservation(task_id, raw["child"])
        reservation[const.DATA_RESERVATION_RESERVED_AT] = raw["reserved_at"]
        if raw.get("completed_at"):
            reservation[const.DATA_RESERVATION_IS_COMPLETED] = True
            reservation[const.DATA_RESERVATION_COMPLETED_AT] = raw["completed_at"]
        seed[const.DATA_BONUS_TASKS][task_id][const.DATA_BONUS_TASK_IS_AVAILABLE] = (
            False
        )
        seed[const.DATA_RESERVATIONS][reservation[const.DATA_RESERVATION_ID]] = (
            reservation
        )
        reservation_ids[f"{raw['task']}:{raw['child']}"] = reservation[
            const.DATA_RESERVATION_ID
        ]

    return SetupResult(
        store=FamilyStore(seed),
        month=month,
        year=year,
        users=users,
        chore_ids=chore_ids,
        task_ids=task_ids,
        reservation_ids=reservation_ids,
    )


def setup_from_yaml(yaml_path: str | Path) -> SetupResult:
    """Set up a FamilyFlow scenario from a YAML file.

    Args:
        yaml_path: File name inside tests/scenarios/, or any absolute path

    Example:
        result = setup_from_yaml("scenario_bonus_history.yaml")
        wash_id = result.task_ids["wash"]
    """
    path = Path(yaml_path)
    if not path.is_absolute():
        path = SCENARIO_DIR / path
    with path.open(encoding="utf-8") as handle:
        scenario = yaml.safe_load(handle)
    return setup_scenario(scenario)
