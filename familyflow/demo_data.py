"""Demo household used to seed a fresh store.

One parent, two children, a month of chores each, ten bonus tasks and four
reservations in mixed states. All dates fall inside the current calendar
month so the demo summaries are non-trivial.
"""

from __future__ import annotations

from datetime import datetime

from . import const
from .data_builders import build_user
from .engines.bonus_task_engine import BonusTaskEngine
from .type_defs import BonusTaskData, ChoreData, ReservationData, StoreData
from .utils.dt_utils import dt_now_local

DEMO_PARENT_ID = "parent-alex"
DEMO_CHILD_SAM_ID = "child-sam"
DEMO_CHILD_RILEY_ID = "child-riley"

# (child, title, description, completed on day-of-month or None)
_DEMO_CHORES: tuple[tuple[str, str, str, int | None], ...] = (
    (DEMO_CHILD_SAM_ID, "Make bed", "Tidy up and make the bed each morning", None),
    (DEMO_CHILD_SAM_ID, "Feed the cat", "Morning and evening feeding", 2),
    (DEMO_CHILD_SAM_ID, "Set the table", "Set the table for dinner each evening", None),
    (DEMO_CHILD_SAM_ID, "Put away toys", "Clean up toys and games after playing", 5),
    (DEMO_CHILD_SAM_ID, "Water the plants", "Water the indoor plants twice a week", None),
    (
        DEMO_CHILD_RILEY_ID,
        "Take out trash",
        "Take out the trash and recycling on Tuesdays and Fridays",
        None,
    ),
    (
        DEMO_CHILD_RILEY_ID,
        "Walk the dog",
        "Take the dog for a 15-minute walk after school",
        3,
    ),
    (
        DEMO_CHILD_RILEY_ID,
        "Empty dishwasher",
        "Empty the dishwasher and put dishes away",
        None,
    ),
    (
        DEMO_CHILD_RILEY_ID,
        "Clean bathroom",
        "Clean the bathroom sink and mirror weekly",
        1,
    ),
    (DEMO_CHILD_RILEY_ID, "Fold laundry", "Fold and put away clean clothes", None),
)

# (task id, title, description, reward)
_DEMO_BONUS_TASKS: tuple[tuple[str, str, str, float], ...] = (
    ("bonus-wash-car", "Wash the car", "Exterior wash and dry", 5.0),
    (
        "bonus-bookshelf",
        "Organize bookshelf",
        "Sort books by category and alphabetically",
        3.0,
    ),
    (
        "bonus-vacuum",
        "Vacuum living room",
        "Vacuum the entire living room including under furniture",
        2.0,
    ),
    ("bonus-windows", "Clean windows", "Clean all windows inside and out", 8.0),
    ("bonus-weeding", "Garden weeding", "Pull weeds from the front garden bed", 4.0),
    (
        "bonus-kitchen",
        "Deep clean kitchen",
        "Clean all appliances, counters, and cabinets",
        6.0,
    ),
    ("bonus-garage", "Organize garage", "Sort tools and organize storage boxes", 7.0),
    ("bonus-paint", "Paint bedroom wall", "Touch up paint on bedroom wall", 10.0),
    (
        "bonus-groceries",
        "Help with grocery shopping",
        "Help carry groceries and put them away",
        2.0,
    ),
    ("bonus-car-interior", "Clean out car", "Remove trash and vacuum car interior", 3.0),
)

# (task id, child, reserved day, completed day or None, approved day or None)
_DEMO_RESERVATIONS: tuple[tuple[str, str, int, int | None, int | None], ...] = (
    ("bonus-wash-car", DEMO_CHILD_SAM_ID, 3, 4, 5),
    ("bonus-bookshelf", DEMO_CHILD_RILEY_ID, 5, 6, 7),
    ("bonus-vacuum", DEMO_CHILD_SAM_ID, 7, 8, None),
    ("bonus-windows", DEMO_CHILD_RILEY_ID, 9, None, None),
)


def build_demo_family(now: datetime | None = None) -> StoreData:
    """Build the demo household relative to the month of `now`.

    Args:
        now: Reference datetime (defaults to the current local time)

    Returns:
        Seed structure for FamilyStore.
    """
    ref = now or dt_now_local()
    month, year = ref.month, ref.year

    def stamp(day: int | None) -> str | None:
        if day is None:
            return None
        return datetime(year, month, day, 12, tzinfo=ref.tzinfo).isoformat()

    users = [
        build_user(
            {
                const.DATA_USER_ID: DEMO_PARENT_ID,
                const.DATA_USER_USERNAME: "parent.alex",
                const.DATA_USER_DISPLAY_NAME: "Alex (Parent)",
                const.DATA_USER_ROLE: const.ROLE_PARENT,
                const.DATA_USER_MONTHLY_ALLOWANCE: 0,
            }
        ),
        build_user(
            {
                const.DATA_USER_ID: DEMO_CHILD_SAM_ID,
                const.DATA_USER_USERNAME: "child.sam",
                const.DATA_USER_DISPLAY_NAME: "Sam",
                const.DATA_USER_ROLE: const.ROLE_CHILD,
                const.DATA_USER_MONTHLY_ALLOWANCE: 20,
            }
        ),
        build_user(
            {
                const.DATA_USER_ID: DEMO_CHILD_RILEY_ID,
                const.DATA_USER_USERNAME: "child.riley",
                const.DATA_USER_DISPLAY_NAME: "Riley",
                const.DATA_USER_ROLE: const.ROLE_CHILD,
                const.DATA_USER_MONTHLY_ALLOWANCE: 25,
            }
        ),
    ]

    chores: dict[str, ChoreData] = {}
    for index, (child_id, title, description, done_day) in enumerate(
        _DEMO_CHORES, start=1
    ):
        chore_id = f"chore-{index}"
        chores[chore_id] = ChoreData(
            id=chore_id,
            child_id=child_id,
            title=title,
            description=description,
            is_completed=done_day is not None,
            completed_at=stamp(done_day),
            month=month,
            year=year,
        )

    reserved_task_ids = {task_id for task_id, *_ in _DEMO_RESERVATIONS}
    bonus_tasks: dict[str, BonusTaskData] = {
        task_id: BonusTaskData(
            id=task_id,
            created_by=DEMO_PARENT_ID,
            title=title,
            description=description,
            reward_amount=reward,
            is_available=task_id not in reserved_task_ids,
        )
        for task_id, title, description, reward in _DEMO_BONUS_TASKS
    }

    reservations: dict[str, ReservationData] = {}
    for task_id, child_id, reserved_day, done_day, approved_day in _DEMO_RESERVATIONS:
        reservation = ReservationData(
            id=BonusTaskEngine.reservation_id_for(task_id, child_id),
            task_id=task_id,
            child_id=child_id,
            is_completed=done_day is not None,
            completed_at=stamp(done_day),
            reserved_at=stamp(reserved_day) or "",
        )
        if approved_day is not None:
            reservation[const.DATA_RESERVATION_APPROVED_BY] = DEMO_PARENT_ID
            reservation[const.DATA_RESERVATION_APPROVED_AT] = stamp(approved_day)
        reservations[reservation[const.DATA_RESERVATION_ID]] = reservation

    return {
        const.DATA_USERS: {user[const.DATA_USER_ID]: user for user in users},
        const.DATA_CHORES: chores,
        const.DATA_BONUS_TASKS: bonus_tasks,
        const.DATA_RESERVATIONS: reservations,
    }
