# File: const.py
"""Constants for the FamilyFlow allowance core.

This file centralizes storage keys, entity field names, roles, error codes,
error messages, and configuration defaults for consistency across the store,
the engines, and the service facade.
"""

import logging

# ------------------------------------------------------------------------------------------------
# General
# ------------------------------------------------------------------------------------------------
# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Storage Buckets
# ------------------------------------------------------------------------------------------------
DATA_USERS = "users"
DATA_CHORES = "chores"
DATA_BONUS_TASKS = "bonus_tasks"
DATA_RESERVATIONS = "reservations"

# ------------------------------------------------------------------------------------------------
# Users
# ------------------------------------------------------------------------------------------------
DATA_USER_ID = "id"
DATA_USER_USERNAME = "username"
DATA_USER_DISPLAY_NAME = "display_name"
DATA_USER_ROLE = "role"
DATA_USER_MONTHLY_ALLOWANCE = "monthly_allowance"

ROLE_PARENT = "parent"
ROLE_CHILD = "child"
ROLES = (ROLE_PARENT, ROLE_CHILD)

# ------------------------------------------------------------------------------------------------
# Chores
# ------------------------------------------------------------------------------------------------
DATA_CHORE_ID = "id"
DATA_CHORE_CHILD_ID = "child_id"
DATA_CHORE_TITLE = "title"
DATA_CHORE_DESCRIPTION = "description"
DATA_CHORE_IS_COMPLETED = "is_completed"
DATA_CHORE_COMPLETED_AT = "completed_at"
DATA_CHORE_MONTH = "month"
DATA_CHORE_YEAR = "year"

# Fields a parent may change through update_chore
CHORE_UPDATABLE_FIELDS = (
    DATA_CHORE_TITLE,
    DATA_CHORE_DESCRIPTION,
    DATA_CHORE_IS_COMPLETED,
)

# ------------------------------------------------------------------------------------------------
# Bonus Tasks
# ------------------------------------------------------------------------------------------------
DATA_BONUS_TASK_ID = "id"
DATA_BONUS_TASK_CREATED_BY = "created_by"
DATA_BONUS_TASK_TITLE = "title"
DATA_BONUS_TASK_DESCRIPTION = "description"
DATA_BONUS_TASK_REWARD_AMOUNT = "reward_amount"
DATA_BONUS_TASK_IS_AVAILABLE = "is_available"

BONUS_TASK_UPDATABLE_FIELDS = (
    DATA_BONUS_TASK_TITLE,
    DATA_BONUS_TASK_DESCRIPTION,
    DATA_BONUS_TASK_REWARD_AMOUNT,
    DATA_BONUS_TASK_IS_AVAILABLE,
)

# ------------------------------------------------------------------------------------------------
# Task Reservations
# ------------------------------------------------------------------------------------------------
DATA_RESERVATION_ID = "id"
DATA_RESERVATION_TASK_ID = "task_id"
DATA_RESERVATION_CHILD_ID = "child_id"
DATA_RESERVATION_IS_COMPLETED = "is_completed"
DATA_RESERVATION_COMPLETED_AT = "completed_at"
DATA_RESERVATION_RESERVED_AT = "reserved_at"
DATA_RESERVATION_APPROVED_BY = "approved_by"
DATA_RESERVATION_APPROVED_AT = "approved_at"

# Reservation ids are "<task_id>:<child_id>"
RESERVATION_ID_SEPARATOR = ":"

# ------------------------------------------------------------------------------------------------
# Allowance Summaries (derived, never stored)
# ------------------------------------------------------------------------------------------------
DATA_SUMMARY_CHILD_ID = "child_id"
DATA_SUMMARY_MONTH = "month"
DATA_SUMMARY_YEAR = "year"
DATA_SUMMARY_BASE_ALLOWANCE = "base_allowance"
DATA_SUMMARY_BONUS_TOTAL = "bonus_total"
DATA_SUMMARY_TOTAL = "total"

# Calendar bounds
MONTH_MIN = 1
MONTH_MAX = 12
YEAR_MIN = 1970
YEAR_MAX = 9999

# ------------------------------------------------------------------------------------------------
# Bonus Task / Reservation States (computed, never stored)
# ------------------------------------------------------------------------------------------------
TASK_STATE_AVAILABLE = "available"
TASK_STATE_RESERVED = "reserved"
TASK_STATE_DELETED = "deleted"

RESERVATION_STATE_OPEN = "open"
RESERVATION_STATE_COMPLETED = "completed"

# ------------------------------------------------------------------------------------------------
# Service Call Fields
# ------------------------------------------------------------------------------------------------
FIELD_CHILD_ID = "child_id"
FIELD_TITLE = "title"
FIELD_DESCRIPTION = "description"
FIELD_MONTH = "month"
FIELD_YEAR = "year"
FIELD_IS_COMPLETED = "is_completed"
FIELD_REWARD_AMOUNT = "reward_amount"
FIELD_IS_AVAILABLE = "is_available"

# ------------------------------------------------------------------------------------------------
# Error Codes
# ------------------------------------------------------------------------------------------------
ERROR_CODE_UNAUTHENTICATED = "UNAUTHENTICATED"
ERROR_CODE_FORBIDDEN = "FORBIDDEN"
ERROR_CODE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_CONFLICT = "CONFLICT"
ERROR_CODE_BAD_REQUEST = "BAD_REQUEST"
ERROR_CODE_INVALID_ARGUMENT = "INVALID_ARGUMENT"
ERROR_CODE_INTERNAL = "INTERNAL"

# ------------------------------------------------------------------------------------------------
# Error Messages
# ------------------------------------------------------------------------------------------------
ERROR_MSG_UNAUTHENTICATED = "You must be logged in"

ERROR_MSG_CHILD_ONLY_CHORES = "Only the child can view their chores"
ERROR_MSG_CHILD_ONLY_BONUS_TASKS = "Only children can view bonus tasks"
ERROR_MSG_CHILD_ONLY_RESERVATIONS = "Only the child can view their reservations"
ERROR_MSG_CHILD_ONLY_RESERVE = "Only children can reserve tasks"
ERROR_MSG_CHILD_ONLY_COMPLETE_CHORE = "Only children can complete chores"
ERROR_MSG_CHILD_ONLY_COMPLETE_RESERVATION = "Only children can complete reserved tasks"
ERROR_MSG_CHILD_ONLY_ALLOWANCE = "Only the child can view their allowance"
ERROR_MSG_NOT_OWNER_CHORE = "Chore belongs to another child"
ERROR_MSG_NOT_OWNER_RESERVATION = "Reservation belongs to another child"

ERROR_MSG_PARENT_ONLY_FAMILY = "Only parents can view family"
ERROR_MSG_PARENT_ONLY_SUMMARIES = "Only parents can view summaries"
ERROR_MSG_PARENT_ONLY_CREATE_CHORE = "Only parents can create chores"
ERROR_MSG_PARENT_ONLY_UPDATE_CHORE = "Only parents can update chores"
ERROR_MSG_PARENT_ONLY_DELETE_CHORE = "Only parents can delete chores"
ERROR_MSG_PARENT_ONLY_CREATE_BONUS_TASK = "Only parents can create bonus tasks"
ERROR_MSG_PARENT_ONLY_UPDATE_BONUS_TASK = "Only parents can update bonus tasks"
ERROR_MSG_PARENT_ONLY_DELETE_BONUS_TASK = "Only parents can delete bonus tasks"
ERROR_MSG_PARENT_ONLY_APPROVE_RESERVATION = "Only parents can approve reserved tasks"

ERROR_MSG_CHORE_NOT_FOUND = "Chore not found"
ERROR_MSG_BONUS_TASK_NOT_FOUND = "Bonus task not found"
ERROR_MSG_RESERVATION_NOT_FOUND = "Reservation not found"
ERROR_MSG_CHILD_NOT_FOUND = "Child not found"

ERROR_MSG_TASK_UNAVAILABLE = "Task is no longer available or already reserved"
ERROR_MSG_AVAILABILITY_CONFLICT = "Availability must match the task's reservation state"
ERROR_MSG_RESERVATION_NOT_COMPLETED = "Reservation has not been completed yet"

ERROR_MSG_INVALID_REQUEST = "Request failed validation"
ERROR_MSG_INVALID_CHILD_FOR_CHORE = "Invalid child for chore"
ERROR_MSG_INVALID_PARENT_FOR_BONUS_TASK = "Invalid parent for bonus task"
ERROR_MSG_INVALID_PARENT_FOR_APPROVAL = "Invalid parent for approval"
ERROR_MSG_REWARD_NOT_POSITIVE = "Reward amount must be positive"
ERROR_MSG_TITLE_REQUIRED = "Title is required"
ERROR_MSG_TRANSIENT_FAILURE = "Temporary server issue, try again"

# ------------------------------------------------------------------------------------------------
# Configuration (simulated transport)
# ------------------------------------------------------------------------------------------------
CONF_MIN_DELAY_MS = "min_delay_ms"
CONF_MAX_DELAY_MS = "max_delay_ms"
CONF_FAILURE_RATE = "failure_rate"

DEFAULT_MIN_DELAY_MS = 150
DEFAULT_MAX_DELAY_MS = 450
DEFAULT_FAILURE_RATE = 0.05
