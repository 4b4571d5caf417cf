"""Database package."""

from .client import Database, utc_now
from .tasks import (
    create_task,
    delete_task,
    get_all_tasks,
    get_task_by_id,
    get_task_stats,
    update_task,
)
from .users import (
    create_user,
    find_user_by_username_or_email,
    get_all_users,
    get_user_by_email,
    get_user_by_id,
    update_user,
    user_exists,
)

__all__ = [
    "Database",
    "utc_now",
    "create_task",
    "get_all_tasks",
    "get_task_by_id",
    "get_task_stats",
    "update_task",
    "delete_task",
    "create_user",
    "get_user_by_id",
    "get_user_by_email",
    "find_user_by_username_or_email",
    "get_all_users",
    "update_user",
    "user_exists",
]
