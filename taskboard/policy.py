"""Ownership rules for tasks.

A non-admin caller sees and edits a task only when they created it or it is
assigned to them. Only the creator (or an admin) may delete it.
"""

from typing import Mapping, NamedTuple

from .models import UserRole


class TaskAccess(NamedTuple):
    visible: bool
    writable: bool
    deletable: bool


def _ref_id(ref) -> str:
    # Stored tasks carry expanded {id, username, email} references
    return ref["id"] if isinstance(ref, Mapping) else ref


def is_admin(caller: Mapping) -> bool:
    return caller["role"] == UserRole.ADMIN.value


def task_access(caller: Mapping, task: Mapping) -> TaskAccess:
    """Permissions of `caller` on `task`."""
    if is_admin(caller):
        return TaskAccess(visible=True, writable=True, deletable=True)

    is_creator = _ref_id(task["created_by"]) == caller["id"]
    is_assignee = _ref_id(task["assigned_to"]) == caller["id"]
    involved = is_creator or is_assignee
    return TaskAccess(visible=involved, writable=involved, deletable=is_creator)


def visible_owner_id(caller: Mapping) -> str | None:
    """Owner restriction for list/stats queries; None means every task."""
    return None if is_admin(caller) else caller["id"]
