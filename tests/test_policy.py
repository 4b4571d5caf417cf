"""Ownership rules, independent of HTTP."""

import pytest

from taskboard.policy import TaskAccess, task_access, visible_owner_id

ADMIN = {"id": "A", "role": "admin"}
CREATOR = {"id": "C", "role": "user"}
ASSIGNEE = {"id": "S", "role": "user"}
OUTSIDER = {"id": "O", "role": "user"}

TASK = {
    "created_by": {"id": "C", "username": "c", "email": "c@example.com"},
    "assigned_to": {"id": "S", "username": "s", "email": "s@example.com"},
}


@pytest.mark.parametrize(
    ("caller", "expected"),
    [
        (ADMIN, TaskAccess(visible=True, writable=True, deletable=True)),
        (CREATOR, TaskAccess(visible=True, writable=True, deletable=True)),
        (ASSIGNEE, TaskAccess(visible=True, writable=True, deletable=False)),
        (OUTSIDER, TaskAccess(visible=False, writable=False, deletable=False)),
    ],
)
def test_task_access(caller, expected):
    assert task_access(caller, TASK) == expected


def test_plain_id_references():
    task = {"created_by": "C", "assigned_to": "S"}
    assert task_access(ASSIGNEE, task).writable
    assert not task_access(ASSIGNEE, task).deletable


def test_self_assigned_creator():
    task = {"created_by": "C", "assigned_to": "C"}
    assert task_access(CREATOR, task).deletable
    assert not task_access(ASSIGNEE, task).visible


def test_visible_owner_id():
    assert visible_owner_id(ADMIN) is None
    assert visible_owner_id(OUTSIDER) == "O"
