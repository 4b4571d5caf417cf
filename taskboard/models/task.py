"""Pydantic models for task API.

The length bounds and enum values here are also used to build the CHECK
constraints of the tasks table.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, StringConstraints, ValidationInfo, field_validator

from .common import CamelModel, EntityId, Pagination
from .user import UserRef

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


class TaskStatus(str, Enum):
    """Task status enumeration. Any transition is allowed."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    """Task priority enumeration."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


Title = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH),
]
Description = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True, min_length=1, max_length=DESCRIPTION_MAX_LENGTH
    ),
]


def future_due_date(value: datetime | None) -> datetime | None:
    """Normalize to UTC and reject anything not strictly in the future."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    try:
        value = value.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError("Due date must be a valid date") from None
    if value <= datetime.now(timezone.utc):
        raise ValueError("Due date must be in the future")
    return value


DueDate = Annotated[datetime | None, AfterValidator(future_due_date)]


class TaskCreate(CamelModel):
    """Request model for creating a task."""

    title: Title
    description: Description
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: DueDate = None
    assigned_to: EntityId | None = None


class TaskUpdate(CamelModel):
    """Request model for a partial task update.

    Only fields present in the payload are written. `dueDate: null` clears
    the due date; null is rejected for every other field.
    """

    title: Title | None = None
    description: Description | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: DueDate = None
    assigned_to: EntityId | None = None

    @field_validator("title", "description", "status", "priority", "assigned_to")
    @classmethod
    def _not_null(cls, v, info: ValidationInfo):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    def changes(self) -> dict:
        """Fields explicitly supplied by the client, keyed by column name."""
        return self.model_dump(exclude_unset=True, mode="json")


class TaskResponse(CamelModel):
    """Response model for a task."""

    id: str
    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None
    assigned_to: UserRef
    created_by: UserRef
    created_at: datetime
    updated_at: datetime


class TaskListData(CamelModel):
    """Response model for task list."""

    tasks: list[TaskResponse]
    pagination: Pagination


class TaskStats(CamelModel):
    """Counts over the caller's visible tasks."""

    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    high_priority: int = 0
    medium_priority: int = 0
    low_priority: int = 0
