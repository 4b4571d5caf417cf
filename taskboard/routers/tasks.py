"""Task API router."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from ulid import ULID

from ..db import (
    Database,
    create_task,
    delete_task,
    get_all_tasks,
    get_task_by_id,
    get_task_stats,
    update_task,
    user_exists,
    utc_now,
)
from ..deps import get_current_user, get_db, get_page_params
from ..models import (
    ID_PATTERN,
    ApiResponse,
    PageParams,
    Pagination,
    TaskCreate,
    TaskListData,
    TaskPriority,
    TaskResponse,
    TaskStats,
    TaskStatus,
    TaskUpdate,
)
from ..policy import task_access, visible_owner_id

router = APIRouter(prefix="/tasks", tags=["tasks"])

log = structlog.get_logger()

TaskId = Annotated[str, Path(pattern=ID_PATTERN)]


def _load_task(db: Database, task_id: str) -> dict:
    task = get_task_by_id(db, task_id)
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    return task


def _check_assignee(db: Database, user_id: str) -> None:
    if not user_exists(db, user_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Assigned user not found",
        )


# =============================================================================
# Static routes - must be defined BEFORE /{task_id} routes
# =============================================================================


@router.get("/stats/overview", response_model=ApiResponse[TaskStats])
def task_stats(
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Status and priority counts over the caller's visible tasks."""
    stats = get_task_stats(db, owner_id=visible_owner_id(current_user))
    return ApiResponse(data=TaskStats(**stats))


@router.get("", response_model=ApiResponse[TaskListData])
def list_tasks(
    status: TaskStatus | None = None,
    priority: TaskPriority | None = None,
    assigned_to: str | None = Query(None, alias="assignedTo", pattern=ID_PATTERN),
    page: PageParams = Depends(get_page_params),
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """List visible tasks, newest first, optionally filtered."""
    tasks, total = get_all_tasks(
        db,
        owner_id=visible_owner_id(current_user),
        status=status.value if status else None,
        priority=priority.value if priority else None,
        assigned_to=assigned_to,
        limit=page.limit,
        offset=page.offset,
    )
    return ApiResponse(
        data=TaskListData(
            tasks=[TaskResponse.model_validate(task) for task in tasks],
            pagination=Pagination.build(page.page, page.limit, total),
        )
    )


@router.post(
    "",
    response_model=ApiResponse[TaskResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_task_endpoint(
    task_data: TaskCreate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Create a task. The caller is always the creator."""
    assigned_to = current_user["id"]
    if task_data.assigned_to and task_data.assigned_to != current_user["id"]:
        _check_assignee(db, task_data.assigned_to)
        assigned_to = task_data.assigned_to

    task = create_task(
        db,
        str(ULID()),
        task_data.model_dump(mode="json", exclude={"assigned_to"}),
        assigned_to=assigned_to,
        created_by=current_user["id"],
        created_at=utc_now(),
    )
    log.info(
        "task_created",
        task_id=task["id"],
        created_by=current_user["id"],
        assigned_to=assigned_to,
    )
    return ApiResponse(
        message="Task created successfully",
        data=TaskResponse.model_validate(task),
    )


# =============================================================================
# Routes with task_id
# =============================================================================


@router.get("/{task_id}", response_model=ApiResponse[TaskResponse])
def get_task(
    task_id: TaskId,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Get a task by ID."""
    task = _load_task(db, task_id)
    if not task_access(current_user, task).visible:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return ApiResponse(data=TaskResponse.model_validate(task))


@router.put("/{task_id}", response_model=ApiResponse[TaskResponse])
def update_task_endpoint(
    task_id: TaskId,
    task_data: TaskUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Update the supplied fields of a task."""
    existing = _load_task(db, task_id)
    if not task_access(current_user, existing).writable:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )

    changes = task_data.changes()
    new_assignee = changes.get("assigned_to")
    if new_assignee and new_assignee != existing["assigned_to"]["id"]:
        _check_assignee(db, new_assignee)

    task = update_task(db, task_id, changes, updated_at=utc_now())
    if not task:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    log.info("task_updated", task_id=task_id, fields=sorted(changes))
    return ApiResponse(
        message="Task updated successfully",
        data=TaskResponse.model_validate(task),
    )


@router.delete("/{task_id}", response_model=ApiResponse[None])
def delete_task_endpoint(
    task_id: TaskId,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Delete a task. Only its creator or an admin may do this."""
    task = _load_task(db, task_id)
    if not task_access(current_user, task).deletable:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Only the creator or admin can delete this task.",
        )

    if not delete_task(db, task_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Task not found",
        )
    log.info("task_deleted", task_id=task_id, deleted_by=current_user["id"])
    return ApiResponse(message="Task deleted successfully")
