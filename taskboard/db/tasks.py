"""Task store."""

from ..models import TaskPriority, TaskStatus
from .client import Database

# Columns a partial update may touch
UPDATABLE_COLUMNS = (
    "title",
    "description",
    "status",
    "priority",
    "due_date",
    "assigned_to",
)

TASK_SELECT = """
    SELECT
        t.*,
        a.username AS assignee_username,
        a.email AS assignee_email,
        c.username AS creator_username,
        c.email AS creator_email
    FROM tasks t
    JOIN users a ON a.id = t.assigned_to
    JOIN users c ON c.id = t.created_by
"""


def _task_row(row) -> dict:
    """Flatten a joined row into a task dict with expanded user references."""
    task = dict(row)
    task["assigned_to"] = {
        "id": task["assigned_to"],
        "username": task.pop("assignee_username"),
        "email": task.pop("assignee_email"),
    }
    task["created_by"] = {
        "id": task["created_by"],
        "username": task.pop("creator_username"),
        "email": task.pop("creator_email"),
    }
    return task


def _build_filter(
    owner_id: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    assigned_to: str | None = None,
) -> tuple[str, list]:
    """WHERE clause for the given filters. owner_id restricts to owned-or-assigned."""
    clauses = []
    params: list = []

    if owner_id is not None:
        clauses.append("(t.assigned_to = ? OR t.created_by = ?)")
        params.extend([owner_id, owner_id])
    if status:
        clauses.append("t.status = ?")
        params.append(status)
    if priority:
        clauses.append("t.priority = ?")
        params.append(priority)
    if assigned_to:
        clauses.append("t.assigned_to = ?")
        params.append(assigned_to)

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


def create_task(
    db: Database,
    task_id: str,
    fields: dict,
    assigned_to: str,
    created_by: str,
    created_at: str,
) -> dict:
    """Create a new task."""
    with db.connect() as conn:
        conn.execute(
            """
            INSERT INTO tasks (
                id, title, description, status, priority, due_date,
                assigned_to, created_by, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                task_id,
                fields["title"],
                fields["description"],
                fields["status"],
                fields["priority"],
                fields.get("due_date"),
                assigned_to,
                created_by,
                created_at,
                created_at,
            ),
        )
    return get_task_by_id(db, task_id)


def get_all_tasks(
    db: Database,
    *,
    owner_id: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    assigned_to: str | None = None,
    limit: int,
    offset: int,
) -> tuple[list[dict], int]:
    """Get one page of tasks, newest first, plus the total match count."""
    where, params = _build_filter(owner_id, status, priority, assigned_to)

    with db.connect() as conn:
        total = conn.execute(
            f"SELECT COUNT(*) FROM tasks t {where}", params
        ).fetchone()[0]
        rows = conn.execute(
            f"""
            {TASK_SELECT}
            {where}
            ORDER BY t.created_at DESC, t.id DESC
            LIMIT ? OFFSET ?
            """,
            [*params, limit, offset],
        ).fetchall()
    return [_task_row(row) for row in rows], total


def get_task_by_id(db: Database, task_id: str) -> dict | None:
    """Get a task by ID."""
    with db.connect() as conn:
        row = conn.execute(f"{TASK_SELECT} WHERE t.id = ?", (task_id,)).fetchone()
        return _task_row(row) if row else None


def update_task(
    db: Database, task_id: str, changes: dict, updated_at: str
) -> dict | None:
    """Write the supplied columns only. Unknown keys are ignored."""
    with db.connect() as conn:
        updates = []
        params: list = []

        for column in UPDATABLE_COLUMNS:
            if column in changes:
                updates.append(f"{column} = ?")
                params.append(changes[column])

        updates.append("updated_at = ?")
        params.append(updated_at)
        params.append(task_id)

        conn.execute(
            f"UPDATE tasks SET {', '.join(updates)} WHERE id = ?",
            params,
        )
    return get_task_by_id(db, task_id)


def delete_task(db: Database, task_id: str) -> bool:
    """Delete a task by ID."""
    with db.connect() as conn:
        cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        return cursor.rowcount > 0


def get_task_stats(db: Database, owner_id: str | None = None) -> dict:
    """Status and priority counts in a single aggregate query."""
    where, params = _build_filter(owner_id)
    counted = {
        "pending": ("status", TaskStatus.PENDING),
        "in_progress": ("status", TaskStatus.IN_PROGRESS),
        "completed": ("status", TaskStatus.COMPLETED),
        "high_priority": ("priority", TaskPriority.HIGH),
        "medium_priority": ("priority", TaskPriority.MEDIUM),
        "low_priority": ("priority", TaskPriority.LOW),
    }
    columns = ", ".join(
        f"COALESCE(SUM(t.{column} = ?), 0) AS {name}"
        for name, (column, _) in counted.items()
    )
    values = [value.value for _, value in counted.values()]

    with db.connect() as conn:
        row = conn.execute(
            f"SELECT COUNT(*) AS total, {columns} FROM tasks t {where}",
            [*values, *params],
        ).fetchone()
    return dict(row)
