"""SQLite connection handling and schema."""

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

import structlog

from ..models import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    TaskPriority,
    TaskStatus,
    UserRole,
)

log = structlog.get_logger()


def _sql_in(enum_cls) -> str:
    return ", ".join(f"'{member.value}'" for member in enum_cls)


SCHEMA = [
    f"""
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        username TEXT NOT NULL UNIQUE
            CHECK (length(username) BETWEEN {USERNAME_MIN_LENGTH} AND {USERNAME_MAX_LENGTH}),
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT '{UserRole.USER.value}'
            CHECK (role IN ({_sql_in(UserRole)})),
        is_active INTEGER NOT NULL DEFAULT 1 CHECK (is_active IN (0, 1)),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS tasks (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL
            CHECK (length(title) BETWEEN 1 AND {TITLE_MAX_LENGTH}),
        description TEXT NOT NULL
            CHECK (length(description) BETWEEN 1 AND {DESCRIPTION_MAX_LENGTH}),
        status TEXT NOT NULL DEFAULT '{TaskStatus.PENDING.value}'
            CHECK (status IN ({_sql_in(TaskStatus)})),
        priority TEXT NOT NULL DEFAULT '{TaskPriority.MEDIUM.value}'
            CHECK (priority IN ({_sql_in(TaskPriority)})),
        due_date TEXT,
        assigned_to TEXT NOT NULL REFERENCES users(id),
        created_by TEXT NOT NULL REFERENCES users(id),
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_users_role ON users(role)",
    "CREATE INDEX IF NOT EXISTS idx_users_created_at ON users(created_at)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_assigned_to ON tasks(assigned_to)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_by ON tasks(created_by)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_priority ON tasks(priority)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at)",
]


def utc_now() -> str:
    """Current UTC time in the fixed-width ISO format used for all timestamps."""
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class Database:
    """Handle on one SQLite file. Each operation opens its own connection."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def get_connection(self) -> sqlite3.Connection:
        """Get a database connection with WAL mode and foreign keys enabled."""
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        """Context manager for database connections."""
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create tables and indexes if missing."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.connect() as conn:
            for statement in SCHEMA:
                conn.execute(statement)
        log.info("database_ready", path=str(self.path))
