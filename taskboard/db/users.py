"""User (credential) store."""

from .client import Database


def _user_row(row) -> dict:
    user = dict(row)
    user["is_active"] = bool(user["is_active"])
    return user


def create_user(
    db: Database,
    user_id: str,
    username: str,
    email: str,
    password_hash: str,
    role: str,
    created_at: str,
) -> dict:
    """Insert a user. Raises sqlite3.IntegrityError on duplicate username/email."""
    with db.connect() as conn:
        conn.execute(
            """
            INSERT INTO users
                (id, username, email, password_hash, role, is_active, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, 1, ?, ?)
            """,
            (user_id, username, email, password_hash, role, created_at, created_at),
        )
    return get_user_by_id(db, user_id)


def get_user_by_id(db: Database, user_id: str) -> dict | None:
    with db.connect() as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return _user_row(row) if row else None


def get_user_by_email(db: Database, email: str) -> dict | None:
    with db.connect() as conn:
        row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
        return _user_row(row) if row else None


def find_user_by_username_or_email(
    db: Database, username: str, email: str
) -> dict | None:
    with db.connect() as conn:
        row = conn.execute(
            "SELECT * FROM users WHERE username = ? OR email = ? LIMIT 1",
            (username, email),
        ).fetchone()
        return _user_row(row) if row else None


def user_exists(db: Database, user_id: str) -> bool:
    with db.connect() as conn:
        row = conn.execute("SELECT 1 FROM users WHERE id = ?", (user_id,)).fetchone()
        return row is not None


def get_all_users(
    db: Database, *, role: str | None = None, limit: int, offset: int
) -> tuple[list[dict], int]:
    """Get one page of users, newest first, plus the total match count."""
    where = ""
    params: list = []
    if role:
        where = "WHERE role = ?"
        params.append(role)

    with db.connect() as conn:
        total = conn.execute(f"SELECT COUNT(*) FROM users {where}", params).fetchone()[0]
        rows = conn.execute(
            f"""
            SELECT * FROM users {where}
            ORDER BY created_at DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            [*params, limit, offset],
        ).fetchall()
    return [_user_row(row) for row in rows], total


def update_user(
    db: Database,
    user_id: str,
    *,
    role: str | None = None,
    is_active: bool | None = None,
    updated_at: str,
) -> dict | None:
    """Update a user's role and/or active flag."""
    with db.connect() as conn:
        updates = []
        params: list = []

        if role is not None:
            updates.append("role = ?")
            params.append(role)
        if is_active is not None:
            updates.append("is_active = ?")
            params.append(int(is_active))

        updates.append("updated_at = ?")
        params.append(updated_at)
        params.append(user_id)

        conn.execute(
            f"UPDATE users SET {', '.join(updates)} WHERE id = ?",
            params,
        )
    return get_user_by_id(db, user_id)
