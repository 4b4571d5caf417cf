"""API routers."""

from . import auth, tasks, users

__all__ = ["auth", "tasks", "users"]
