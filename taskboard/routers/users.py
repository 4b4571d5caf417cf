"""User administration router. Every route requires the admin role."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Path, status

from ..db import Database, get_all_users, get_user_by_id, update_user, utc_now
from ..deps import get_db, get_page_params, require_admin
from ..models import (
    ID_PATTERN,
    ApiResponse,
    PageParams,
    Pagination,
    RoleUpdate,
    UserListData,
    UserResponse,
    UserRole,
)

router = APIRouter(prefix="/users", tags=["users"])

log = structlog.get_logger()

UserId = Annotated[str, Path(pattern=ID_PATTERN)]


def _load_other_user(db: Database, user_id: str, admin: dict, self_message: str) -> dict:
    """Fetch the target account, refusing to let an admin act on themselves."""
    if user_id == admin["id"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=self_message,
        )
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


@router.get("", response_model=ApiResponse[UserListData])
def list_users(
    role: UserRole | None = None,
    page: PageParams = Depends(get_page_params),
    admin: dict = Depends(require_admin),
    db: Database = Depends(get_db),
):
    """List users, newest first, optionally filtered by role."""
    users, total = get_all_users(
        db,
        role=role.value if role else None,
        limit=page.limit,
        offset=page.offset,
    )
    return ApiResponse(
        data=UserListData(
            users=[UserResponse.model_validate(user) for user in users],
            pagination=Pagination.build(page.page, page.limit, total),
        )
    )


@router.patch("/{user_id}/toggle-status", response_model=ApiResponse[UserResponse])
def toggle_user_status(
    user_id: UserId,
    admin: dict = Depends(require_admin),
    db: Database = Depends(get_db),
):
    """Flip a user's active flag."""
    user = _load_other_user(
        db, user_id, admin, "You cannot deactivate your own account"
    )
    updated = update_user(
        db, user_id, is_active=not user["is_active"], updated_at=utc_now()
    )
    state = "activated" if updated["is_active"] else "deactivated"
    log.info("user_status_changed", user_id=user_id, state=state, by=admin["id"])
    return ApiResponse(
        message=f"User {state} successfully",
        data=UserResponse.model_validate(updated),
    )


@router.patch("/{user_id}/role", response_model=ApiResponse[UserResponse])
def change_user_role(
    user_id: UserId,
    role_data: RoleUpdate,
    admin: dict = Depends(require_admin),
    db: Database = Depends(get_db),
):
    """Set a user's role."""
    _load_other_user(db, user_id, admin, "You cannot change your own role")
    updated = update_user(
        db, user_id, role=role_data.role.value, updated_at=utc_now()
    )
    log.info(
        "user_role_changed", user_id=user_id, role=role_data.role.value, by=admin["id"]
    )
    return ApiResponse(
        message="User role updated successfully",
        data=UserResponse.model_validate(updated),
    )
