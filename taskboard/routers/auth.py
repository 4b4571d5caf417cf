"""Authentication router: registration, login and token refresh."""

import sqlite3

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from ulid import ULID

from ..config import Settings
from ..db import Database, create_user, find_user_by_username_or_email, get_user_by_email, utc_now
from ..deps import get_current_user, get_db, get_settings
from ..models import (
    ApiResponse,
    AuthData,
    LoginRequest,
    MeData,
    RegisterRequest,
    TokenData,
    UserResponse,
    UserRole,
)
from ..security import create_access_token, hash_password, verify_password

router = APIRouter(prefix="/auth", tags=["auth"])

log = structlog.get_logger()

DUPLICATE_USER_MESSAGE = "User with this email or username already exists"


@router.post(
    "/register",
    response_model=ApiResponse[AuthData],
    status_code=status.HTTP_201_CREATED,
)
def register(
    data: RegisterRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create an account with the `user` role and return a token for it."""
    if find_user_by_username_or_email(db, data.username, data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=DUPLICATE_USER_MESSAGE,
        )

    try:
        user = create_user(
            db,
            str(ULID()),
            data.username,
            data.email,
            hash_password(data.password),
            UserRole.USER.value,
            utc_now(),
        )
    except sqlite3.IntegrityError:
        # Lost a race with a concurrent registration
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=DUPLICATE_USER_MESSAGE,
        )

    log.info("user_registered", user_id=user["id"], username=user["username"])
    return ApiResponse(
        message="User registered successfully",
        data=AuthData(
            user=UserResponse.model_validate(user),
            token=create_access_token(user, settings),
        ),
    )


@router.post("/login", response_model=ApiResponse[AuthData])
def login(
    data: LoginRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Exchange email and password for a token."""
    user = get_user_by_email(db, data.email)
    if not user or not verify_password(data.password, user["password_hash"]):
        log.info("login_failed", email=data.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    if not user["is_active"]:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is deactivated.",
        )

    log.info("user_logged_in", user_id=user["id"])
    return ApiResponse(
        message="Login successful",
        data=AuthData(
            user=UserResponse.model_validate(user),
            token=create_access_token(user, settings),
        ),
    )


@router.get("/me", response_model=ApiResponse[MeData])
def me(current_user: dict = Depends(get_current_user)):
    """Return the caller's own account."""
    return ApiResponse(data=MeData(user=UserResponse.model_validate(current_user)))


@router.post("/refresh", response_model=ApiResponse[TokenData])
def refresh(
    current_user: dict = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    """Issue a new token for a still-valid caller."""
    return ApiResponse(
        message="Token refreshed successfully",
        data=TokenData(token=create_access_token(current_user, settings)),
    )
