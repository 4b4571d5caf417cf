"""Dependency injection: settings, database and the authenticated caller.

Settings and Database live on app.state and are set once in create_app.
"""

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings
from .db import Database, get_user_by_id
from .models import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, PageParams
from .policy import is_admin
from .security import TokenError, TokenExpiredError, decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    return request.app.state.db


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    db: Database = Depends(get_db),
) -> dict:
    """Resolve the bearer token to a live, active user record."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Access denied. No token provided.")

    try:
        payload = decode_access_token(credentials.credentials, settings)
    except TokenExpiredError:
        raise _unauthorized("Token expired.")
    except TokenError:
        raise _unauthorized("Invalid token.")

    user = get_user_by_id(db, payload["sub"])
    if user is None:
        raise _unauthorized("Invalid token. User not found.")
    if not user["is_active"]:
        raise _unauthorized("Account is deactivated.")
    request.state.user_id = user["id"]
    return user


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    if not is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin privileges required.",
        )
    return current_user


def get_page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
) -> PageParams:
    return PageParams(page=page, limit=limit)
