"""Models package."""

from .common import (
    DEFAULT_PAGE_SIZE,
    ID_PATTERN,
    MAX_PAGE_SIZE,
    ApiResponse,
    CamelModel,
    EntityId,
    PageParams,
    Pagination,
)
from .task import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TaskCreate,
    TaskListData,
    TaskPriority,
    TaskResponse,
    TaskStats,
    TaskStatus,
    TaskUpdate,
)
from .user import (
    USERNAME_MAX_LENGTH,
    USERNAME_MIN_LENGTH,
    AuthData,
    LoginRequest,
    MeData,
    RegisterRequest,
    RoleUpdate,
    TokenData,
    UserListData,
    UserRef,
    UserResponse,
    UserRole,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "ID_PATTERN",
    "MAX_PAGE_SIZE",
    "ApiResponse",
    "CamelModel",
    "EntityId",
    "PageParams",
    "Pagination",
    "DESCRIPTION_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "TaskStatus",
    "TaskPriority",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskListData",
    "TaskStats",
    "USERNAME_MAX_LENGTH",
    "USERNAME_MIN_LENGTH",
    "UserRole",
    "RegisterRequest",
    "LoginRequest",
    "RoleUpdate",
    "UserResponse",
    "UserRef",
    "AuthData",
    "MeData",
    "TokenData",
    "UserListData",
]
