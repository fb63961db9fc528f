"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthenticatedResponse,
    Identity,
    LoginRequest,
    LoginResponse,
    PermissionRead,
    RoleRead,
    UserRead,
    UserResponse,
    UsersListResponse,
)
from app.schemas.health import HealthResponse

__all__ = [
    "AuthenticatedResponse",
    "HealthResponse",
    "Identity",
    "LoginRequest",
    "LoginResponse",
    "PermissionRead",
    "RoleRead",
    "UserRead",
    "UserResponse",
    "UsersListResponse",
]
