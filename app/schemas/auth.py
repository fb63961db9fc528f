"""Request/response schemas for auth endpoints and the resolved identity bundle."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PermissionRead(BaseModel):
    """Permission snapshot (code, name)."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: uuid.UUID
    code: str
    name: str


class RoleRead(BaseModel):
    """Role snapshot (code, name)."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: uuid.UUID
    code: str
    name: str


class UserRead(BaseModel):
    """User snapshot without the password hash."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: uuid.UUID
    name: str
    email: str
    username: str
    profile_photo_id: str | None = None
    email_verified_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Identity(BaseModel):
    """
    Identity bundle produced by successful authentication: the user plus the
    permissions and roles assigned to them.

    Frozen and detached from any DB session, so one instance can be cached and
    shared between concurrent requests.
    """

    model_config = ConfigDict(frozen=True)

    user: UserRead
    permissions: frozenset[PermissionRead] = frozenset()
    roles: frozenset[RoleRead] = frozenset()

    @property
    def permission_codes(self) -> frozenset[str]:
        return frozenset(p.code for p in self.permissions)

    @property
    def role_codes(self) -> frozenset[str]:
        return frozenset(r.code for r in self.roles)

    def has_permission(self, code: str) -> bool:
        return code in self.permission_codes


class UserResponse(UserRead):
    """User with permissions and roles, sorted by code for stable output."""

    permissions: list[PermissionRead] = Field(default_factory=list)
    roles: list[RoleRead] = Field(default_factory=list)

    @classmethod
    def from_identity(cls, identity: Identity) -> "UserResponse":
        return cls(
            **identity.user.model_dump(),
            permissions=sorted(identity.permissions, key=lambda p: p.code),
            roles=sorted(identity.roles, key=lambda r: r.code),
        )


class LoginRequest(BaseModel):
    """Credentials for login. Empty fields are reported as field errors by the service."""

    email_or_username: str = Field(..., max_length=255, description="Email or username")
    password: str = Field(..., max_length=128, description="Password")


class LoginResponse(BaseModel):
    """Bearer token returned after successful login, plus the resolved user."""

    token: str = Field(..., description="Bearer token for the Authorization header")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserResponse


class AuthenticatedResponse(BaseModel):
    """Response for GET /auth/user."""

    user: UserResponse


class UsersListResponse(BaseModel):
    """Response for GET /auth/users."""

    users: list[UserResponse]
