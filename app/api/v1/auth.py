"""Login/logout routes and auth dependencies (get_current_identity, require_permission)."""

from collections.abc import Callable
from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.core.errors import StorageError, Unauthorized, ValidationError
from app.schemas.auth import (
    AuthenticatedResponse,
    Identity,
    LoginRequest,
    LoginResponse,
    UserResponse,
    UsersListResponse,
)
from app.services import auth as auth_service
from app.services.auth_cache import AuthCache
from app.services.authenticator import Authenticator
from app.services.identity import list_identities

router = APIRouter()
# Raw header value; parsing (scheme, token) is the Authenticator's job.
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def get_auth_cache(request: Request) -> AuthCache:
    """Dependency: the application's authentication cache."""
    return request.app.state.auth_cache


def get_authenticator(request: Request) -> Authenticator:
    """Dependency: the application's Authenticator."""
    return request.app.state.authenticator


def get_current_identity(
    authorization: Annotated[str | None, Depends(authorization_header)],
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
    db: Annotated[Session, Depends(get_db)],
) -> Identity:
    """Dependency: require a valid Bearer token and return the identity bundle. Raises 401."""
    try:
        return authenticator.authenticate(db, authorization)
    except Unauthorized as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def require_permission(code: str) -> Callable[..., Identity]:
    """Dependency factory: require the given permission code. Raises 403 otherwise."""

    def dependency(
        identity: Annotated[Identity, Depends(get_current_identity)],
    ) -> Identity:
        if not identity.has_permission(code):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission {code} required",
            )
        return identity

    return dependency


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> LoginResponse:
    """
    Authenticate by email or username and password; returns a bearer token.
    Include the token in the Authorization header as: Bearer <token>
    """
    expires_in = (
        timedelta(minutes=settings.TOKEN_EXPIRE_MINUTES)
        if settings.TOKEN_EXPIRE_MINUTES is not None
        else None
    )
    try:
        token, identity = auth_service.login(
            db, body.email_or_username, body.password, expires_in=expires_in
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": e.errors},
        ) from e
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": e.message},
        ) from e
    return LoginResponse(token=token, user=UserResponse.from_identity(identity))


@router.get("/user", response_model=AuthenticatedResponse)
def authenticated_user(
    identity: Annotated[Identity, Depends(get_current_identity)],
) -> AuthenticatedResponse:
    """Return the authenticated user with their permissions and roles."""
    return AuthenticatedResponse(user=UserResponse.from_identity(identity))


@router.delete("/logout")
def logout(
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
    cache: Annotated[AuthCache, Depends(get_auth_cache)],
) -> dict[str, int]:
    """Revoke every token of the authenticated user (all sessions)."""
    try:
        deleted = auth_service.logout(db, identity, cache)
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": e.message},
        ) from e
    return {"tokens_revoked": deleted}


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _reader: Annotated[Identity, Depends(require_permission("READ_USER"))],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List active users with their permissions and roles (requires READ_USER)."""
    try:
        identities = list_identities(db)
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": e.message},
        ) from e
    return UsersListResponse(users=[UserResponse.from_identity(i) for i in identities])
