"""Shared builders for tests: in-memory SQLite sessions, users, identities."""

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import build_engine
from app.models import Base, User
from app.schemas.auth import Identity, PermissionRead, RoleRead, UserRead
from app.services.users import create_user, get_or_create_permission, get_or_create_role

DEFAULT_PASSWORD = "correct-horse-battery"


def make_session_factory() -> sessionmaker:
    """Fresh in-memory SQLite database with all tables; one shared connection."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def add_user(
    db: Session,
    username: str = "alice",
    password: str = DEFAULT_PASSWORD,
    permissions: Iterable[str] = (),
    roles: Iterable[str] = (),
    deleted: bool = False,
) -> User:
    """Create a user, creating any named permission/role codes on the way."""
    permissions = list(permissions)
    roles = list(roles)
    for code in permissions:
        get_or_create_permission(db, code, code.replace("_", " "))
    for code in roles:
        get_or_create_role(db, code, code)
    db.commit()
    user = create_user(
        db,
        name=username.title(),
        email=f"{username}@example.com",
        username=username,
        password=password,
        permission_codes=permissions,
        role_codes=roles,
    )
    if deleted:
        user.deleted_at = datetime.now(UTC)
        db.commit()
    return user


def make_identity(
    user_id: uuid.UUID | None = None,
    permissions: Iterable[str] = (),
    roles: Iterable[str] = (),
) -> Identity:
    """Identity bundle built without a database."""
    user_id = user_id or uuid.uuid4()
    return Identity(
        user=UserRead(
            id=user_id,
            name="Test User",
            email=f"{user_id.hex[:8]}@example.com",
            username=user_id.hex[:8],
        ),
        permissions=frozenset(
            PermissionRead(id=uuid.uuid4(), code=c, name=c.lower()) for c in permissions
        ),
        roles=frozenset(RoleRead(id=uuid.uuid4(), code=c, name=c.lower()) for c in roles),
    )


class FakeClock:
    """Manually advanced clock returning unix seconds."""

    def __init__(self, start: float) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
