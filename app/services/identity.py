"""Resolve a user's permission and role sets into an Identity bundle."""

import uuid

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError
from app.models import Permission, PermissionUser, Role, RoleUser, User
from app.schemas.auth import Identity, PermissionRead, RoleRead, UserRead


def permissions_for(db: Session, user_id: uuid.UUID) -> frozenset[PermissionRead]:
    """Permissions assigned directly to the user; empty set when there are none."""
    try:
        rows = (
            db.query(Permission)
            .join(PermissionUser, PermissionUser.permission_id == Permission.id)
            .filter(PermissionUser.user_id == user_id)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    return frozenset(PermissionRead.model_validate(p) for p in rows)


def roles_for(db: Session, user_id: uuid.UUID) -> frozenset[RoleRead]:
    """Roles assigned to the user; empty set when there are none."""
    try:
        rows = (
            db.query(Role)
            .join(RoleUser, RoleUser.role_id == Role.id)
            .filter(RoleUser.user_id == user_id)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    return frozenset(RoleRead.model_validate(r) for r in rows)


def identity_for_user(db: Session, user: User) -> Identity:
    """Build the identity bundle for an already loaded user row."""
    return Identity(
        user=UserRead.model_validate(user),
        permissions=permissions_for(db, user.id),
        roles=roles_for(db, user.id),
    )


def find_active_user(db: Session, user_id: uuid.UUID) -> User | None:
    try:
        return (
            db.query(User)
            .filter(User.id == user_id, User.deleted_at.is_(None))
            .first()
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e


def resolve_identity(db: Session, user_id: uuid.UUID) -> Identity | None:
    """Identity bundle for an active user, or None if unknown or soft-deleted."""
    user = find_active_user(db, user_id)
    if user is None:
        return None
    return identity_for_user(db, user)


def find_by_email_or_username(db: Session, login: str) -> User | None:
    """Active user whose email or username matches login (case-insensitive)."""
    login = login.strip().lower()
    if not login:
        return None
    try:
        return (
            db.query(User)
            .filter(
                User.deleted_at.is_(None),
                or_(User.email == login, User.username == login),
            )
            .first()
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e


def list_identities(db: Session) -> list[Identity]:
    """Identity bundles of every active user, oldest first."""
    try:
        users = (
            db.query(User)
            .filter(User.deleted_at.is_(None))
            .order_by(User.created_at, User.username)
            .all()
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    return [identity_for_user(db, u) for u in users]
