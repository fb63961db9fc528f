"""User, permission and role creation used by the CLI scripts and seeding."""

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import NotFound, StorageError, ValidationError
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    make_password_hash,
)
from app.models import Permission, Role, User
from app.models.permission import normalize_code, normalize_name
from app.services.assignments import replace_user_permissions, replace_user_roles

logger = logging.getLogger(__name__)


def _validate_new_user(db: Session, name: str, email: str, username: str, password: str) -> None:
    errors: dict[str, list[str]] = {}
    if not name:
        errors["name"] = ["name field is required"]
    if not email:
        errors["email"] = ["email field is required"]
    elif "@" not in email:
        errors["email"] = ["email is invalid"]
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        errors["username"] = ["invalid username length"]
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        errors["password"] = [
            f"password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters"
        ]
    if email or username:
        try:
            existing = (
                db.query(User)
                .filter(or_(User.email == email, User.username == username))
                .all()
            )
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(str(e)) from e
        for user in existing:
            if email and user.email == email:
                errors.setdefault("email", []).append("email already exist")
            if username and user.username == username:
                errors.setdefault("username", []).append("username already exist")
    if errors:
        raise ValidationError(errors)


def _lookup_ids(db: Session, model, codes: Iterable[str]) -> list[uuid.UUID]:
    codes = [normalize_code(c) for c in codes]
    if not codes:
        return []
    try:
        rows = db.query(model).filter(model.code.in_(codes)).all()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    found = {row.code: row.id for row in rows}
    missing = [c for c in codes if c not in found]
    if missing:
        raise NotFound(f"{model.__tablename__} not found: {', '.join(missing)}")
    return [found[c] for c in codes]


def create_user(
    db: Session,
    name: str,
    email: str,
    username: str,
    password: str,
    permission_codes: Iterable[str] = (),
    role_codes: Iterable[str] = (),
) -> User:
    """
    Create a user and assign permissions and roles by code, in one transaction.

    Email and username are normalized to lowercase. The id is chosen before
    hashing because it salts the password record. If any write fails nothing
    is kept, so the same call can simply be retried.
    """
    name = name.strip()
    email = email.strip().lower()
    username = username.strip().lower()
    _validate_new_user(db, name, email, username, password)
    permission_ids = _lookup_ids(db, Permission, permission_codes)
    role_ids = _lookup_ids(db, Role, role_codes)

    user_id = uuid.uuid4()
    user = User(
        id=user_id,
        name=name,
        email=email,
        username=username,
        password=str(make_password_hash(str(user_id), password)),
    )
    try:
        db.add(user)
        db.flush()
        replace_user_permissions(db, user_id, permission_ids, commit=False)
        replace_user_roles(db, user_id, role_ids, commit=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    except StorageError:
        db.rollback()
        raise
    db.refresh(user)
    logger.info("Created user: username=%s", username)
    return user


def get_or_create_permission(db: Session, code: str, name: str) -> Permission:
    code = normalize_code(code)
    try:
        permission = db.query(Permission).filter(Permission.code == code).first()
        if permission is None:
            permission = Permission(code=code, name=normalize_name(name))
            db.add(permission)
            db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    return permission


def get_or_create_role(db: Session, code: str, name: str) -> Role:
    code = normalize_code(code)
    try:
        role = db.query(Role).filter(Role.code == code).first()
        if role is None:
            role = Role(code=code, name=normalize_name(name))
            db.add(role)
            db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    return role
