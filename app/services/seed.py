"""Initial RBAC data: CRUD permission matrix, base roles and a root user."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError
from app.models import Permission, Role, User
from app.services.assignments import replace_role_permissions
from app.services.users import create_user, get_or_create_permission, get_or_create_role

logger = logging.getLogger(__name__)

RESOURCES = ("user", "permission", "role")
ABILITIES = ("create", "read", "update", "delete")
ROLES = ("superuser", "admin")

ROOT_NAME = "root"
ROOT_EMAIL = "root@local"
ROOT_USERNAME = "root"


def seed_rbac(db: Session, root_password: str) -> User:
    """
    Create permissions ABILITY_RESOURCE (e.g. CREATE_USER), roles SUPERUSER and
    ADMIN, and a root user holding all of them. Existing rows are reused, so the
    seed can be re-run.
    """
    try:
        permissions: list[Permission] = [
            get_or_create_permission(db, f"{ability}_{resource}", f"{ability} {resource}")
            for resource in RESOURCES
            for ability in ABILITIES
        ]
        roles: list[Role] = [get_or_create_role(db, role, role) for role in ROLES]
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e

    permission_ids = [p.id for p in permissions]
    for role in roles:
        replace_role_permissions(db, role.id, permission_ids)

    try:
        root = db.query(User).filter(User.username == ROOT_USERNAME).first()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    if root is None:
        root = create_user(
            db,
            name=ROOT_NAME,
            email=ROOT_EMAIL,
            username=ROOT_USERNAME,
            password=root_password,
            permission_codes=[p.code for p in permissions],
            role_codes=[r.code for r in roles],
        )
    logger.info(
        "Seeded RBAC data: permissions=%s, roles=%s", len(permissions), len(roles)
    )
    return root
