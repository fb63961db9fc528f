"""Replace a user's (or role's) assignment rows. Always delete-then-reinsert, never patch."""

import uuid
from collections.abc import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError
from app.models import PermissionRole, PermissionUser, RoleUser


def _unique(ids: Iterable[uuid.UUID]) -> list[uuid.UUID]:
    # dict preserves first-seen order
    return list(dict.fromkeys(ids))


def _replace(
    db: Session, model, owner_column, owner_id, target_column, target_ids, commit: bool = True
) -> int:
    """
    Delete every row of model owned by owner_id, insert one per target id.

    With commit=False the rows are only flushed, so the caller can fold them
    into a larger transaction; a failure still rolls the session back.
    """
    target_ids = _unique(target_ids)
    try:
        db.query(model).filter(owner_column == owner_id).delete(synchronize_session=False)
        for target_id in target_ids:
            db.add(model(**{owner_column.key: owner_id, target_column.key: target_id}))
        if commit:
            db.commit()
        else:
            db.flush()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    return len(target_ids)


def replace_user_permissions(
    db: Session, user_id: uuid.UUID, permission_ids: Iterable[uuid.UUID], commit: bool = True
) -> int:
    return _replace(
        db, PermissionUser, PermissionUser.user_id, user_id,
        PermissionUser.permission_id, permission_ids, commit=commit,
    )


def replace_user_roles(
    db: Session, user_id: uuid.UUID, role_ids: Iterable[uuid.UUID], commit: bool = True
) -> int:
    return _replace(
        db, RoleUser, RoleUser.user_id, user_id, RoleUser.role_id, role_ids, commit=commit
    )


def replace_role_permissions(
    db: Session, role_id: uuid.UUID, permission_ids: Iterable[uuid.UUID], commit: bool = True
) -> int:
    return _replace(
        db, PermissionRole, PermissionRole.role_id, role_id,
        PermissionRole.permission_id, permission_ids, commit=commit,
    )
