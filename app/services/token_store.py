"""Persisted bearer tokens: issue, look up with owning user, revoke, purge expired."""

import logging
import secrets
import uuid
from datetime import UTC, datetime

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError
from app.core.token_codec import TOKEN_ID_BYTES
from app.models import Token, User

logger = logging.getLogger(__name__)


def new_token_id() -> uuid.UUID:
    """128 bits from the OS CSPRNG; never sequential or time-derived."""
    return uuid.UUID(bytes=secrets.token_bytes(TOKEN_ID_BYTES))


def as_utc(value: datetime) -> datetime:
    """SQLite returns naive datetimes; stored values are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def generate_token(db: Session, user: User, expired_at: datetime | None = None) -> Token:
    """Create and persist a new token owned by user. Raises StorageError on failure."""
    token = Token(id=new_token_id(), user_id=user.id, expired_at=expired_at)
    try:
        db.add(token)
        db.commit()
        db.refresh(token)
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    return token


def find_token(
    db: Session,
    token_id: uuid.UUID,
    now: datetime | None = None,
) -> tuple[Token, User] | None:
    """
    Return (token, owning user) for a live token, or None.

    Tokens past their expired_at and tokens of soft-deleted users are treated as absent.
    """
    now = now or datetime.now(UTC)
    try:
        row = (
            db.query(Token, User)
            .join(User, Token.user_id == User.id)
            .filter(
                Token.id == token_id,
                User.deleted_at.is_(None),
                or_(Token.expired_at.is_(None), Token.expired_at > now),
            )
            .first()
        )
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    if row is None:
        return None
    token, user = row
    return token, user


def delete_tokens(db: Session, user_id: uuid.UUID) -> int:
    """Revoke every token of the user (all sessions, there is no per-device tracking)."""
    try:
        deleted = (
            db.query(Token)
            .filter(Token.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    return deleted


def purge_expired_tokens(db: Session, now: datetime | None = None) -> int:
    """Delete token rows whose expiry has passed. Idempotent."""
    now = now or datetime.now(UTC)
    try:
        deleted = (
            db.query(Token)
            .filter(Token.expired_at.is_not(None), Token.expired_at <= now)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(str(e)) from e
    if deleted > 0:
        logger.info("Purged expired tokens: cutoff=%s, tokens_deleted=%s", now.isoformat(), deleted)
    return deleted
