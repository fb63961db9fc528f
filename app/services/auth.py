"""Login and logout: credential check, token issuance and revocation."""

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session

from app.core.errors import ValidationError
from app.core.security import make_password_hash, needs_rehash, verify_password
from app.core.token_codec import encode_token_id
from app.schemas.auth import Identity
from app.services.auth_cache import AuthCache
from app.services.identity import find_by_email_or_username, identity_for_user
from app.services.token_store import delete_tokens, generate_token

logger = logging.getLogger(__name__)


def login(
    db: Session,
    email_or_username: str,
    password: str,
    expires_in: timedelta | None = None,
) -> tuple[str, Identity]:
    """
    Verify credentials and issue a new bearer token.

    Returns (encoded token, identity bundle). Raises ValidationError with
    per-field messages when a field is empty, the account does not exist, or
    the password is wrong; no token row is written in that case. Storage
    failures while issuing the token propagate as StorageError.
    """
    errors: dict[str, list[str]] = {}
    login_name = email_or_username.strip().lower()
    user = None

    if not login_name:
        errors["email_or_username"] = ["field email or username is required"]
    else:
        user = find_by_email_or_username(db, login_name)
        if user is None:
            errors["email_or_username"] = ["email or username doesn't exist"]

    if not password:
        errors["password"] = ["password field is required"]
    elif user is not None and not verify_password(user.password, str(user.id), password):
        errors["password"] = ["wrong password"]

    if errors:
        logger.info("Login rejected: fields=%s", sorted(errors))
        raise ValidationError(errors)

    if needs_rehash(user.password):
        # Saved by the token commit below.
        user.password = str(make_password_hash(str(user.id), password))
        logger.info("Password record upgraded: user_id=%s", user.id)

    expired_at = datetime.now(UTC) + expires_in if expires_in is not None else None
    token = generate_token(db, user, expired_at=expired_at)
    identity = identity_for_user(db, user)
    logger.info("Login succeeded: user_id=%s", user.id)
    return encode_token_id(token.id), identity


def logout(db: Session, identity: Identity, cache: AuthCache | None = None) -> int:
    """
    Revoke every token of the identity's user and drop their cached entries.

    Returns the number of token rows deleted. Other processes' caches keep
    serving the identity until their entries expire.
    """
    deleted = delete_tokens(db, identity.user.id)
    if cache is not None:
        cache.evict_user(identity.user.id)
    logger.info("Logout: user_id=%s, tokens_deleted=%s", identity.user.id, deleted)
    return deleted
