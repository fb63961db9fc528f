"""Resolve an Authorization header value into an Identity, via the cache or storage."""

import logging
import time
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from app.core.errors import StorageError, TokenDecodeError, Unauthorized
from app.core.token_codec import decode_token_id
from app.schemas.auth import Identity
from app.services.auth_cache import AuthCache
from app.services.identity import identity_for_user
from app.services.token_store import as_utc, find_token

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_SECONDS = 300

TOKEN_NOT_FOUND = "token not found"
INVALID_TOKEN = "invalid token"
INVALID_TOKEN_TYPE = "invalid token type"


def parse_authorization(header: str) -> uuid.UUID:
    """
    Parse 'Bearer <token>' into a token id.

    Exactly two space-separated parts; the scheme is matched case-insensitively.
    Raises Unauthorized on any failure.
    """
    parts = header.split(" ")
    if len(parts) != 2:
        raise Unauthorized(INVALID_TOKEN)
    scheme, token = parts
    if scheme.lower() != "bearer":
        raise Unauthorized(INVALID_TOKEN_TYPE)
    try:
        return decode_token_id(token)
    except TokenDecodeError as e:
        raise Unauthorized(str(e)) from e


class Authenticator:
    """
    Request-facing authentication: header -> token id -> cached or stored identity.

    Every failure surfaces as Unauthorized with a short message; nothing is retried.
    Storage failures are reported to the caller as Unauthorized too, so an
    unauthenticated client cannot tell an outage from a bad token. They are
    logged here so operators can.
    """

    def __init__(
        self,
        cache: AuthCache,
        ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def authenticate(self, db: Session, header: str | None) -> Identity:
        if header is None:
            raise Unauthorized(TOKEN_NOT_FOUND)
        token_id = parse_authorization(header)

        self.cache.sweep()
        cached = self.cache.get(token_id)
        now = self._clock()
        if cached is not None and now <= cached[0]:
            return cached[1]

        try:
            found = find_token(db, token_id, now=datetime.fromtimestamp(now, UTC))
        except StorageError as e:
            logger.error("Token lookup failed: %s", e)
            raise Unauthorized(str(e)) from e
        if found is None:
            raise Unauthorized(TOKEN_NOT_FOUND)
        token, user = found

        try:
            identity = identity_for_user(db, user)
        except StorageError as e:
            logger.error("Identity resolution failed for user_id=%s: %s", user.id, e)
            raise Unauthorized(str(e)) from e

        expires_at = now + self.ttl_seconds
        if token.expired_at is not None:
            # A cached identity must never outlive its token.
            expires_at = min(expires_at, as_utc(token.expired_at).timestamp())
        return self.cache.set(token_id, expires_at, identity)
