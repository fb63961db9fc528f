"""Token retention: delete token rows whose storage-level expiry has passed."""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from app.services.token_store import purge_expired_tokens

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


def run_retention(session: Session, settings: "Settings", now: datetime | None = None) -> int:
    """
    Delete expired tokens. Returns the number deleted.

    Expired tokens never authenticate whether or not they are purged; this only
    keeps the table small. Idempotent: safe to run repeatedly.
    """
    if not settings.TOKEN_RETENTION_ENABLED:
        logger.info("Token retention is disabled (TOKEN_RETENTION_ENABLED=false); skipping.")
        return 0

    return purge_expired_tokens(session, now=now or datetime.now(timezone.utc))
