"""In-process authentication cache: token id -> (absolute expiry, identity bundle)."""

import threading
import time
import uuid
from collections.abc import Callable

from app.schemas.auth import Identity


class AuthCache:
    """
    Process-local map from token id to (expires_at, Identity), guarded by one lock.

    The lock is held for a single map operation only, never across storage I/O.
    get() does no time filtering; callers sweep() first. Entries are a latency
    optimization: dropping any of them never changes an authorization outcome.
    There is no cross-process coherence, so a logout on another instance is only
    noticed here once the entry's own expiry passes.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[uuid.UUID, tuple[float, Identity]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, token_id: uuid.UUID) -> tuple[float, Identity] | None:
        """Return (expires_at, identity) if present, expired or not."""
        with self._lock:
            return self._entries.get(token_id)

    def set(self, token_id: uuid.UUID, expires_at: float, identity: Identity) -> Identity:
        """Store (overwrite) the entry and return the identity."""
        with self._lock:
            self._entries[token_id] = (expires_at, identity)
        return identity

    def remove(self, token_id: uuid.UUID) -> None:
        with self._lock:
            self._entries.pop(token_id, None)

    def sweep(self) -> int:
        """Remove every entry whose expiry has passed; return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (expires_at, _) in self._entries.items() if now > expires_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def evict_user(self, user_id: uuid.UUID) -> int:
        """Remove every entry belonging to user_id (logout revokes all of a user's tokens)."""
        with self._lock:
            keys = [k for k, (_, ident) in self._entries.items() if ident.user.id == user_id]
            for key in keys:
                del self._entries[key]
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
