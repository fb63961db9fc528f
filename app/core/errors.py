"""Error types shared by the auth core, services and routes."""


class Unauthorized(Exception):
    """Missing, malformed, unknown or expired credential. Rendered as HTTP 401."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class StorageError(Exception):
    """A storage-layer failure (connection, constraint, query)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TokenDecodeError(ValueError):
    """Bearer token text could not be decoded into a token identifier."""


class ValidationError(Exception):
    """Field-level validation failure; errors maps field name to messages."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        super().__init__("; ".join(f"{k}: {', '.join(v)}" for k, v in errors.items()))


class NotFound(Exception):
    """Requested entity does not exist (or is soft-deleted)."""
