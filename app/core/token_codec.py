"""Bearer token text <-> raw token identifier bytes (URL-safe base64, no padding)."""

import base64
import binascii
import re
import uuid

from app.core.errors import TokenDecodeError

TOKEN_ID_BYTES = 16

_ALPHABET_RE = re.compile(r"[A-Za-z0-9_-]+")


def encode_token(raw: bytes) -> str:
    """Encode raw identifier bytes as header-safe text."""
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def decode_token(token: str) -> bytes:
    """
    Decode bearer token text back to the raw 16-byte identifier.

    Raises TokenDecodeError on empty input, characters outside the URL-safe
    alphabet, non-canonical encodings, or a decoded length other than 16 bytes.
    """
    if not token:
        raise TokenDecodeError("empty token")
    if not _ALPHABET_RE.fullmatch(token):
        raise TokenDecodeError("invalid token character")
    try:
        raw = base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))
    except (binascii.Error, ValueError) as e:
        raise TokenDecodeError("invalid token encoding") from e
    if len(raw) != TOKEN_ID_BYTES:
        raise TokenDecodeError("invalid token length")
    # Trailing bits must be zero so each identifier has exactly one text form.
    if encode_token(raw) != token:
        raise TokenDecodeError("invalid token encoding")
    return raw


def encode_token_id(token_id: uuid.UUID) -> str:
    return encode_token(token_id.bytes)


def decode_token_id(token: str) -> uuid.UUID:
    return uuid.UUID(bytes=decode_token(token))
