"""Password hashing: salted, versioned hash records verified in constant time."""

import base64
import hashlib
from dataclasses import dataclass

import bcrypt

from app.core.config import settings

# Current scheme tag. Records with any other tag fail verification and report needs_rehash.
SCHEME = "bcrypt-sha256"
SCHEME_SEPARATOR = "$"

# Min/max lengths for username and password validation (input validation).
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


@dataclass(frozen=True)
class HashRecord:
    """Stored password hash: scheme tag plus scheme-specific digest text."""

    scheme: str
    digest: str

    def __str__(self) -> str:
        return f"{self.scheme}{SCHEME_SEPARATOR}{self.digest}"

    @classmethod
    def parse(cls, text: str) -> "HashRecord":
        """Split '<scheme>$<digest>'. Raises ValueError if either part is missing."""
        scheme, sep, digest = text.partition(SCHEME_SEPARATOR)
        if not sep or not scheme or not digest:
            raise ValueError("Malformed password hash record")
        return cls(scheme=scheme, digest=digest)


def _prehash(salt: str, plaintext: str) -> bytes:
    """
    SHA-256 of salt + plaintext, base64-encoded.

    The user id salt ties the record to one user; the fixed 44-byte output keeps
    long passwords intact under bcrypt's 72-byte input limit.
    """
    material = (salt + plaintext).encode("utf-8")
    return base64.b64encode(hashlib.sha256(material).digest())


def make_password_hash(salt: str, plaintext: str, rounds: int | None = None) -> HashRecord:
    """Hash a plain-text password for the user identified by salt (the user's id)."""
    rounds = rounds or settings.BCRYPT_ROUNDS
    digest = bcrypt.hashpw(_prehash(salt, plaintext), bcrypt.gensalt(rounds=rounds))
    return HashRecord(scheme=SCHEME, digest=digest.decode("ascii"))


def verify_password(record: HashRecord | str, salt: str, plaintext: str) -> bool:
    """Verify a plain password against a stored record. Malformed records never verify."""
    try:
        if isinstance(record, str):
            record = HashRecord.parse(record)
        if record.scheme != SCHEME:
            return False
        return bcrypt.checkpw(_prehash(salt, plaintext), record.digest.encode("ascii"))
    except (ValueError, TypeError, UnicodeError):
        return False


def needs_rehash(record: HashRecord | str, rounds: int | None = None) -> bool:
    """True if the record uses an outdated scheme or bcrypt cost."""
    rounds = rounds or settings.BCRYPT_ROUNDS
    try:
        if isinstance(record, str):
            record = HashRecord.parse(record)
        # bcrypt digest layout: $2b$<cost>$<salt+hash>
        cost = int(record.digest.split("$")[2])
    except (ValueError, IndexError):
        return True
    return record.scheme != SCHEME or cost != rounds
