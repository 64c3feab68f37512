"""Password hashing utilities.

Uses bcrypt for secure password hashing. bcrypt automatically handles
salting, and checkpw compares in constant time. The work factor comes
from settings (12 by default, ~100ms per hash on modern hardware).

Legacy scrypt hashes (format: hex_digest.salt) written by the previous
deployment are still verified, and auto-upgraded to bcrypt on successful
login.
"""

import functools
import hashlib
import secrets

import bcrypt

from eventdesk.config import settings

# Parameters the legacy hashes were produced with.
_SCRYPT_N = 16384
_SCRYPT_R = 8
_SCRYPT_P = 1
_SCRYPT_DKLEN = 64


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    bcrypt includes a random salt automatically and produces hashes
    starting with "$2b$". Passwords are truncated to 72 bytes (bcrypt's
    limit).
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash.

    Supports both bcrypt ($2b$...) and legacy scrypt (hex.salt) formats.
    Use needs_upgrade() to check if a hash should be re-hashed.
    """
    if _is_legacy_hash(password_hash):
        return _verify_legacy(password, password_hash)
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


def verify_dummy(password: str) -> None:
    """Burn the same bcrypt cost as a real check.

    Called when the username does not exist, so a failed login takes
    about as long whether or not the account is there.
    """
    verify_password(password, _dummy_hash())


def needs_upgrade(password_hash: str) -> bool:
    """Check if a password hash should be upgraded to bcrypt."""
    return _is_legacy_hash(password_hash)


@functools.lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password(secrets.token_urlsafe(16))


def _is_legacy_hash(password_hash: str) -> bool:
    """Detect legacy scrypt hashes (format: hex_digest.salt)."""
    return not password_hash.startswith("$2")


def _verify_legacy(password: str, password_hash: str) -> bool:
    """Verify a legacy scrypt salted hash."""
    try:
        hashed, salt = password_hash.split(".", 1)
        expected = hashlib.scrypt(
            password.encode("utf-8"),
            salt=salt.encode("utf-8"),
            n=_SCRYPT_N,
            r=_SCRYPT_R,
            p=_SCRYPT_P,
            dklen=_SCRYPT_DKLEN,
        ).hex()
        return secrets.compare_digest(hashed, expected)
    except (ValueError, AttributeError):
        return False
