"""Password hashing and session token generation."""

import secrets

import bcrypt

from warden.core.config import settings

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 1
PASSWORD_MAX_LEN = 128
EMAIL_MAX_LEN = 255

# 32 random bytes -> 43 url-safe characters
SESSION_TOKEN_BYTES = 32


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def new_session_token() -> str:
    """Return an opaque, unguessable session identifier."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)
