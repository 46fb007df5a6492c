"""Random one-time tokens for email verification and password reset."""

import hashlib
import hmac
import secrets
from datetime import UTC, datetime, timedelta

TOKEN_BYTES = 32


def generate_token(nbytes: int = TOKEN_BYTES) -> str:
    """Return ``nbytes`` of cryptographic randomness as lowercase hex."""
    return secrets.token_hex(nbytes)


def generate_expiring_token(lifetime_seconds: int, nbytes: int = TOKEN_BYTES) -> tuple[str, datetime]:
    """Return a fresh token and the moment it stops being valid."""
    return generate_token(nbytes), datetime.now(UTC) + timedelta(seconds=lifetime_seconds)


def hash_token(raw_token: str, key: str) -> str:
    """Keyed SHA-256 digest of a token, used for at-rest storage of reset tokens."""
    return hmac.new(key.encode(), raw_token.encode(), hashlib.sha256).hexdigest()
