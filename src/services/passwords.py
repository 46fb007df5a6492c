"""Password hashing. The async helpers run bcrypt in the threadpool."""

import re
from functools import lru_cache

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from src.config import get_settings


@lru_cache
def get_pwd_context(rounds: int | None = None) -> CryptContext:
    """Password hashing context with the configured bcrypt cost factor."""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds or get_settings().bcrypt_rounds,
    )


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return get_pwd_context().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return get_pwd_context().verify(plain_password, hashed_password)


async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(get_password_hash, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


PASSWORD_RULES = [
    (r"[a-z]", "Password must contain at least one lowercase letter"),
    (r"[A-Z]", "Password must contain at least one uppercase letter"),
    (r"[0-9]", "Password must contain at least one number"),
    (r"[^a-zA-Z0-9]", "Password must contain at least one special character"),
]


def password_policy_errors(password: str, min_length: int = 8, max_length: int = 100) -> list[str]:
    """Return every policy rule the password breaks, in a stable order."""
    errors = []
    if len(password) < min_length:
        errors.append(f"Password must be at least {min_length} characters")
    if len(password) > max_length:
        errors.append(f"Password must not exceed {max_length} characters")
    errors.extend(message for pattern, message in PASSWORD_RULES if not re.search(pattern, password))
    return errors
