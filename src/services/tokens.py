"""Signed access/refresh token codec."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from src.config import Settings


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenMalformedError(TokenError):
    """Token is unparseable, tampered with, or signed with another secret."""


class TokenExpiredError(TokenError):
    """Token signature is valid but its expiry has passed."""


def encode_token(
    claims: dict[str, Any],
    secret: str,
    expires_delta: timedelta,
    algorithm: str = "HS256",
) -> str:
    """Sign claims into a token string.

    Each token gets a unique ``jti`` so two tokens minted from the same claims
    in the same second still differ.
    """
    now = datetime.now(UTC)
    to_encode = {
        **claims,
        "iat": now,
        "exp": now + expires_delta,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    """Verify a token and return its claims.

    Raises:
        TokenExpiredError: the token has expired
        TokenMalformedError: anything else wrong with the token
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except JWTError as e:
        raise TokenMalformedError("Invalid token") from e


def session_claims(user_id: int, email: str, user_type: str) -> dict[str, Any]:
    """Claims embedded in both access and refresh tokens."""
    return {"id": user_id, "email": email, "userType": user_type}


def strip_registered_claims(claims: dict[str, Any]) -> dict[str, Any]:
    """Keep only the session claims of a decoded token."""
    return {key: claims[key] for key in ("id", "email", "userType") if key in claims}


def create_access_token(claims: dict[str, Any], settings: Settings) -> str:
    """Sign a short-lived access token with the access secret."""
    return encode_token(
        claims,
        settings.jwt_secret,
        timedelta(minutes=settings.access_token_expire_minutes),
        settings.jwt_algorithm,
    )


def create_refresh_token(claims: dict[str, Any], settings: Settings) -> str:
    """Sign a long-lived refresh token with the refresh secret."""
    return encode_token(
        claims,
        settings.refresh_secret,
        timedelta(days=settings.refresh_token_expire_days),
        settings.jwt_algorithm,
    )


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify an access token."""
    return decode_token(token, settings.jwt_secret, settings.jwt_algorithm)


def decode_refresh_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify a refresh token."""
    return decode_token(token, settings.refresh_secret, settings.jwt_algorithm)
