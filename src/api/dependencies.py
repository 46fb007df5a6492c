"""FastAPI dependencies for authentication and services."""

from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.config import Settings, get_settings
from src.database import get_db
from src.models.user import User
from src.services.auth import AuthService
from src.services.livestream import LiveKitClient, LivestreamService, get_livekit_client
from src.services.mailer import Mailer, get_mailer
from src.services.marketplace_service import MarketplaceService
from src.services.password_reset import PasswordResetService
from src.services.post_service import PostService
from src.services.tokens import (
    TokenExpiredError,
    TokenMalformedError,
    decode_access_token,
    decode_refresh_token,
)
from src.services.user_store import UserStore

security = HTTPBearer(auto_error=False)


def _credentials_error(status_code: int, detail: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _resolve_token_user(
    credentials: HTTPAuthorizationCredentials | None,
    db: Session,
    decode,
    settings: Settings,
    failure_status: int,
) -> tuple[User, dict[str, Any]]:
    """Shared gate: bearer token -> verified claims -> existing user.

    A missing token is always 401. Verification failures and unknown users
    use ``failure_status``.
    """
    if credentials is None or not credentials.credentials:
        raise _credentials_error(status.HTTP_401_UNAUTHORIZED, "No token provided")

    try:
        claims = decode(credentials.credentials, settings)
    except TokenExpiredError:
        raise _credentials_error(failure_status, "Token expired") from None
    except TokenMalformedError:
        raise _credentials_error(failure_status, "Invalid token") from None

    user_id = claims.get("id")
    user = UserStore(db).get_by_id(user_id) if isinstance(user_id, int) else None
    if user is None:
        raise _credentials_error(failure_status, "User not found")

    return user, claims


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """Get the current authenticated user from an access token."""
    user, _ = _resolve_token_user(
        credentials, db, decode_access_token, settings, status.HTTP_401_UNAUTHORIZED
    )
    return user


def get_refresh_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    """Get verified refresh token claims. Failures other than a missing token are 403."""
    _, claims = _resolve_token_user(
        credentials, db, decode_refresh_token, settings, status.HTTP_403_FORBIDDEN
    )
    return claims


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    """Get the user store bound to the request session."""
    return UserStore(db)


def get_auth_service(
    store: Annotated[UserStore, Depends(get_user_store)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    """Get account service with dependencies."""
    return AuthService(store, mailer, settings)


def get_password_reset_service(
    store: Annotated[UserStore, Depends(get_user_store)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> PasswordResetService:
    """Get password reset service with dependencies."""
    return PasswordResetService(store, mailer, settings)


def get_marketplace_service(db: Annotated[Session, Depends(get_db)]) -> MarketplaceService:
    """Get marketplace service with dependencies."""
    return MarketplaceService(db)


def get_post_service(db: Annotated[Session, Depends(get_db)]) -> PostService:
    """Get feed service with dependencies."""
    return PostService(db)


def get_livestream_service(
    db: Annotated[Session, Depends(get_db)],
    livekit: Annotated[LiveKitClient, Depends(get_livekit_client)],
) -> LivestreamService:
    """Get livestream service with dependencies."""
    return LivestreamService(db, livekit)
