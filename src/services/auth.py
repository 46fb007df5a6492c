"""Account service: registration, login, verification, and profile management."""

import logging
from typing import Any

from jose import JWTError

from src.config import Settings, get_settings
from src.models.enums import UserType
from src.models.user import User
from src.schemas.auth import PublicUser
from src.services.errors import (
    AlreadyVerifiedError,
    DuplicateEmailError,
    EmailNotVerifiedError,
    InvalidCredentialsError,
    InvalidDomainError,
    InvalidOrExpiredTokenError,
    RegistrationFailedError,
    TokenIssuanceError,
    UserNotFoundError,
)
from src.services.mailer import Mailer
from src.services.passwords import hash_password_async, verify_password_async
from src.services.secret_tokens import generate_expiring_token
from src.services.tokens import (
    create_access_token,
    create_refresh_token,
    session_claims,
    strip_registered_claims,
)
from src.services.user_store import UserStore

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "profile_picture", "bio", "city", "websites")


def to_public_user(user: User) -> PublicUser:
    """Project a user row onto the client-safe view."""
    return PublicUser(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        is_verified=user.is_verified,
        profile_picture=user.profile_picture,
        bio=user.bio,
        user_type=user.user_type,
        city=user.city,
        websites=user.websites,
        created_at=user.created_at,
    )


class AuthService:
    """Business rules for user accounts."""

    def __init__(self, store: UserStore, mailer: Mailer, settings: Settings | None = None):
        self.store = store
        self.mailer = mailer
        self.settings = settings or get_settings()

    def _is_institutional(self, email: str) -> bool:
        return email.endswith(self.settings.email_domain.lower())

    def _new_verification_token(self):
        return generate_expiring_token(self.settings.verification_token_expire_seconds)

    async def register(self, email: str, password: str, first_name: str, last_name: str) -> PublicUser:
        """Create an unverified account and email its verification link.

        If anything fails after the row is written, the row is deleted again so
        the caller never sees a half-registered account.
        """
        email = email.strip().lower()

        if self.store.get_by_email(email) is not None:
            raise DuplicateEmailError()
        if not self._is_institutional(email):
            raise InvalidDomainError(f"Only {self.settings.email_domain} email addresses are allowed")

        password_hash = await hash_password_async(password)
        token, expires_at = self._new_verification_token()

        user = self.store.create(
            User(
                email=email,
                password_hash=password_hash,
                first_name=first_name.strip(),
                last_name=last_name.strip(),
                user_type=UserType.STUDENT,
                is_verified=False,
                verification_token=token,
                verification_token_expires_at=expires_at,
            )
        )

        try:
            await self.mailer.send_verification_email(user.email, token)
            return to_public_user(user)
        except Exception as e:
            logger.error(f"Registration failed for user {user.id}, rolling back: {e}")
            self.store.delete(user)
            raise RegistrationFailedError() from e

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Check credentials and issue an access/refresh token pair."""
        user = self.store.get_by_email(email.strip().lower())
        if user is None:
            raise InvalidCredentialsError()

        # Unverified accounts are rejected before the password is checked
        if not user.is_verified:
            raise EmailNotVerifiedError()

        if not await verify_password_async(password, user.password_hash):
            raise InvalidCredentialsError()

        claims = session_claims(user.id, user.email, user.user_type)
        try:
            access_token = create_access_token(claims, self.settings)
            refresh_token = create_refresh_token(claims, self.settings)
        except JWTError as e:
            logger.error(f"Token signing failed for user {user.id}: {e}")
            raise TokenIssuanceError() from e

        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "user": to_public_user(user),
        }

    def refresh_access_token(self, claims: dict[str, Any]) -> str:
        """Sign a new access token from already-verified refresh token claims."""
        try:
            return create_access_token(strip_registered_claims(claims), self.settings)
        except JWTError as e:
            logger.error(f"Access token refresh failed: {e}")
            raise TokenIssuanceError() from e

    def verify_email(self, token: str) -> PublicUser:
        """Mark the account holding an unexpired verification token as verified."""
        user = self.store.get_by_verification_token(token)
        if user is None:
            raise InvalidOrExpiredTokenError()

        user.is_verified = True
        user.verification_token = None
        user.verification_token_expires_at = None
        self.store.save(user)
        return to_public_user(user)

    async def resend_verification(self, email: str) -> None:
        """Replace the verification token and email it again."""
        user = self.store.get_by_email(email.strip().lower())
        if user is None:
            raise UserNotFoundError()
        if user.is_verified:
            raise AlreadyVerifiedError()

        token, expires_at = self._new_verification_token()
        user.verification_token = token
        user.verification_token_expires_at = expires_at
        self.store.save(user)

        await self.mailer.send_verification_email(user.email, token)

    def upsert_profile(self, user_id: int, fields: dict[str, Any]) -> PublicUser:
        """Apply the provided profile fields, leaving the rest untouched."""
        user = self.store.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        for name in PROFILE_FIELDS:
            if name in fields:
                setattr(user, name, fields[name])
        self.store.save(user)
        return to_public_user(user)

    def public_profile(self, user_id: int) -> PublicUser:
        user = self.store.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return to_public_user(user)

    def list_users(self) -> list[PublicUser]:
        return [to_public_user(user) for user in self.store.list_all()]

    def delete_account(self, user_id: int) -> bool:
        """Permanently remove an account and everything it owns."""
        user = self.store.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        self.store.delete(user)
        logger.info(f"Deleted account {user_id}")
        return True
