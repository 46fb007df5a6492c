"""Password reset flow with hashed, expiring, single-use tokens."""

import logging
from datetime import UTC, datetime, timedelta

from src.config import Settings, get_settings
from src.schemas.auth import ResetResult
from src.services.errors import ResetFailedError, ResetProcessingFailedError
from src.services.mailer import Mailer
from src.services.passwords import hash_password_async, password_policy_errors
from src.services.secret_tokens import generate_token, hash_token
from src.services.user_store import UserStore

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
REQUEST_ACCEPTED_MESSAGE = "If that email exists, a reset link has been sent"
INVALID_TOKEN_MESSAGE = "Invalid or expired reset token"


class PasswordResetService:
    """Issues and redeems password reset tokens.

    Responses never reveal whether an email is registered, or whether a
    rejected token was unknown versus expired.
    """

    def __init__(self, store: UserStore, mailer: Mailer, settings: Settings | None = None):
        self.store = store
        self.mailer = mailer
        self.settings = settings or get_settings()

    def _digest(self, raw_token: str) -> str:
        return hash_token(raw_token, self.settings.password_reset_secret)

    async def request_reset(self, email: str) -> ResetResult:
        """Email a reset link if the account exists. Always reports success."""
        accepted = ResetResult(success=True, message=REQUEST_ACCEPTED_MESSAGE)
        try:
            user = self.store.get_by_email(email.strip().lower())
            if user is None:
                logger.warning("Password reset requested for unknown email")
                return accepted

            raw_token = generate_token()
            user.password_reset_token = self._digest(raw_token)
            user.password_reset_expires_at = datetime.now(UTC) + timedelta(
                seconds=self.settings.password_reset_token_expire_seconds
            )
            self.store.save(user)

            await self.mailer.send_password_reset_email(user.email, raw_token, user.first_name)
            logger.info(f"Password reset requested for user {user.id}")
            return accepted
        except Exception as e:
            logger.exception(f"Password reset request failed: {e}")
            raise ResetProcessingFailedError() from e

    async def confirm_reset(self, token: str, new_password: str) -> ResetResult:
        """Set a new password using a reset token, consuming the token."""
        policy_errors = password_policy_errors(new_password, min_length=MIN_PASSWORD_LENGTH)
        if policy_errors:
            return ResetResult(success=False, message=policy_errors[0])

        try:
            user = self.store.consume_reset_token(self._digest(token))
            if user is None:
                logger.warning("Password reset attempted with invalid or expired token")
                return ResetResult(success=False, message=INVALID_TOKEN_MESSAGE)

            user.password_hash = await hash_password_async(new_password)
            self.store.save(user)

            logger.info(f"Password reset completed for user {user.id}")
            return ResetResult(success=True, message="Password has been reset successfully")
        except Exception as e:
            logger.exception(f"Password reset failed unexpectedly: {e}")
            raise ResetFailedError() from e
