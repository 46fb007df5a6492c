"""Outbound email for account verification and password resets."""

import logging

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Mailer:
    """Sends account emails over SMTP. Delivery errors propagate to the caller."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.config = ConnectionConfig(
            MAIL_USERNAME=self.settings.smtp_user,
            MAIL_PASSWORD=self.settings.smtp_key,
            MAIL_FROM=self.settings.from_email,
            MAIL_FROM_NAME=self.settings.from_name,
            MAIL_PORT=self.settings.smtp_port,
            MAIL_SERVER=self.settings.smtp_host,
            MAIL_STARTTLS=self.settings.smtp_port == 587,
            MAIL_SSL_TLS=self.settings.smtp_port == 465,
            USE_CREDENTIALS=bool(self.settings.smtp_user),
        )
        self.client = FastMail(self.config)

    def verification_url(self, token: str) -> str:
        return f"{self.settings.email_verification_url}?token={token}"

    def reset_url(self, token: str) -> str:
        return f"{self.settings.frontend_url}/access/reset-password?token={token}"

    async def send_verification_email(self, to: str, token: str) -> None:
        """Send the link that confirms ownership of ``to``."""
        url = self.verification_url(token)
        message = MessageSchema(
            subject=f"Welcome to {self.settings.from_name} - confirm your email",
            recipients=[to],
            body=(
                f"<h2>Welcome to {self.settings.from_name}</h2>"
                "<p>Please confirm your email address:</p>"
                f'<p><a href="{url}">Verify Email</a></p>'
                "<p>If you didn't sign up, you can ignore this.</p>"
            ),
            subtype=MessageType.html,
        )
        await self.client.send_message(message)
        logger.info(f"Verification email sent to {to}")

    async def send_password_reset_email(self, to: str, token: str, first_name: str) -> None:
        """Send the one-time password reset link."""
        url = self.reset_url(token)
        message = MessageSchema(
            subject=f"Password Reset Request - {self.settings.from_name}",
            recipients=[to],
            body=(
                f"Hi {first_name},\n\n"
                f"You requested to reset your password for your {self.settings.from_name} account.\n\n"
                f"Click the link below to reset your password:\n{url}\n\n"
                f"This link will expire in {self.settings.password_reset_token_expire_seconds // 60} minutes.\n\n"
                "If you didn't request this password reset, please ignore this email. "
                "Your password will remain unchanged."
            ),
            subtype=MessageType.plain,
        )
        await self.client.send_message(message)
        logger.info(f"Password reset email sent to {to}")


def get_mailer() -> Mailer:
    """Get a mailer instance."""
    return Mailer()
