"""Typed failures raised by the account services."""

from enum import StrEnum


class AuthErrorCode(StrEnum):
    """Closed set of account-related failure tags."""

    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_DOMAIN = "invalid_domain"
    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_VERIFIED = "email_not_verified"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"
    USER_NOT_FOUND = "user_not_found"
    ALREADY_VERIFIED = "already_verified"
    REGISTRATION_FAILED = "registration_failed"
    TOKEN_ISSUANCE_FAILED = "token_issuance_failed"
    RESET_PROCESSING_FAILED = "reset_processing_failed"
    RESET_FAILED = "reset_failed"


class AuthError(Exception):
    """Base class for account failures. Subclasses pin the code and message."""

    code: AuthErrorCode
    message: str = "Authentication error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class DuplicateEmailError(AuthError):
    code = AuthErrorCode.DUPLICATE_EMAIL
    message = "Email already in use"


class InvalidDomainError(AuthError):
    code = AuthErrorCode.INVALID_DOMAIN
    message = "Email domain is not allowed"


class InvalidCredentialsError(AuthError):
    code = AuthErrorCode.INVALID_CREDENTIALS
    message = "Invalid email or password"


class EmailNotVerifiedError(AuthError):
    code = AuthErrorCode.EMAIL_NOT_VERIFIED
    message = "Please verify your email before logging in"


class InvalidOrExpiredTokenError(AuthError):
    code = AuthErrorCode.INVALID_OR_EXPIRED_TOKEN
    message = "Invalid or expired token"


class UserNotFoundError(AuthError):
    code = AuthErrorCode.USER_NOT_FOUND
    message = "User not found"


class AlreadyVerifiedError(AuthError):
    code = AuthErrorCode.ALREADY_VERIFIED
    message = "User already verified"


class RegistrationFailedError(AuthError):
    code = AuthErrorCode.REGISTRATION_FAILED
    message = "Failed to register user. Please try again."


class TokenIssuanceError(AuthError):
    code = AuthErrorCode.TOKEN_ISSUANCE_FAILED
    message = "Failed to issue token"


class ResetProcessingFailedError(AuthError):
    code = AuthErrorCode.RESET_PROCESSING_FAILED
    message = "Failed to process password reset request"


class ResetFailedError(AuthError):
    code = AuthErrorCode.RESET_FAILED
    message = "Failed to reset password"
