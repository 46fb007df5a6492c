"""Authentication schemas."""

from datetime import datetime

from pydantic import EmailStr, Field, HttpUrl, field_validator

from src.config import get_settings
from src.schemas.base import APIModel
from src.services.passwords import password_policy_errors

RESET_TOKEN_PATTERN = r"^[0-9a-f]{64}$"


def check_institutional_email(email: str) -> str:
    """Reject addresses outside the configured institutional domain."""
    domain = get_settings().email_domain
    if not email.lower().endswith(domain.lower()):
        raise ValueError(f"Only {domain} email addresses are allowed")
    return email


def check_password_strength(password: str) -> str:
    """Enforce the password policy used for password resets."""
    errors = password_policy_errors(password)
    if errors:
        raise ValueError(errors[0])
    return password


class UserRegister(APIModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=2, max_length=20)
    last_name: str = Field(..., min_length=2, max_length=20)

    validate_email = field_validator("email")(check_institutional_email)


class UserLogin(APIModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    validate_email = field_validator("email")(check_institutional_email)


class ResendVerificationRequest(APIModel):
    """Request a fresh verification email."""

    email: EmailStr = Field(..., max_length=255)


class ProfileUpdate(APIModel):
    """Partial profile update. Only fields present in the body are applied."""

    first_name: str | None = Field(None, min_length=2, max_length=20)
    last_name: str | None = Field(None, min_length=2, max_length=20)
    profile_picture: str | None = Field(None, max_length=500)
    bio: str | None = Field(None, max_length=250)
    city: str | None = Field(None, max_length=50)
    websites: list[HttpUrl] | None = Field(None, max_length=5)


class PasswordResetRequest(APIModel):
    """Start the password reset flow."""

    email: EmailStr = Field(..., max_length=255)

    validate_email = field_validator("email")(check_institutional_email)


class PasswordResetConfirm(APIModel):
    """Complete a password reset with the emailed token."""

    token: str = Field(..., pattern=RESET_TOKEN_PATTERN)
    password: str = Field(..., min_length=8, max_length=100)

    validate_password = field_validator("password")(check_password_strength)


class PublicUser(APIModel):
    """User view safe to return to clients.

    Only the fields declared here are ever serialized; credentials and token
    state on the ORM row have no counterpart.
    """

    id: int
    email: str
    first_name: str
    last_name: str
    is_verified: bool
    profile_picture: str | None
    bio: str | None
    user_type: str
    city: str | None
    websites: list[str] | None
    created_at: datetime


class UserSummary(APIModel):
    """Compact author/seller/host view embedded in other resources."""

    id: int
    first_name: str
    last_name: str
    profile_picture: str | None
    user_type: str


class RegisterResponse(APIModel):
    """Registration result."""

    message: str
    user: PublicUser


class AuthResponse(APIModel):
    """Login result with both tokens."""

    message: str = "Login successful"
    access_token: str
    refresh_token: str
    token_type: str = "bearer"  # noqa: S105
    user: PublicUser


class AccessTokenResponse(APIModel):
    """Fresh access token issued from a refresh token."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105


class CurrentUserResponse(APIModel):
    """Authenticated user wrapper."""

    user: PublicUser


class ProfileResponse(APIModel):
    """Profile upsert result."""

    message: str
    data: PublicUser


class MessageResponse(APIModel):
    """Plain message response."""

    message: str


class ResetResult(APIModel):
    """Outcome of a password reset step."""

    success: bool
    message: str
