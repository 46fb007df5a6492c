"""User account API endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from src.api.dependencies import (
    get_auth_service,
    get_current_user,
    get_password_reset_service,
    get_refresh_claims,
)
from src.config import get_settings
from src.models.user import User
from src.schemas.auth import (
    AccessTokenResponse,
    AuthResponse,
    CurrentUserResponse,
    MessageResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    ProfileResponse,
    ProfileUpdate,
    PublicUser,
    RegisterResponse,
    ResendVerificationRequest,
    ResetResult,
    UserLogin,
    UserRegister,
)
from src.services.auth import AuthService, to_public_user
from src.services.password_reset import PasswordResetService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])

if get_settings().is_development:

    @router.get("", response_model=list[PublicUser])
    async def list_users(service: Annotated[AuthService, Depends(get_auth_service)]):
        """List all users (development only)."""
        return service.list_users()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Register a new user and send the verification email."""
    user = await service.register(
        user_data.email, user_data.password, user_data.first_name, user_data.last_name
    )
    logger.info(f"Registered user {user.id}")
    return RegisterResponse(message="User registered successfully", user=user)


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Login with email and password."""
    result = await service.login(credentials.email, credentials.password)
    logger.info(f"User {result['user'].id} logged in")
    return AuthResponse(**result)


@router.post("/refresh", response_model=AccessTokenResponse, status_code=status.HTTP_201_CREATED)
async def refresh(
    claims: Annotated[dict[str, Any], Depends(get_refresh_claims)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Exchange a refresh token (Authorization header) for a new access token."""
    return AccessTokenResponse(access_token=service.refresh_access_token(claims))


@router.get("/verify", response_model=MessageResponse)
async def verify_email(
    service: Annotated[AuthService, Depends(get_auth_service)],
    token: str | None = None,
):
    """Verify an email address with the emailed token."""
    if not token:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token")

    user = service.verify_email(token)
    logger.info(f"Verified email for user {user.id}")
    return MessageResponse(message="Email verified successfully!")


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    body: ResendVerificationRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Send a fresh verification email."""
    await service.resend_verification(body.email)
    return MessageResponse(message="Verification email resent")


@router.get("/me", response_model=CurrentUserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return CurrentUserResponse(user=to_public_user(current_user))


@router.put("/upsert-profile", response_model=ProfileResponse)
async def upsert_profile(
    profile: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Update the provided profile fields of the current user."""
    fields = profile.model_dump(exclude_unset=True, mode="json")
    updated = service.upsert_profile(current_user.id, fields)
    return ProfileResponse(message="Profile upserted successfully", data=updated)


@router.get("/public_profile/{user_id}", response_model=PublicUser)
async def get_public_profile(
    user_id: int,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Get another user's public profile."""
    return service.public_profile(user_id)


@router.post("/request-password-reset", response_model=ResetResult)
async def request_password_reset(
    body: PasswordResetRequest,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
):
    """Email a password reset link. The response is the same for unknown emails."""
    return await service.request_reset(body.email)


@router.post("/reset-password", response_model=ResetResult)
async def reset_password(
    body: PasswordResetConfirm,
    service: Annotated[PasswordResetService, Depends(get_password_reset_service)],
):
    """Set a new password with a reset token."""
    result = await service.confirm_reset(body.token, body.password)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=result.model_dump(by_alias=True),
        )
    return result


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_account(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """Permanently delete your own account."""
    if user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own account",
        )

    service.delete_account(user_id)
    return MessageResponse(message="Account deleted successfully")
