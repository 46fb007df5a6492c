"""Translate service failures and validation errors into HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.services.errors import AuthError, AuthErrorCode

logger = logging.getLogger(__name__)

AUTH_ERROR_STATUS: dict[AuthErrorCode, int] = {
    AuthErrorCode.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
    AuthErrorCode.INVALID_DOMAIN: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthErrorCode.EMAIL_NOT_VERIFIED: status.HTTP_403_FORBIDDEN,
    AuthErrorCode.INVALID_OR_EXPIRED_TOKEN: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AuthErrorCode.ALREADY_VERIFIED: status.HTTP_400_BAD_REQUEST,
    AuthErrorCode.REGISTRATION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    AuthErrorCode.TOKEN_ISSUANCE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    AuthErrorCode.RESET_PROCESSING_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    AuthErrorCode.RESET_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Map a typed account failure to its status code."""
    status_code = AUTH_ERROR_STATUS[exc.code]
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.code}")
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "detail": exc.message, "code": exc.code},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as 400 with per-field messages."""
    details = [
        {
            "path": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"].removeprefix("Value error, "),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "details": details},
    )
