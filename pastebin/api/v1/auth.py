"""Auth API endpoints for shared-password login, logout and password reset.

Endpoints:
    POST /api/v1/auth/login           - Check the password, set the session cookie
    POST /api/v1/auth/logout          - Clear the session cookie
    POST /api/v1/admin/set-password   - Replace the password (X-Admin-Key)

Tests:
    - tests/unit/test_api/test_auth_api.py
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field

from pastebin.api.dependencies import get_credential_store
from pastebin.auth.credentials import CredentialStore
from pastebin.auth.dependencies import require_admin_key
from pastebin.auth.session import SESSION_COOKIE_NAME, create_session_token
from pastebin.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])
admin_router = APIRouter(prefix="/admin", tags=["admin"])


class PasswordRequest(BaseModel):
    """Request carrying the shared password."""

    password: str = Field(..., min_length=1, description="Shared password")


class SuccessResponse(BaseModel):
    """Generic success response."""

    success: bool
    message: str | None = None


@router.post("/login", response_model=SuccessResponse)
async def login(
    request: PasswordRequest,
    response: Response,
    credentials: CredentialStore = Depends(get_credential_store),
) -> SuccessResponse:
    """Start a session.

    The first login on a fresh install sets the password.
    """
    if not await credentials.verify_or_initialize(request.password):
        logger.info("Rejected login with invalid password")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )

    settings = get_settings()
    response.set_cookie(
        SESSION_COOKIE_NAME,
        create_session_token(),
        max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    return SuccessResponse(success=True)


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response) -> SuccessResponse:
    """End the session."""
    response.delete_cookie(SESSION_COOKIE_NAME)
    return SuccessResponse(success=True)


@admin_router.post("/set-password", response_model=SuccessResponse)
async def set_password(
    request: PasswordRequest,
    credentials: CredentialStore = Depends(get_credential_store),
    _admin: None = Depends(require_admin_key),
) -> SuccessResponse:
    """Replace the shared password. Requires X-Admin-Key header."""
    await credentials.set_password(request.password)
    return SuccessResponse(success=True, message="Password updated successfully")
