"""FastAPI dependencies for the session gate and admin endpoints."""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status

from pastebin.auth.session import SESSION_COOKIE_NAME, is_valid_session_token
from pastebin.config import get_settings

logger = logging.getLogger(__name__)


async def require_session(request: Request) -> None:
    """Reject requests without a valid session cookie.

    Raises:
        HTTPException 401: If the cookie is missing, expired or forged.
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not is_valid_session_token(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Login required",
        )


async def require_admin_key(request: Request) -> None:
    """Verify the X-Admin-Key header matches ADMIN_API_KEY.

    Returns 403 if the key is empty (disabled) or doesn't match.
    """
    settings = get_settings()
    if not settings.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin endpoints are disabled (ADMIN_API_KEY not set)",
        )

    provided = request.headers.get("X-Admin-Key", "")
    if provided != settings.ADMIN_API_KEY:
        logger.warning("Rejected admin request with invalid key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin key",
        )
