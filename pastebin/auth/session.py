"""Signed session tokens.

A session is an HS256 JWT carried in a cookie. It holds no identity,
only proof that the shared password was presented before it expired.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt

from pastebin.config import get_settings

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "pastebin_session"
SESSION_SUBJECT = "pastebin"


def create_session_token(secret_key: str | None = None, max_age_days: int | None = None) -> str:
    """Create a session token.

    Args:
        secret_key: Signing key (defaults to SECRET_KEY).
        max_age_days: Lifetime (defaults to SESSION_MAX_AGE_DAYS).

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    days = max_age_days if max_age_days is not None else settings.SESSION_MAX_AGE_DAYS
    payload = {
        "sub": SESSION_SUBJECT,
        "iat": now,
        "exp": now + timedelta(days=days),
        "type": "session",
    }
    return jwt.encode(payload, secret_key or settings.SECRET_KEY, algorithm="HS256")


def is_valid_session_token(token: str | None, secret_key: str | None = None) -> bool:
    """Check a session token's signature, expiry and type."""
    if not token:
        return False
    key = secret_key or get_settings().SECRET_KEY
    try:
        payload = jwt.decode(token, key, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        logger.debug("Session token expired")
        return False
    except jwt.InvalidTokenError as e:
        logger.debug(f"Invalid session token: {e}")
        return False
    return payload.get("type") == "session" and payload.get("sub") == SESSION_SUBJECT
