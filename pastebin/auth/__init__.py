"""Shared-password authentication.

One bcrypt hash gates the whole service; a signed session cookie
remembers that a browser has presented it.
"""

from pastebin.auth.credentials import CredentialStore
from pastebin.auth.session import SESSION_COOKIE_NAME, create_session_token, is_valid_session_token

__all__ = [
    "SESSION_COOKIE_NAME",
    "CredentialStore",
    "create_session_token",
    "is_valid_session_token",
]
