"""Blob naming and display-name sanitization.

Stored names are random 128-bit tokens, so two concurrent uploads never
collide no matter what the clients called their files. The original
extension is kept so the files stay recognizable on disk.

Format: {uuid4 hex}{.ext}

Examples:
    >>> from pastebin.storage.naming import generate_stored_name, thumbnail_name_for
    >>> generate_stored_name("Holiday Photo.JPG")
    '9b1deb4d3b7d4bad9bdd2b0d7b3dcb6d.jpg'
    >>> thumbnail_name_for("9b1deb4d3b7d4bad9bdd2b0d7b3dcb6d.jpg")
    'thumb_9b1deb4d3b7d4bad9bdd2b0d7b3dcb6d.jpg'
"""

from __future__ import annotations

import re
import uuid
from pathlib import PurePosixPath, PureWindowsPath

DEFAULT_DISPLAY_NAME = "upload.bin"
MAX_EXTENSION_LENGTH = 10
MAX_DISPLAY_NAME_LENGTH = 255


def extract_extension(original_name: str | None) -> str:
    """Extract a filesystem-safe extension from a client file name.

    Rules:
        - Lowercase
        - Alphanumeric only
        - At most 10 characters, otherwise dropped

    Args:
        original_name: File name as supplied by the client.

    Returns:
        Extension including the leading dot, or an empty string.
    """
    if not original_name:
        return ""
    suffix = PurePosixPath(sanitize_display_name(original_name)).suffix.lower()
    ext = re.sub(r"[^a-z0-9]", "", suffix)
    if not ext or len(ext) > MAX_EXTENSION_LENGTH:
        return ""
    return f".{ext}"


def generate_stored_name(original_name: str | None = None, uuid_str: str | None = None) -> str:
    """Generate a unique blob name.

    Args:
        original_name: Client file name, used only for its extension.
        uuid_str: Override token (defaults to a random uuid4).

    Returns:
        Stored name string.
    """
    token = uuid_str or uuid.uuid4().hex
    return f"{token}{extract_extension(original_name)}"


def thumbnail_name_for(stored_name: str, prefix: str = "thumb_") -> str:
    """Derive the thumbnail blob name for a stored name."""
    return f"{prefix}{stored_name}"


def sanitize_display_name(name: str | None) -> str:
    """Reduce a client-supplied file name to a safe display name.

    Directory components (POSIX or Windows style) and control characters
    are dropped; an empty result falls back to ``upload.bin``.

    Args:
        name: Raw client file name.

    Returns:
        Sanitized display name.
    """
    if not name:
        return DEFAULT_DISPLAY_NAME
    base = PureWindowsPath(PurePosixPath(name).name).name
    base = re.sub(r"[\x00-\x1f\x7f]", "", base).strip()
    if base in ("", ".", ".."):
        return DEFAULT_DISPLAY_NAME
    return base[:MAX_DISPLAY_NAME_LENGTH]


def is_safe_blob_name(name: str) -> bool:
    """Check that a blob name cannot escape its directory."""
    if not name or name in (".", ".."):
        return False
    return "/" not in name and "\\" not in name and "\x00" not in name
