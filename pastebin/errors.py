"""Error types raised by the item storage and retrieval engine.

Each error carries the HTTP status the API boundary answers with, so
routes never translate error kinds themselves.
"""

from __future__ import annotations


class PastebinError(Exception):
    """Base exception for pastebin errors.

    Attributes:
        message: Error message
        status_code: HTTP status code for the API boundary
    """

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """Initialize pastebin error.

        Args:
            message: Error message.
            status_code: Override for the class-level HTTP status.
        """
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFound(PastebinError):
    """An item id or blob name does not exist."""

    status_code = 404


class StorageFailure(PastebinError):
    """The blob directory or the catalog could not be read or written."""

    status_code = 500


class UnsupportedOrCorruptImage(PastebinError):
    """Image bytes could not be decoded.

    Only raised by thumbnail derivation. The item service recovers from it
    locally, so it never reaches a client.
    """

    status_code = 415


class InvalidInput(PastebinError):
    """The request carried no usable payload, or one that is too large."""

    status_code = 400
