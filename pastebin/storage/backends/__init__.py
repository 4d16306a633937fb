"""Storage backends for blob I/O."""

from pastebin.storage.backends.base import StorageBackend
from pastebin.storage.backends.local import LocalStorageBackend

__all__ = ["StorageBackend", "LocalStorageBackend"]
