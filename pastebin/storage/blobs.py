"""Blob store: raw bytes filed under generated names in one directory.

Examples:
    >>> from pastebin.storage.blobs import BlobStore
    >>> store = BlobStore(root="./uploads")
    >>> name = await store.put(b"hello", "greeting.txt")
    >>> await store.get(name)
    b'hello'
    >>> await store.delete(name)
    >>> await store.delete(name)  # already gone, still fine
"""

from __future__ import annotations

import logging

from pastebin.errors import NotFound, StorageFailure
from pastebin.storage.backends.base import StorageBackend
from pastebin.storage.backends.local import LocalStorageBackend
from pastebin.storage.naming import generate_stored_name, is_safe_blob_name

logger = logging.getLogger(__name__)


class BlobStore:
    """Persists, reads and deletes blobs under a single root directory.

    Attributes:
        root: Directory holding the blobs.
        backend: Storage backend for I/O.
    """

    def __init__(self, root: str, backend: StorageBackend | None = None) -> None:
        self.root = root.rstrip("/") or "/"
        self.backend = backend or LocalStorageBackend()

    def path_for(self, name: str) -> str:
        """Resolve a blob name to its full path.

        Raises:
            NotFound: If the name could escape the root directory.
        """
        if not is_safe_blob_name(name):
            raise NotFound(f"Blob not found: {name!r}")
        return f"{self.root}/{name}"

    async def put(self, data: bytes, original_name: str | None = None) -> str:
        """Store bytes under a freshly generated name.

        Args:
            data: Blob contents.
            original_name: Client file name, only its extension is kept.

        Returns:
            The stored name.
        """
        name = generate_stored_name(original_name)
        await self.put_named(name, data)
        return name

    async def put_named(self, name: str, data: bytes) -> None:
        """Store bytes under a caller-chosen name, replacing any blob there.

        Raises:
            StorageFailure: If the write failed.
        """
        path = self.path_for(name)
        try:
            await self.backend.write_file(path, data)
        except OSError as exc:
            raise StorageFailure(f"Failed to write blob {name}: {exc}") from exc
        logger.debug(f"Blob written: {path} ({len(data)} bytes)")

    async def get(self, name: str) -> bytes:
        """Read a blob.

        Raises:
            NotFound: If no blob exists under ``name``.
            StorageFailure: If the read failed for another reason.
        """
        path = self.path_for(name)
        try:
            return await self.backend.read_file(path)
        except FileNotFoundError as exc:
            raise NotFound(f"Blob not found: {name}") from exc
        except OSError as exc:
            raise StorageFailure(f"Failed to read blob {name}: {exc}") from exc

    async def delete(self, name: str) -> None:
        """Delete a blob; a missing blob counts as deleted.

        Raises:
            StorageFailure: If the blob exists but could not be removed.
        """
        if not is_safe_blob_name(name):
            logger.warning(f"Refusing to delete unsafe blob name: {name!r}")
            return
        path = f"{self.root}/{name}"
        try:
            removed = await self.backend.delete_file(path)
        except OSError as exc:
            raise StorageFailure(f"Failed to delete blob {name}: {exc}") from exc
        if removed:
            logger.debug(f"Blob deleted: {path}")
        else:
            logger.debug(f"Blob already absent: {path}")

    async def exists(self, name: str) -> bool:
        """Check whether a blob exists."""
        if not is_safe_blob_name(name):
            return False
        return await self.backend.exists(f"{self.root}/{name}")

    async def list_names(self) -> list[str]:
        """List every blob name in the root directory."""
        try:
            return await self.backend.list_files(self.root)
        except OSError as exc:
            raise StorageFailure(f"Failed to list blobs in {self.root}: {exc}") from exc
