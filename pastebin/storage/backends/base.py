"""Abstract base class for storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Abstract storage backend for blob I/O.

    Implementations must handle writing, reading and deleting single files,
    checking existence, and listing a directory.
    """

    @abstractmethod
    async def write_file(self, path: str, data: bytes) -> None:
        """Write binary data to a file.

        Args:
            path: Full file path.
            data: Binary data to write.
        """

    @abstractmethod
    async def read_file(self, path: str) -> bytes:
        """Read a whole file.

        Args:
            path: Full file path.

        Returns:
            The file contents.

        Raises:
            FileNotFoundError: If nothing exists at ``path``.
        """

    @abstractmethod
    async def delete_file(self, path: str) -> bool:
        """Delete a file, ignoring a file that is already gone.

        Args:
            path: Full file path.

        Returns:
            True if a file was removed, False if none existed.
        """

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if a path exists.

        Args:
            path: Path to check.

        Returns:
            True if the path exists.
        """

    @abstractmethod
    async def list_files(self, path: str) -> list[str]:
        """List file names directly inside a directory.

        Args:
            path: Directory path.

        Returns:
            Sorted file names; empty when the directory does not exist.
        """
