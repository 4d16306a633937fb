"""Local filesystem storage backend using pathlib."""

from __future__ import annotations

from pathlib import Path

from pastebin.storage.backends.base import StorageBackend


class LocalStorageBackend(StorageBackend):
    """Pathlib-based local filesystem storage backend."""

    async def write_file(self, path: str, data: bytes) -> None:
        """Write binary data to a local file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)

    async def read_file(self, path: str) -> bytes:
        """Read a local file."""
        return Path(path).read_bytes()

    async def delete_file(self, path: str) -> bool:
        """Delete a local file if present."""
        try:
            Path(path).unlink()
        except FileNotFoundError:
            return False
        return True

    async def exists(self, path: str) -> bool:
        """Check if a local path exists."""
        return Path(path).exists()

    async def list_files(self, path: str) -> list[str]:
        """List files in a local directory."""
        p = Path(path)
        if not p.is_dir():
            return []
        return sorted(child.name for child in p.iterdir() if child.is_file())
