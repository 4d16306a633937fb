"""Tests for pastebin.storage.blobs and the local backend.

Covers:
    - put/get round trip on disk
    - get of a missing blob raises NotFound
    - idempotent delete
    - backend failures become StorageFailure
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from pastebin.errors import NotFound, StorageFailure
from pastebin.storage.backends.local import LocalStorageBackend
from pastebin.storage.blobs import BlobStore


def _make_mock_backend():
    backend = AsyncMock()
    backend.write_file = AsyncMock()
    backend.read_file = AsyncMock(return_value=b"")
    backend.delete_file = AsyncMock(return_value=True)
    backend.exists = AsyncMock(return_value=False)
    backend.list_files = AsyncMock(return_value=[])
    return backend


@pytest.mark.fast
class TestBlobStore:
    """Tests for BlobStore against the local filesystem."""

    @pytest.mark.asyncio
    async def test_put_writes_file(self, uploads, upload_dir):
        name = await uploads.put(b"hello", "greeting.txt")
        assert name.endswith(".txt")
        assert (upload_dir / name).read_bytes() == b"hello"

    @pytest.mark.asyncio
    async def test_put_creates_directory(self, tmp_path):
        store = BlobStore(str(tmp_path / "nested" / "dir"))
        name = await store.put(b"x")
        assert (tmp_path / "nested" / "dir" / name).exists()

    @pytest.mark.asyncio
    async def test_get_returns_bytes(self, uploads):
        name = await uploads.put(b"\x00\x01binary")
        assert await uploads.get(name) == b"\x00\x01binary"

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, uploads):
        with pytest.raises(NotFound):
            await uploads.get("does-not-exist.bin")

    @pytest.mark.asyncio
    async def test_get_rejects_path_traversal(self, uploads):
        with pytest.raises(NotFound):
            await uploads.get("../secrets.txt")

    @pytest.mark.asyncio
    async def test_put_named_uses_given_name(self, thumbnails, thumbnail_dir):
        await thumbnails.put_named("thumb_abc.png", b"png")
        assert (thumbnail_dir / "thumb_abc.png").read_bytes() == b"png"

    @pytest.mark.asyncio
    async def test_concurrent_puts_get_distinct_names(self, uploads):
        names = await asyncio.gather(*(uploads.put(b"same", "same.txt") for _ in range(50)))
        assert len(set(names)) == 50

    @pytest.mark.asyncio
    async def test_delete_removes_file(self, uploads, upload_dir):
        name = await uploads.put(b"bye")
        await uploads.delete(name)
        assert not (upload_dir / name).exists()
        assert not await uploads.exists(name)

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, uploads):
        name = await uploads.put(b"bye")
        await uploads.delete(name)
        await uploads.delete(name)  # no error

    @pytest.mark.asyncio
    async def test_delete_never_existing_blob(self, uploads):
        await uploads.delete("never-there.bin")

    @pytest.mark.asyncio
    async def test_list_names(self, uploads):
        assert await uploads.list_names() == []
        first = await uploads.put(b"1")
        second = await uploads.put(b"2")
        assert await uploads.list_names() == sorted([first, second])


@pytest.mark.fast
class TestBlobStoreFailures:
    """Tests for backend errors surfacing as StorageFailure."""

    @pytest.mark.asyncio
    async def test_write_failure(self):
        backend = _make_mock_backend()
        backend.write_file.side_effect = PermissionError("read-only")
        store = BlobStore("/blobs", backend=backend)
        with pytest.raises(StorageFailure):
            await store.put(b"data")

    @pytest.mark.asyncio
    async def test_read_failure(self):
        backend = _make_mock_backend()
        backend.read_file.side_effect = IsADirectoryError("dir")
        store = BlobStore("/blobs", backend=backend)
        with pytest.raises(StorageFailure):
            await store.get("abc")

    @pytest.mark.asyncio
    async def test_delete_failure(self):
        backend = _make_mock_backend()
        backend.delete_file.side_effect = PermissionError("locked")
        store = BlobStore("/blobs", backend=backend)
        with pytest.raises(StorageFailure):
            await store.delete("abc")

    @pytest.mark.asyncio
    async def test_paths_are_joined_under_root(self):
        backend = _make_mock_backend()
        store = BlobStore("/blobs/", backend=backend)
        await store.put_named("thumb_x.png", b"x")
        backend.write_file.assert_called_once_with("/blobs/thumb_x.png", b"x")


@pytest.mark.fast
class TestLocalStorageBackend:
    """Tests for LocalStorageBackend."""

    @pytest.mark.asyncio
    async def test_delete_file_reports_removal(self, tmp_path):
        backend = LocalStorageBackend()
        path = tmp_path / "f.bin"
        path.write_bytes(b"x")
        assert await backend.delete_file(str(path)) is True
        assert await backend.delete_file(str(path)) is False

    @pytest.mark.asyncio
    async def test_read_missing_raises(self, tmp_path):
        backend = LocalStorageBackend()
        with pytest.raises(FileNotFoundError):
            await backend.read_file(str(tmp_path / "missing"))

    @pytest.mark.asyncio
    async def test_list_files_missing_directory(self, tmp_path):
        backend = LocalStorageBackend()
        assert await backend.list_files(str(tmp_path / "nope")) == []
