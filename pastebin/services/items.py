"""Item service: coordinates the catalog, blob stores and thumbnails.

Ingest, listing, download and deletion all go through this service. It
keeps the three stores consistent: a catalog record is only written once
its blobs exist, and blobs are removed before their record, so a failure
midway leaves at worst an orphaned blob and never a record pointing at
nothing.

Examples:
    >>> from pastebin.services.items import ItemService
    >>> service = ItemService.from_settings(get_settings())
    >>> item_id = await service.ingest_text("hello")
    >>> page = await service.list_page(1)
    >>> download = await service.open_download(item_id)
    >>> await service.delete_item(item_id)

Tests:
    - tests/unit/test_services/test_items.py
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pastebin.catalog import BlobNames, ItemCatalog, NewItem
from pastebin.config import Settings
from pastebin.errors import InvalidInput, NotFound, PastebinError, UnsupportedOrCorruptImage
from pastebin.models import Item, is_image_type, is_text_type
from pastebin.storage.blobs import BlobStore
from pastebin.storage.naming import sanitize_display_name, thumbnail_name_for
from pastebin.storage.thumbnails import ThumbnailDeriver, thumbnail_mime_type

logger = logging.getLogger(__name__)

TEXT_PASTE_NAME = "text-paste.txt"
TEXT_PASTE_CONTENT_TYPE = "text/plain"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class ItemPage:
    """One page of the newest-first item listing."""

    items: list[Item]
    current_page: int
    total_pages: int
    total: int
    page_size: int

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.current_page > 1

    @property
    def next_page(self) -> int:
        return self.current_page + 1

    @property
    def prev_page(self) -> int:
        return self.current_page - 1


@dataclass
class Download:
    """Blob bytes paired with the name the client should save them as."""

    data: bytes
    display_name: str
    content_type: str


@dataclass
class DeleteAllResult:
    """Outcome of clearing every item.

    Attributes:
        deleted: Number of catalog records removed.
        failed_blobs: Blob names that could not be removed (left orphaned).
    """

    deleted: int
    failed_blobs: list[str] = field(default_factory=list)


@dataclass
class ItemStats:
    """Catalog and blob directory counts."""

    total: int
    by_content_type: dict[str, int]
    upload_blobs: int
    thumbnail_blobs: int


class ItemService:
    """Lifecycle coordinator for items.

    Attributes:
        catalog: Item metadata catalog.
        uploads: Blob store for primary payloads.
        thumbnails: Blob store for derived thumbnails.
        deriver: Thumbnail deriver.
        page_size: Items per listing page.
        thumbnail_prefix: Prefix joining a stored name to its thumbnail name.
        max_upload_bytes: Largest accepted payload (None for unlimited).
    """

    def __init__(
        self,
        catalog: ItemCatalog,
        uploads: BlobStore,
        thumbnails: BlobStore,
        deriver: ThumbnailDeriver,
        page_size: int = 10,
        thumbnail_prefix: str = "thumb_",
        max_upload_bytes: int | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.catalog = catalog
        self.uploads = uploads
        self.thumbnails = thumbnails
        self.deriver = deriver
        self.page_size = page_size
        self.thumbnail_prefix = thumbnail_prefix
        self.max_upload_bytes = max_upload_bytes

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> "ItemService":
        """Create an ItemService wired to the configured stores."""
        if session_factory is None:
            from pastebin.database import get_session_factory

            session_factory = get_session_factory()

        config = settings.storage_config()
        return cls(
            catalog=ItemCatalog(session_factory),
            uploads=BlobStore(config.upload_dir),
            thumbnails=BlobStore(config.thumbnail_dir),
            deriver=ThumbnailDeriver(size=config.thumbnail_size),
            page_size=settings.PAGE_SIZE,
            thumbnail_prefix=config.thumbnail_prefix,
            max_upload_bytes=settings.MAX_UPLOAD_BYTES,
        )

    # Ingest

    async def ingest_file(
        self,
        data: bytes,
        display_name: str | None,
        content_type: str | None,
        size_bytes: int | None = None,
    ) -> int:
        """Store an uploaded file and record it in the catalog.

        Text-typed payloads are copied into ``inline_content`` when they
        decode as UTF-8. Image-typed payloads get a thumbnail when they
        decode as images. Neither step can fail the ingest.

        Args:
            data: Uploaded bytes.
            display_name: Client file name.
            content_type: Declared MIME type.
            size_bytes: Declared size (defaults to ``len(data)``).

        Returns:
            The new item id.

        Raises:
            InvalidInput: If no payload was given or it is too large.
            StorageFailure: If a blob or catalog write failed. No catalog
                record exists in that case.
        """
        if data is None:
            raise InvalidInput("No file or text provided")
        self._check_size(len(data))

        content_type = (content_type or "").strip() or DEFAULT_CONTENT_TYPE
        display_name = sanitize_display_name(display_name)

        stored_name = await self.uploads.put(data, display_name)

        inline_content = None
        if is_text_type(content_type):
            inline_content = self._decode_text(data, stored_name)

        thumbnail_name = None
        if is_image_type(content_type):
            thumbnail_name = await self._store_thumbnail(data, stored_name)

        record = NewItem(
            stored_name=stored_name,
            display_name=display_name,
            content_type=content_type,
            size_bytes=size_bytes if size_bytes is not None else len(data),
            inline_content=inline_content,
            thumbnail_name=thumbnail_name,
        )
        return await self._insert(record)

    async def ingest_text(self, text: str) -> int:
        """Store a text paste.

        The text is written as a ``.txt`` blob so it downloads like any
        file, and is copied verbatim into ``inline_content``.

        Raises:
            InvalidInput: If the text is empty.
        """
        if not text:
            raise InvalidInput("No file or text provided")
        data = text.encode("utf-8")
        self._check_size(len(data))

        stored_name = await self.uploads.put(data, TEXT_PASTE_NAME)
        record = NewItem(
            stored_name=stored_name,
            display_name=TEXT_PASTE_NAME,
            content_type=TEXT_PASTE_CONTENT_TYPE,
            size_bytes=len(data),
            inline_content=text,
        )
        return await self._insert(record)

    # Retrieval

    async def list_page(self, page: int = 1) -> ItemPage:
        """Fetch one page of items, newest first.

        Args:
            page: 1-indexed page number; values below 1 become 1.
        """
        page = max(page, 1)
        items, total = await self.catalog.list_page(page, self.page_size)
        return ItemPage(
            items=items,
            current_page=page,
            total_pages=math.ceil(total / self.page_size),
            total=total,
            page_size=self.page_size,
        )

    async def get_item(self, item_id: int) -> Item:
        """Fetch one item's metadata.

        Raises:
            NotFound: If the item does not exist.
        """
        return await self.catalog.get_by_id(item_id)

    async def open_download(self, item_id: int) -> Download:
        """Fetch an item's payload for download.

        Raises:
            NotFound: If the item or its blob does not exist.
        """
        item = await self.catalog.get_by_id(item_id)
        data = await self.uploads.get(item.stored_name)
        return Download(data=data, display_name=item.display_name, content_type=item.content_type)

    async def get_thumbnail(self, item_id: int) -> Download:
        """Fetch an item's thumbnail.

        Raises:
            NotFound: If the item does not exist or has no thumbnail.
        """
        item = await self.catalog.get_by_id(item_id)
        if not item.thumbnail_name:
            raise NotFound(f"Item {item_id} has no thumbnail")
        data = await self.thumbnails.get(item.thumbnail_name)
        return Download(
            data=data,
            display_name=item.thumbnail_name,
            content_type=thumbnail_mime_type(data),
        )

    async def stats(self) -> ItemStats:
        """Count items per content type and blobs per directory."""
        by_content_type = await self.catalog.count_by_content_type()
        upload_blobs = await self.uploads.list_names()
        thumbnail_blobs = await self.thumbnails.list_names()
        return ItemStats(
            total=sum(by_content_type.values()),
            by_content_type=by_content_type,
            upload_blobs=len(upload_blobs),
            thumbnail_blobs=len(thumbnail_blobs),
        )

    # Deletion

    async def delete_item(self, item_id: int) -> list[str]:
        """Delete an item's blobs, then its catalog record.

        A blob that cannot be removed is logged and left orphaned; the
        record is deleted regardless.

        Returns:
            Blob names whose deletion failed.

        Raises:
            NotFound: If the item does not exist.
        """
        item = await self.catalog.get_by_id(item_id)
        names = BlobNames(
            item_id=item.id,
            stored_name=item.stored_name,
            thumbnail_name=item.thumbnail_name,
        )

        failed = await self._delete_blobs(names)
        await self.catalog.delete(item_id)

        logger.info(f"Deleted item {item_id} ({item.stored_name})")
        return failed

    async def delete_all_items(self) -> DeleteAllResult:
        """Delete every item.

        The blob names are snapshotted before the catalog is cleared, since
        the cleared catalog could no longer say which blobs to reclaim.
        Blob deletions run concurrently and a failure never stops the
        others or the final clear.
        """
        snapshot = await self.catalog.snapshot_blob_names()

        results = await asyncio.gather(*(self._delete_blobs(names) for names in snapshot))
        failed = [name for names in results for name in names]

        up_to_id = max((names.item_id for names in snapshot), default=0)
        deleted = await self.catalog.delete_all(up_to_id=up_to_id)

        if failed:
            logger.warning(f"Deleted {deleted} items, {len(failed)} blobs could not be removed")
        else:
            logger.info(f"Deleted {deleted} items")
        return DeleteAllResult(deleted=deleted, failed_blobs=failed)

    # Helpers

    def _check_size(self, size: int) -> None:
        if self.max_upload_bytes is not None and size > self.max_upload_bytes:
            raise InvalidInput(
                f"Payload of {size} bytes exceeds the {self.max_upload_bytes} byte limit",
                status_code=413,
            )

    @staticmethod
    def _decode_text(data: bytes, stored_name: str) -> str | None:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            logger.warning(f"Text upload {stored_name} is not valid UTF-8, no inline content: {exc}")
            return None

    async def _store_thumbnail(self, data: bytes, stored_name: str) -> str | None:
        """Derive and store a thumbnail; returns None when that fails."""
        try:
            thumb = await self.deriver.derive_async(data)
        except UnsupportedOrCorruptImage as exc:
            logger.warning(f"No thumbnail for {stored_name}: {exc.message}")
            return None

        thumbnail_name = thumbnail_name_for(stored_name, self.thumbnail_prefix)
        try:
            await self.thumbnails.put_named(thumbnail_name, thumb)
        except PastebinError as exc:
            logger.warning(f"No thumbnail for {stored_name}: {exc.message}")
            await self._discard(self.thumbnails, thumbnail_name)
            return None

        logger.info(f"Thumbnail generated: {thumbnail_name}")
        return thumbnail_name

    async def _insert(self, record: NewItem) -> int:
        """Insert a record, removing its blobs again if the insert fails."""
        try:
            item_id = await self.catalog.insert(record)
        except PastebinError:
            await self._discard(self.uploads, record.stored_name)
            if record.thumbnail_name:
                await self._discard(self.thumbnails, record.thumbnail_name)
            raise
        logger.info(f"Ingested item {item_id}: {record.display_name} ({record.content_type})")
        return item_id

    async def _delete_blobs(self, names: BlobNames) -> list[str]:
        """Delete an item's primary blob and thumbnail, collecting failures."""
        failed = []
        targets = [(self.uploads, names.stored_name)]
        if names.thumbnail_name:
            targets.append((self.thumbnails, names.thumbnail_name))

        for store, name in targets:
            try:
                await store.delete(name)
            except PastebinError as exc:
                logger.warning(f"Failed to delete blob {name}: {exc.message}")
                failed.append(name)
        return failed

    @staticmethod
    async def _discard(store: BlobStore, name: str) -> None:
        try:
            await store.delete(name)
        except PastebinError as exc:
            logger.warning(f"Could not clean up blob {name}: {exc.message}")
