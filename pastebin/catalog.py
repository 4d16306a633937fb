"""Item catalog: the durable, ordered collection of item metadata.

The catalog is the single source of truth for which items exist. Every
method opens its own session, so the database serializes concurrent
writers and identifier assignment never races.

Examples:
    >>> from pastebin.catalog import ItemCatalog, NewItem
    >>> catalog = ItemCatalog(get_session_factory())
    >>> item_id = await catalog.insert(NewItem(
    ...     stored_name="3f2a.txt",
    ...     display_name="notes.txt",
    ...     content_type="text/plain",
    ...     size_bytes=5,
    ...     inline_content="hello",
    ... ))
    >>> items, total = await catalog.list_page(1, 10)

Tests:
    - tests/unit/test_catalog.py
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pastebin.database import session_scope
from pastebin.errors import NotFound, StorageFailure
from pastebin.models import Item

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewItem:
    """An item record that has not been assigned an id yet."""

    stored_name: str
    display_name: str
    content_type: str
    size_bytes: int
    inline_content: str | None = None
    thumbnail_name: str | None = None


@dataclass(frozen=True)
class BlobNames:
    """The blob names one item record refers to."""

    item_id: int
    stored_name: str
    thumbnail_name: str | None = None


class ItemCatalog:
    """Catalog of item records backed by SQLAlchemy.

    Attributes:
        session_factory: Factory producing async sessions.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def insert(self, record: NewItem) -> int:
        """Store a record and return its newly assigned id.

        Raises:
            StorageFailure: If the insert failed.
        """
        item = Item(
            stored_name=record.stored_name,
            display_name=record.display_name,
            content_type=record.content_type,
            size_bytes=record.size_bytes,
            inline_content=record.inline_content,
            thumbnail_name=record.thumbnail_name,
        )
        try:
            async with session_scope(self.session_factory) as session:
                session.add(item)
                await session.flush()
                item_id = item.id
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to insert item: {exc}") from exc
        return item_id

    async def get_by_id(self, item_id: int) -> Item:
        """Look up one record.

        Raises:
            NotFound: If no item has this id.
            StorageFailure: If the query failed.
        """
        try:
            async with session_scope(self.session_factory) as session:
                item = await session.get(Item, item_id)
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to load item {item_id}: {exc}") from exc
        if item is None:
            raise NotFound(f"Item not found: {item_id}")
        return item

    async def list_page(self, page: int, page_size: int) -> tuple[list[Item], int]:
        """Return one page of records, newest first, plus the total count.

        Args:
            page: 1-indexed page number; values below 1 are treated as 1.
            page_size: Records per page.

        Returns:
            Tuple of (records, total_count). Pages past the end are empty.
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        page = max(page, 1)
        offset = (page - 1) * page_size

        query = (
            select(Item)
            .order_by(Item.created_at.desc(), Item.id.desc())
            .offset(offset)
            .limit(page_size)
        )
        try:
            async with session_scope(self.session_factory) as session:
                total = await session.scalar(select(func.count()).select_from(Item))
                result = await session.execute(query)
                items = list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to list items: {exc}") from exc
        return items, total or 0

    async def delete(self, item_id: int) -> bool:
        """Remove one record; a missing id is not an error.

        Returns:
            True if a record was removed.
        """
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(delete(Item).where(Item.id == item_id))
                removed = result.rowcount
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to delete item {item_id}: {exc}") from exc
        return bool(removed)

    async def delete_all(self, up_to_id: int | None = None) -> int:
        """Remove every record, or every record with ``id <= up_to_id``.

        Args:
            up_to_id: Highest id to remove. Records inserted after a snapshot
                have larger ids and survive a bounded clear.

        Returns:
            Number of records removed.
        """
        statement = delete(Item)
        if up_to_id is not None:
            statement = statement.where(Item.id <= up_to_id)
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(statement)
                removed = result.rowcount
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to clear catalog: {exc}") from exc
        logger.info(f"Catalog cleared ({removed} records)")
        return removed or 0

    async def snapshot_blob_names(self) -> list[BlobNames]:
        """Collect the blob names referenced by every record."""
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(
                    select(Item.id, Item.stored_name, Item.thumbnail_name).order_by(Item.id)
                )
                rows = result.all()
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to snapshot blob names: {exc}") from exc
        return [
            BlobNames(item_id=item_id, stored_name=stored, thumbnail_name=thumb)
            for item_id, stored, thumb in rows
        ]

    async def count_by_content_type(self) -> dict[str, int]:
        """Count records per content type."""
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(
                    select(Item.content_type, func.count())
                    .group_by(Item.content_type)
                    .order_by(Item.content_type)
                )
                rows = result.all()
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to count items: {exc}") from exc
        return {content_type: count for content_type, count in rows}
