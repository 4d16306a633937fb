"""SQLAlchemy models for the pastebin catalog.

This module defines the item metadata table and the single-row credential
table.

Examples:
    >>> from pastebin.models import Item
    >>> item = Item(
    ...     stored_name="3f2a9c.png",
    ...     display_name="cat.png",
    ...     content_type="image/png",
    ...     size_bytes=2048,
    ... )
    >>> item.is_image
    True

Tests:
    - tests/unit/test_models.py::TestItem
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

TEXT_CONTENT_PREFIX = "text/"
IMAGE_CONTENT_PREFIX = "image/"


def utc_now() -> datetime:
    """Current time, timezone-aware and with microseconds."""
    return datetime.now(timezone.utc)


def is_text_type(content_type: str | None) -> bool:
    """Check whether a MIME type is classified as text."""
    return bool(content_type) and content_type.lower().startswith(TEXT_CONTENT_PREFIX)


def is_image_type(content_type: str | None) -> bool:
    """Check whether a MIME type is classified as an image."""
    return bool(content_type) and content_type.lower().startswith(IMAGE_CONTENT_PREFIX)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


class Item(Base):
    """One stored paste or file.

    Attributes:
        id: Monotonic identifier, never reused
        stored_name: Generated blob name in the upload directory
        display_name: Original file name shown to humans
        content_type: MIME type of the payload
        size_bytes: Payload length at ingestion
        inline_content: Text payload for text items (None otherwise)
        thumbnail_name: Thumbnail blob name for image items (optional)
        created_at: Insertion timestamp
    """

    __tablename__ = "items"
    # AUTOINCREMENT keeps SQLite from handing out ids of deleted rows again.
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    stored_name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    size_bytes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    inline_content: Mapped[str | None] = mapped_column(Text, default=None)
    thumbnail_name: Mapped[str | None] = mapped_column(String(255), default=None)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Item(id={self.id}, stored_name='{self.stored_name}')>"

    @property
    def is_text(self) -> bool:
        """Check if the item is classified as text."""
        return is_text_type(self.content_type)

    @property
    def is_image(self) -> bool:
        """Check if the item is classified as an image."""
        return is_image_type(self.content_type)

    @property
    def has_thumbnail(self) -> bool:
        """Check if a thumbnail was derived for the item."""
        return bool(self.thumbnail_name)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses.

        Returns:
            Dictionary representation.
        """
        return {
            "id": self.id,
            "stored_name": self.stored_name,
            "display_name": self.display_name,
            "content_type": self.content_type,
            "size_bytes": self.size_bytes,
            "inline_content": self.inline_content,
            "thumbnail_name": self.thumbnail_name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class Credential(Base):
    """The shared access password, stored as a single bcrypt hash row."""

    __tablename__ = "credentials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Credential(id={self.id})>"
