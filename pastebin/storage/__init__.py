"""Blob storage package for pastebin.

Provides the primary and thumbnail blob stores, blob naming, and
thumbnail derivation.

Examples:
    >>> from pastebin.storage import BlobStore, StorageConfig, ThumbnailDeriver
    >>> config = StorageConfig()
    >>> uploads = BlobStore(config.upload_dir)
    >>> stored_name = await uploads.put(data, "photo.png")
"""

from pastebin.storage.blobs import BlobStore
from pastebin.storage.config import StorageConfig
from pastebin.storage.naming import (
    generate_stored_name,
    sanitize_display_name,
    thumbnail_name_for,
)
from pastebin.storage.thumbnails import ThumbnailDeriver

__all__ = [
    "BlobStore",
    "StorageConfig",
    "ThumbnailDeriver",
    "generate_stored_name",
    "sanitize_display_name",
    "thumbnail_name_for",
]
