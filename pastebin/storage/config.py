"""Storage configuration model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class StorageConfig(BaseModel):
    """Configuration for blob storage.

    Attributes:
        upload_dir: Directory for primary blobs.
        thumbnail_dir: Directory for derived thumbnails.
        thumbnail_size: Edge length of the square thumbnail.
        thumbnail_prefix: Prefix joining a stored name to its thumbnail name.
    """

    model_config = ConfigDict(frozen=True)

    upload_dir: str = Field(default="./uploads", description="Primary blob directory")
    thumbnail_dir: str = Field(default="./thumbnails", description="Thumbnail blob directory")
    thumbnail_size: int = Field(default=150, ge=16, le=1024, description="Thumbnail edge length")
    thumbnail_prefix: str = Field(default="thumb_", min_length=1, description="Thumbnail name prefix")
