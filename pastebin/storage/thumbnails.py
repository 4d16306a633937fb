"""Thumbnail derivation with Pillow.

Thumbnails are square "cover" crops: the source is scaled until it fills
the box, then the overflowing dimension is cropped around the center. The
aspect ratio is never distorted and the box is never letterboxed.

Examples:
    >>> from pastebin.storage.thumbnails import ThumbnailDeriver
    >>> deriver = ThumbnailDeriver(size=150)
    >>> thumb = deriver.derive(png_bytes)
    >>> thumb = await deriver.derive_async(png_bytes)  # off the event loop

Tests:
    - tests/unit/test_storage/test_thumbnails.py
"""

from __future__ import annotations

import asyncio
import io
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from pastebin.errors import UnsupportedOrCorruptImage

logger = logging.getLogger(__name__)

# Formats written back as-is; anything else becomes PNG.
PRESERVED_FORMATS = {"JPEG", "PNG", "GIF", "WEBP", "BMP", "TIFF"}
FALLBACK_FORMAT = "PNG"
WORKING_MODES = {"RGB", "RGBA", "L", "LA"}
UNKNOWN_MIME_TYPE = "application/octet-stream"

DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    ValueError,
    SyntaxError,
)


class ThumbnailDeriver:
    """Produces fixed-size cover-cropped previews.

    Attributes:
        size: Edge length of the square thumbnail in pixels.
    """

    def __init__(self, size: int = 150) -> None:
        if size < 1:
            raise ValueError("Thumbnail size must be positive")
        self.size = size

    def derive(self, data: bytes) -> bytes:
        """Derive a thumbnail from image bytes.

        Args:
            data: Encoded source image.

        Returns:
            Encoded thumbnail, in the source format when Pillow can write it.

        Raises:
            UnsupportedOrCorruptImage: If ``data`` cannot be decoded.
        """
        try:
            with Image.open(io.BytesIO(data)) as source:
                source.load()
                source_format = source.format
                image = ImageOps.exif_transpose(source)
                if image.mode not in WORKING_MODES:
                    image = image.convert(_working_mode(image))
                thumb = ImageOps.fit(
                    image,
                    (self.size, self.size),
                    method=Image.Resampling.LANCZOS,
                    centering=(0.5, 0.5),
                )
        except DECODE_ERRORS as exc:
            raise UnsupportedOrCorruptImage(f"Cannot decode image: {exc}") from exc

        output_format = source_format if source_format in PRESERVED_FORMATS else FALLBACK_FORMAT
        try:
            return self._encode(thumb, output_format)
        except (OSError, ValueError, KeyError) as exc:
            if output_format == FALLBACK_FORMAT:
                raise UnsupportedOrCorruptImage(f"Cannot encode thumbnail: {exc}") from exc
            logger.debug(f"Cannot write thumbnail as {output_format} ({exc}), using PNG")
            return self._encode(thumb, FALLBACK_FORMAT)

    async def derive_async(self, data: bytes) -> bytes:
        """Run :meth:`derive` in a worker thread.

        Decoding is CPU-bound, so it runs off the event loop and other
        requests keep progressing while a large image is processed.
        """
        return await asyncio.to_thread(self.derive, data)

    @staticmethod
    def _encode(image: Image.Image, image_format: str) -> bytes:
        if image_format == "JPEG" and image.mode != "RGB":
            image = image.convert("RGB")
        buffer = io.BytesIO()
        image.save(buffer, format=image_format)
        return buffer.getvalue()


def _working_mode(image: Image.Image) -> str:
    """Pick RGBA only when the source carries transparency."""
    if image.mode in ("PA", "RGBa", "La") or "transparency" in image.info:
        return "RGBA"
    return "RGB"


def thumbnail_mime_type(data: bytes) -> str:
    """MIME type of an encoded thumbnail, read from its header.

    Thumbnails of sources Pillow cannot write are PNG, so the source item's
    content type does not describe them.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            return Image.MIME.get(image.format, UNKNOWN_MIME_TYPE)
    except DECODE_ERRORS:
        return UNKNOWN_MIME_TYPE
