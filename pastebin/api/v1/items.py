"""Item API endpoints.

Provides REST API for uploading, listing, viewing, downloading and
deleting items. Every endpoint requires a session cookie.

Endpoints:
    POST /api/v1/items - Upload a file or a text paste (multipart form)
    GET /api/v1/items - List items, newest first
    GET /api/v1/items/{id} - Get item metadata (with inline text)
    GET /api/v1/items/{id}/download - Download the payload as an attachment
    GET /api/v1/items/{id}/thumbnail - Get the image thumbnail
    DELETE /api/v1/items/{id} - Delete one item
    DELETE /api/v1/items - Delete every item

Tests:
    - tests/unit/test_api/test_items_api.py
"""

from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from pydantic import BaseModel

from pastebin.api.dependencies import get_item_service
from pastebin.auth.dependencies import require_session
from pastebin.errors import InvalidInput
from pastebin.models import Item
from pastebin.services.items import ItemService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/items",
    tags=["items"],
    dependencies=[Depends(require_session)],
)


# Request/Response Models


class ItemResponse(BaseModel):
    """Response containing item metadata."""

    id: int
    display_name: str
    content_type: str
    size_bytes: int
    created_at: str | None = None
    has_thumbnail: bool = False
    inline_content: str | None = None


class ItemPageResponse(BaseModel):
    """One page of the item listing."""

    items: list[ItemResponse]
    current_page: int
    total_pages: int
    total: int
    has_next_page: bool
    has_prev_page: bool
    next_page: int
    prev_page: int


class CreatedResponse(BaseModel):
    """Response after ingesting an item."""

    id: int


class DeleteResponse(BaseModel):
    """Response after deleting one item."""

    success: bool
    failed_blobs: list[str] = []


class DeleteAllResponse(BaseModel):
    """Response after deleting every item."""

    success: bool
    deleted: int
    failed_blobs: list[str]


# Helper Functions


def item_to_response(item: Item, include_content: bool = False) -> ItemResponse:
    """Convert Item model to response.

    Args:
        item: Item model
        include_content: Whether to include the inline text

    Returns:
        ItemResponse
    """
    return ItemResponse(
        id=item.id,
        display_name=item.display_name,
        content_type=item.content_type,
        size_bytes=item.size_bytes,
        created_at=item.created_at.isoformat() if item.created_at else None,
        has_thumbnail=item.has_thumbnail,
        inline_content=item.inline_content if include_content else None,
    )


def content_disposition(filename: str) -> str:
    """Build an attachment header that survives non-ASCII names."""
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


async def read_upload(file: UploadFile, limit: int | None) -> bytes:
    """Read an uploaded file, refusing to buffer more than ``limit`` bytes.

    A declared size above the limit is rejected before anything is read;
    otherwise at most ``limit + 1`` bytes are read to detect an overrun.

    Raises:
        InvalidInput: 413 when the upload exceeds ``limit``.
    """
    if limit is None:
        return await file.read()
    if file.size is not None and file.size > limit:
        raise InvalidInput(
            f"Upload of {file.size} bytes exceeds the {limit} byte limit",
            status_code=413,
        )
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise InvalidInput(f"Upload exceeds the {limit} byte limit", status_code=413)
    return data


# Endpoints


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
async def upload_item(
    file: UploadFile | None = File(None, description="File to upload"),
    text: str | None = Form(None, description="Text to paste when no file is sent"),
    service: ItemService = Depends(get_item_service),
) -> CreatedResponse:
    """Ingest an uploaded file, or a text paste when no file is present.

    Raises:
        InvalidInput: If neither a file nor text was provided.
    """
    if file is not None and file.filename:
        data = await read_upload(file, service.max_upload_bytes)
        item_id = await service.ingest_file(data, file.filename, file.content_type)
    elif text:
        item_id = await service.ingest_text(text)
    else:
        raise InvalidInput("No file or text provided")

    return CreatedResponse(id=item_id)


@router.get("", response_model=ItemPageResponse)
async def list_items(
    page: int = Query(1, description="Page number (values below 1 mean 1)"),
    service: ItemService = Depends(get_item_service),
) -> ItemPageResponse:
    """List items with pagination, newest first."""
    result = await service.list_page(page)
    return ItemPageResponse(
        items=[item_to_response(item) for item in result.items],
        current_page=result.current_page,
        total_pages=result.total_pages,
        total=result.total,
        has_next_page=result.has_next_page,
        has_prev_page=result.has_prev_page,
        next_page=result.next_page,
        prev_page=result.prev_page,
    )


@router.get("/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: int,
    service: ItemService = Depends(get_item_service),
) -> ItemResponse:
    """Get one item, including its inline text."""
    item = await service.get_item(item_id)
    return item_to_response(item, include_content=True)


@router.get("/{item_id}/download")
async def download_item(
    item_id: int,
    service: ItemService = Depends(get_item_service),
) -> Response:
    """Download an item's payload under its original name."""
    download = await service.open_download(item_id)
    return Response(
        content=download.data,
        media_type=download.content_type,
        headers={"Content-Disposition": content_disposition(download.display_name)},
    )


@router.get("/{item_id}/thumbnail")
async def get_thumbnail(
    item_id: int,
    service: ItemService = Depends(get_item_service),
) -> Response:
    """Get an image item's thumbnail."""
    thumbnail = await service.get_thumbnail(item_id)
    return Response(content=thumbnail.data, media_type=thumbnail.content_type)


@router.delete("/{item_id}", response_model=DeleteResponse)
async def delete_item(
    item_id: int,
    service: ItemService = Depends(get_item_service),
) -> DeleteResponse:
    """Delete one item and its blobs."""
    failed = await service.delete_item(item_id)
    return DeleteResponse(success=True, failed_blobs=failed)


@router.delete("", response_model=DeleteAllResponse)
async def delete_all_items(
    service: ItemService = Depends(get_item_service),
) -> DeleteAllResponse:
    """Delete every item and its blobs."""
    result = await service.delete_all_items()
    return DeleteAllResponse(
        success=True,
        deleted=result.deleted,
        failed_blobs=result.failed_blobs,
    )
