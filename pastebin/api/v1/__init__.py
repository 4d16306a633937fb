"""API v1 module.

Contains all v1 API routes.
"""

from fastapi import APIRouter

from pastebin.api.v1.auth import admin_router
from pastebin.api.v1.auth import router as auth_router
from pastebin.api.v1.items import router as items_router

router = APIRouter(prefix="/api/v1")
router.include_router(auth_router)
router.include_router(admin_router)
router.include_router(items_router)

__all__ = ["router"]
