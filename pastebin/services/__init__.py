"""Application services."""

from pastebin.services.items import DeleteAllResult, Download, ItemPage, ItemService, ItemStats

__all__ = ["DeleteAllResult", "Download", "ItemPage", "ItemService", "ItemStats"]
