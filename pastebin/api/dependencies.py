"""Service providers for route dependencies.

Tests override these with ``app.dependency_overrides`` to point the API
at temporary directories and an in-memory catalog.
"""

from __future__ import annotations

from pastebin.auth.credentials import CredentialStore
from pastebin.config import get_settings
from pastebin.database import get_session_factory
from pastebin.services.items import ItemService


def get_item_service() -> ItemService:
    """Provide the item service bound to the configured stores."""
    return ItemService.from_settings(get_settings(), get_session_factory())


def get_credential_store() -> CredentialStore:
    """Provide the shared-password credential store."""
    return CredentialStore(get_session_factory())
