"""
Pytest configuration and fixtures for pastebin tests.

Every test gets its own SQLite catalog file and temporary blob
directories, so tests never touch the configured database or uploads.
"""
import sys
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pastebin.api.dependencies import get_credential_store, get_item_service
from pastebin.auth.credentials import CredentialStore
from pastebin.auth.session import SESSION_COOKIE_NAME, create_session_token
from pastebin.catalog import ItemCatalog
from pastebin.database import create_engine_for, create_session_factory, init_db
from pastebin.main import app
from pastebin.services.items import ItemService
from pastebin.storage.blobs import BlobStore
from pastebin.storage.thumbnails import ThumbnailDeriver

TEST_PAGE_SIZE = 10
TEST_THUMBNAIL_SIZE = 150
TEST_MAX_UPLOAD_BYTES = 1024 * 1024


# ============================================
# Catalog and storage fixtures
# ============================================

@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File-backed SQLite engine under tmp_path with all tables created.

    Built like the production engine (pooled connections, WAL and
    busy_timeout), so concurrent sessions really overlap.
    """
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the test engine."""
    return create_session_factory(db_engine)


@pytest.fixture
def catalog(session_factory) -> ItemCatalog:
    return ItemCatalog(session_factory)


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
def thumbnail_dir(tmp_path) -> Path:
    return tmp_path / "thumbnails"


@pytest.fixture
def uploads(upload_dir) -> BlobStore:
    return BlobStore(str(upload_dir))


@pytest.fixture
def thumbnails(thumbnail_dir) -> BlobStore:
    return BlobStore(str(thumbnail_dir))


@pytest.fixture
def service(catalog, uploads, thumbnails) -> ItemService:
    """Fully wired item service over temp directories."""
    return ItemService(
        catalog=catalog,
        uploads=uploads,
        thumbnails=thumbnails,
        deriver=ThumbnailDeriver(size=TEST_THUMBNAIL_SIZE),
        page_size=TEST_PAGE_SIZE,
        thumbnail_prefix="thumb_",
        max_upload_bytes=TEST_MAX_UPLOAD_BYTES,
    )


@pytest.fixture
def credential_store(session_factory) -> CredentialStore:
    """Credential store with the cheapest bcrypt cost."""
    return CredentialStore(session_factory, rounds=4)


# ============================================
# API fixtures
# ============================================

@pytest_asyncio.fixture
async def test_client(service, credential_store) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client with services pointed at the test stores."""
    app.dependency_overrides[get_item_service] = lambda: service
    app.dependency_overrides[get_credential_store] = lambda: credential_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def auth_client(test_client) -> AsyncClient:
    """Client carrying a valid session cookie."""
    test_client.cookies.set(SESSION_COOKIE_NAME, create_session_token())
    return test_client


# ============================================
# Pytest Configuration
# ============================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "fast: Fast unit tests (no external services)"
    )
