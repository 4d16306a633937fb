"""Unit tests for FastAPI application.

Tests for pastebin/main.py - API endpoints and application setup.

Run with:
    pytest tests/unit/test_main.py -v
    pytest tests/unit/test_main.py -v -m fast
"""

from unittest.mock import AsyncMock

import pytest

from pastebin.errors import StorageFailure
from pastebin.main import is_writable_dir


@pytest.mark.fast
class TestRootEndpoint:
    """Tests for root endpoint."""

    @pytest.mark.asyncio
    async def test_root_returns_info(self, test_client):
        """Test root endpoint returns application info."""
        response = await test_client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["name"] == "Pastebin"
        assert "version" in data
        assert data["health"] == "/health"
        assert data["login"] == "/api/v1/auth/login"
        assert data["items"] == "/api/v1/items"


@pytest.mark.fast
class TestHealthEndpoint:
    """Tests for health endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_status(self, test_client):
        """Test health endpoint returns status."""
        response = await test_client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] in ("healthy", "degraded")
        assert "version" in data
        assert isinstance(data["database"], bool)
        assert set(data["storage"]) == {"uploads", "thumbnails"}


@pytest.mark.fast
class TestErrorHandling:
    """Tests for exception handlers."""

    @pytest.mark.asyncio
    async def test_not_found_error_format(self, auth_client):
        """Test service errors map to their status with an error body."""
        response = await auth_client.get("/api/v1/items/12345")
        assert response.status_code == 404
        assert response.json() == {"error": "Item not found: 12345", "detail": None}

    @pytest.mark.asyncio
    async def test_storage_failure_is_500(self, auth_client, service, monkeypatch):
        """Test storage failures surface as 500."""
        monkeypatch.setattr(
            service.catalog, "list_page", AsyncMock(side_effect=StorageFailure("db down"))
        )
        response = await auth_client.get("/api/v1/items")
        assert response.status_code == 500
        assert response.json()["error"] == "db down"

    @pytest.mark.asyncio
    async def test_unknown_route_format(self, test_client):
        """Test routing errors share the error body."""
        response = await test_client.get("/no-such-route")
        assert response.status_code == 404
        assert response.json() == {"error": "Not Found", "detail": None}


@pytest.mark.fast
class TestIsWritableDir:
    """Tests for is_writable_dir function."""

    def test_existing_directory(self, tmp_path):
        """Test a temp directory is writable."""
        assert is_writable_dir(str(tmp_path))

    def test_missing_directory(self, tmp_path):
        """Test a missing directory is not writable."""
        assert not is_writable_dir(str(tmp_path / "missing"))

    def test_file_is_not_a_directory(self, tmp_path):
        """Test a regular file does not count."""
        path = tmp_path / "file.txt"
        path.write_text("x")
        assert not is_writable_dir(str(path))
