"""Unit tests for the admin console.

Tests for pastebin/cli.py - set-password, stats and clear-all.

Run with:
    pytest tests/unit/test_cli.py -v
"""

import pytest
from click.testing import CliRunner

from pastebin import __version__, cli
from pastebin.auth.credentials import CredentialStore
from pastebin.config import get_settings
from pastebin.database import create_engine_for, create_session_factory, init_db
from pastebin.services.items import ItemService


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_database(tmp_path, monkeypatch):
    """Point the console at a file database and blob dirs under tmp_path."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"

    async def with_test_database(action):
        engine = create_engine_for(url)
        await init_db(engine)
        try:
            return await action(create_session_factory(engine))
        finally:
            await engine.dispose()

    monkeypatch.setattr(cli, "_with_database", with_test_database)
    settings = get_settings()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "THUMBNAIL_DIR", str(tmp_path / "thumbnails"))
    return tmp_path


def _ingest(*texts):
    async def action(session_factory):
        service = ItemService.from_settings(get_settings(), session_factory)
        return [await service.ingest_text(text) for text in texts]

    return cli._run(action)


@pytest.mark.fast
class TestConsole:
    """Tests for the click command group."""

    def test_version(self, runner):
        """Test --version prints the package version."""
        result = runner.invoke(cli.main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        """Test --help lists every command."""
        result = runner.invoke(cli.main, ["--help"])
        assert result.exit_code == 0
        for command in ("set-password", "stats", "clear-all", "serve"):
            assert command in result.output


@pytest.mark.fast
class TestSetPasswordCommand:
    """Tests for pastebin-admin set-password."""

    def test_sets_password(self, runner, cli_database):
        """Test the password is stored."""
        result = runner.invoke(cli.main, ["set-password", "--password", "s3cret"])
        assert result.exit_code == 0
        assert "Password updated" in result.output

        async def verify(session_factory):
            return await CredentialStore(session_factory).verify("s3cret")

        assert cli._run(verify) is True

    def test_blank_password(self, runner, cli_database):
        """Test a blank password is refused."""
        result = runner.invoke(cli.main, ["set-password", "--password", "  "])
        assert result.exit_code == 1
        assert "cannot be empty" in result.output


@pytest.mark.fast
class TestStatsCommand:
    """Tests for pastebin-admin stats."""

    def test_empty(self, runner, cli_database):
        """Test stats on an empty install."""
        result = runner.invoke(cli.main, ["stats"])
        assert result.exit_code == 0
        assert "Total items: 0" in result.output

    def test_counts(self, runner, cli_database):
        """Test stats counts items per content type."""
        _ingest("one", "two")
        result = runner.invoke(cli.main, ["stats"])
        assert result.exit_code == 0
        assert "Total items: 2" in result.output
        assert "text/plain" in result.output


@pytest.mark.fast
class TestClearAllCommand:
    """Tests for pastebin-admin clear-all."""

    def test_clears_items_and_blobs(self, runner, cli_database):
        """Test clear-all removes records and blobs."""
        _ingest("one", "two", "three")

        result = runner.invoke(cli.main, ["clear-all", "--yes"])

        assert result.exit_code == 0
        assert "Deleted 3 items" in result.output
        assert list((cli_database / "uploads").iterdir()) == []

    def test_requires_confirmation(self, runner, cli_database):
        """Test declining the prompt deletes nothing."""
        _ingest("keep me")
        result = runner.invoke(cli.main, ["clear-all"], input="n\n")
        assert result.exit_code != 0

        stats = runner.invoke(cli.main, ["stats"])
        assert "Total items: 1" in stats.output
