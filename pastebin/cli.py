"""
Pastebin admin console

Maintenance commands that work directly on the configured database and
blob directories, no running server needed.

Usage:
    pastebin-admin set-password   - Replace the shared password
    pastebin-admin stats          - Show item counts by content type
    pastebin-admin clear-all      - Delete every item and its blobs
    pastebin-admin serve          - Start the API server
"""
import asyncio
import sys

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pastebin import __version__
from pastebin.errors import PastebinError

# Load environment variables
load_dotenv()

console = Console()


async def _with_database(action):
    """Run ``action(session_factory)`` against an initialized database."""
    from pastebin.database import close_db, get_session_factory, init_db

    await init_db()
    try:
        return await action(get_session_factory())
    finally:
        await close_db()


def _run(action):
    try:
        return asyncio.run(_with_database(action))
    except PastebinError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="Pastebin")
def main():
    """Pastebin admin console."""


@main.command("set-password")
@click.password_option("--password", prompt="Enter new password", help="New shared password")
def set_password(password: str):
    """Replace the shared password."""
    from pastebin.auth.credentials import CredentialStore

    if not password.strip():
        console.print("[red]✗ Password cannot be empty![/red]")
        sys.exit(1)

    async def action(session_factory):
        await CredentialStore(session_factory).set_password(password)

    _run(action)
    console.print("[green]✓ Password updated successfully![/green]")


@main.command()
def stats():
    """Show item counts by content type."""
    from pastebin.config import get_settings
    from pastebin.services.items import ItemService

    async def action(session_factory):
        return await ItemService.from_settings(get_settings(), session_factory).stats()

    result = _run(action)

    console.print(f"Total items: [bold]{result.total}[/bold]")
    table = Table(title="File types", show_header=True, header_style="bold cyan")
    table.add_column("Content type")
    table.add_column("Count", justify="right")
    for content_type, count in result.by_content_type.items():
        table.add_row(content_type, str(count))
    console.print(table)
    console.print(
        f"[dim]Blobs on disk: {result.upload_blobs} uploads, "
        f"{result.thumbnail_blobs} thumbnails[/dim]"
    )


@main.command("clear-all")
@click.confirmation_option(prompt="Are you sure you want to delete ALL items?")
def clear_all():
    """Delete every item, its blob and its thumbnail."""
    from pastebin.config import get_settings
    from pastebin.services.items import ItemService

    async def action(session_factory):
        service = ItemService.from_settings(get_settings(), session_factory)
        return await service.delete_all_items()

    result = _run(action)

    console.print(f"[green]✓ Deleted {result.deleted} items[/green]")
    if result.failed_blobs:
        console.print(f"[yellow]⚠ {len(result.failed_blobs)} blobs could not be removed:[/yellow]")
        for name in result.failed_blobs:
            console.print(f"  [dim]{name}[/dim]")


@main.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind")
@click.option("--port", default=8000, help="Port to run server on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool):
    """Start the API server."""
    import uvicorn

    console.print(Panel(
        f"[bold cyan]Pastebin v{__version__}[/bold cyan]\n\n"
        f"[cyan]http://localhost:{port}[/cyan]\n\n"
        "[dim]Press Ctrl+C to stop.[/dim]",
        border_style="cyan"
    ))
    uvicorn.run("pastebin.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
