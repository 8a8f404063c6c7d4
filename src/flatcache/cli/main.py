"""
CLI for flatcache.

Commands:
    flatcache get KEY - Print a cached value
    flatcache set KEY [VALUE] - Store a value (or --file contents)
    flatcache has KEY - Check whether a key is cached
    flatcache delete KEY... - Delete keys
    flatcache clear - Remove every entry
    flatcache purge - Remove expired entries
    flatcache list - Show entries on disk
    flatcache config - Show current configuration
    flatcache version - Print version
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from flatcache import __version__
from flatcache.cache.file_cache import FileCache
from flatcache.config import Settings, clear_settings_cache, get_settings
from flatcache.exceptions import ConfigurationError
from flatcache.logging import setup_logging

app = typer.Typer(
    name="flatcache",
    help="flatcache - flat-directory file cache with gzip and mtime expiry",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)


def _get_settings_safe() -> Settings | None:
    """Get settings, returning None if configuration is invalid."""
    try:
        clear_settings_cache()
        return get_settings()
    except ValidationError:
        return None


def _open_cache(purge_on_init: bool = True) -> FileCache:
    """Build the cache from settings, exiting with an error if that fails."""
    settings = _get_settings_safe()
    if settings is None:
        error_console.print(
            "[red]Error:[/red] Configuration is invalid. "
            "Run 'flatcache config' to see what's wrong."
        )
        raise typer.Exit(1)

    setup_logging(settings.LOG_LEVEL)
    try:
        return FileCache(settings, purge_on_init=purge_on_init)
    except ConfigurationError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def get(
    key: Annotated[str, typer.Argument(help="Cache key")],
    default: Annotated[
        Optional[str],
        typer.Option("--default", "-d", help="Value to print on a miss"),
    ] = None,
) -> None:
    """Print the cached value for KEY to stdout."""
    cache = _open_cache()
    value = cache.get(key)
    if value is None:
        if default is None:
            error_console.print(f"[yellow]Miss:[/yellow] {escape(key)}")
            raise typer.Exit(1)
        value = default.encode("utf-8")
    typer.echo(value, nl=False)


@app.command("set")
def set_(
    key: Annotated[str, typer.Argument(help="Cache key")],
    value: Annotated[Optional[str], typer.Argument(help="Value to store")] = None,
    file: Annotated[
        Optional[Path],
        typer.Option("--file", "-f", help="Store the contents of this file", exists=True, dir_okay=False),
    ] = None,
) -> None:
    """Store VALUE (or the contents of --file) under KEY."""
    if (value is None) == (file is None):
        error_console.print("[red]Error:[/red] Give exactly one of VALUE or --file.")
        raise typer.Exit(1)

    data = file.read_bytes() if file is not None else value
    cache = _open_cache()
    if not cache.set(key, data):
        error_console.print(f"[red]Error:[/red] Could not store {escape(key)}")
        raise typer.Exit(1)
    console.print(f"Stored [cyan]{escape(key)}[/cyan] -> {escape(str(cache.path_for(key)))}")


@app.command()
def has(key: Annotated[str, typer.Argument(help="Cache key")]) -> None:
    """Check whether KEY is cached. Exits 1 if it is not."""
    cache = _open_cache()
    if cache.has(key):
        console.print("yes")
        return
    console.print("no")
    raise typer.Exit(1)


@app.command()
def delete(keys: Annotated[List[str], typer.Argument(help="Cache keys")]) -> None:
    """Delete one or more keys."""
    cache = _open_cache()
    failed = [key for key in keys if not cache.delete(key)]
    for key in failed:
        error_console.print(f"[red]Error:[/red] Could not delete {escape(key)}")
    if failed:
        raise typer.Exit(1)
    console.print(f"Deleted {len(keys)} key(s)")


@app.command()
def clear() -> None:
    """Remove every cache entry (the placeholder file is kept)."""
    cache = _open_cache()
    if not cache.clear():
        error_console.print("[red]Error:[/red] Some entries could not be removed.")
        raise typer.Exit(1)
    console.print("Cache cleared")


@app.command()
def purge() -> None:
    """Remove entries older than CACHE_EXPIRE seconds."""
    cache = _open_cache(purge_on_init=False)
    if cache.settings.expire_seconds == 0:
        console.print("[yellow]Expiry is disabled (CACHE_EXPIRE=0); nothing purged.[/yellow]")
        return
    removed = cache.purge()
    console.print(f"Purged {removed} entr{'y' if removed == 1 else 'ies'}")


@app.command("list")
def list_entries() -> None:
    """Show entries currently on disk."""
    cache = _open_cache()
    expire = cache.settings.expire_seconds
    now = time.time()

    table = Table(title=f"Cache: {escape(str(cache.cache_dir))}", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Age", justify="right")
    table.add_column("Compressed")
    table.add_column("Expired")

    for entry in cache.entries():
        table.add_row(
            escape(entry.name),
            str(entry.size),
            f"{entry.age(now):.0f}s",
            "yes" if entry.compressed else "no",
            "[red]yes[/red]" if entry.is_expired(expire, now) else "no",
        )

    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration."""
    settings = _get_settings_safe()

    if settings is None:
        error_console.print("[red]Configuration is invalid.[/red]")
        error_console.print()
        error_console.print("Check the FLATCACHE_* environment variables, e.g.:")
        error_console.print("  - FLATCACHE_CACHE_EXPIRE (seconds, >= 0)")
        error_console.print("  - FLATCACHE_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
        raise typer.Exit(1)

    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.display().items():
        table.add_row(key, escape(str(value)))

    console.print(table)


@app.command()
def version() -> None:
    """Print the version number."""
    console.print(f"flatcache version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
