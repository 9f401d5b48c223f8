# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI application root.

Commands talk to the store configured through ``DYNACACHE_*`` settings.
The default ``memory`` store lives only as long as one command, so the
CLI is mostly useful against ``redis`` or ``dynamodb``.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Annotated

import typer

from dynacache.cache.engine import DistributedCache
from dynacache.cache.options import CacheEntryOptions
from dynacache.core.exceptions import DynacacheError

app = typer.Typer(
    name="dynacache",
    help="Distributed cache with sliding expiration",
    no_args_is_help=True,
)


@app.callback()
def main(
    log_level: Annotated[
        str | None, typer.Option("--log-level", help="Override DYNACACHE_LOG_LEVEL")
    ] = None,
) -> None:
    from dynacache.core.config import get_settings
    from dynacache.core.logging import setup_logging

    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.log_format)


async def _open_cache() -> DistributedCache:
    from dynacache.cache.factory import create_cache

    try:
        return await create_cache()
    except DynacacheError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from None


@app.command()
def get(
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Print the cached value; exit 1 if the key is missing or expired."""
    asyncio.run(_async_get(key))


async def _async_get(key: str) -> None:
    cache = await _open_cache()
    try:
        value = await cache.get(key)
    except DynacacheError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from None
    finally:
        await cache.close()

    if value is None:
        typer.echo(f"Key not found: {key}", err=True)
        raise typer.Exit(1)
    typer.echo(value)


@app.command(name="set")
def set_(
    key: Annotated[str, typer.Argument(help="Cache key")],
    value: Annotated[str, typer.Argument(help="Value to store (UTF-8)")],
    sliding: Annotated[
        int | None,
        typer.Option("--sliding", "-s", help="Sliding expiration in seconds"),
    ] = None,
    ttl: Annotated[
        int | None,
        typer.Option("--ttl", "-t", help="Absolute expiration, seconds from now"),
    ] = None,
    expires_at: Annotated[
        datetime | None,
        typer.Option("--expires-at", help="Absolute expiration instant (ISO 8601, UTC)"),
    ] = None,
) -> None:
    """Store a value under a key."""
    asyncio.run(_async_set(key, value, sliding, ttl, expires_at))


async def _async_set(
    key: str,
    value: str,
    sliding: int | None,
    ttl: int | None,
    expires_at: datetime | None,
) -> None:
    try:
        options = CacheEntryOptions(
            sliding_expiration=timedelta(seconds=sliding) if sliding is not None else None,
            absolute_expiration_relative_to_now=(
                timedelta(seconds=ttl) if ttl is not None else None
            ),
            absolute_expiration=expires_at,
        )
    except ValueError as exc:
        typer.echo(f"Invalid expiration: {exc}", err=True)
        raise typer.Exit(2) from None

    cache = await _open_cache()
    try:
        await cache.set_string(key, value, options)
    except DynacacheError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from None
    finally:
        await cache.close()
    typer.echo(f"Stored {key}")


@app.command()
def refresh(
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Extend a sliding entry by its span (no-op when not applicable)."""
    asyncio.run(_async_refresh(key))


async def _async_refresh(key: str) -> None:
    cache = await _open_cache()
    try:
        await cache.refresh(key)
    except DynacacheError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from None
    finally:
        await cache.close()
    typer.echo(f"Refreshed {key}")


@app.command()
def remove(
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Delete a key."""
    asyncio.run(_async_remove(key))


async def _async_remove(key: str) -> None:
    cache = await _open_cache()
    try:
        await cache.remove(key)
    except DynacacheError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(2) from None
    finally:
        await cache.close()
    typer.echo(f"Removed {key}")


@app.command()
def inspect(
    key: Annotated[str, typer.Argument(help="Cache key")],
) -> None:
    """Show the raw stored entry and its remaining lifetime."""
    asyncio.run(_async_inspect(key))


async def _async_inspect(key: str) -> None:
    from rich.console import Console
    from rich.table import Table

    from dynacache.cache.entry import CacheEntry

    if not key.strip():
        typer.echo("Error: key must be a non-blank string", err=True)
        raise typer.Exit(2)

    cache = await _open_cache()
    try:
        item = await cache.store.get_item(
            cache.table_name, cache.attributes.key_item(key)
        )
    finally:
        await cache.close()

    if item is None:
        typer.echo(f"Key not found: {key}", err=True)
        raise typer.Exit(1)

    entry = CacheEntry.from_item(item, cache.attributes)
    now = cache.clock.unix_seconds()

    console = Console()
    table = Table(title=f"Entry {key}")
    table.add_column("Field", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Size (bytes)", str(len(entry.value)))
    table.add_row("TTL", _format_timestamp(entry.ttl))
    table.add_row("Remaining", f"{entry.remaining(now)}s")
    table.add_row(
        "Sliding span", f"{entry.sliding_span}s" if entry.sliding_span is not None else "-"
    )
    table.add_row(
        "Absolute ceiling",
        _format_timestamp(entry.absolute_timestamp)
        if entry.absolute_timestamp is not None
        else "-",
    )
    table.add_row(
        "Status",
        "[red]EXPIRED[/red]" if entry.remaining(now) < 0 else "[green]LIVE[/green]",
    )
    console.print(table)


def _format_timestamp(ts: int) -> str:
    return f"{datetime.fromtimestamp(ts, UTC).isoformat()} ({ts})"


@app.command()
def version() -> None:
    """Show the dynacache version."""
    from dynacache import __version__

    typer.echo(f"dynacache {__version__}")
