"""Entry maintenance commands: ``list``, ``stats``, ``purge`` and ``clear``.

All of them operate on the resolved cache directory through
:class:`~respcache.cache.CacheStore`. Expiry is judged against the resolved
``duration_seconds``, so ``--duration`` changes what counts as expired.
"""

from __future__ import annotations

from typing import Optional

import typer

from respcache.cache import CacheStore
from respcache.commands._common import resolve_from_context
from respcache.output import error, format_response, info, print_table, success


def list_command(ctx: typer.Context) -> None:
    """List cache entries with their size and age."""
    config = resolve_from_context(ctx)
    store = CacheStore(config.directory)
    entries = store.entries(config.duration_seconds)
    if not entries:
        info(f"No cache entries in {store.directory}")
        return

    rows = [
        [
            e.key,
            str(e.size),
            f"{e.age_seconds:.0f}s",
            "yes" if e.expired else "no",
        ]
        for e in entries
    ]
    print_table(["key", "bytes", "age", "expired"], rows, title=str(store.directory))


def stats_command(ctx: typer.Context) -> None:
    """Show entry count, expired count and total size."""
    config = resolve_from_context(ctx)
    stats = CacheStore(config.directory).stats(config.duration_seconds)
    format_response(stats.model_dump(mode="json"))


def purge_command(ctx: typer.Context) -> None:
    """Delete entries older than the freshness window."""
    config = resolve_from_context(ctx)
    removed = CacheStore(config.directory).purge_expired(config.duration_seconds)
    success(f"Purged {removed} expired entr{'y' if removed == 1 else 'ies'}.")


def clear_command(
    ctx: typer.Context,
    key: Optional[str] = typer.Argument(
        None, help="Key of the entry to delete. Omit to delete every entry."
    ),
) -> None:
    """Delete one entry, or all entries after confirmation.

    Example::

        respcache clear 0cc175b9c0f1b6a831c399e269772661
        respcache --force clear
    """
    config = resolve_from_context(ctx)
    store = CacheStore(config.directory)

    if key is not None:
        if not store.remove(key):
            error(f"No cache entry with key {key}")
            raise typer.Exit(code=1)
        success(f"Deleted {key}.")
        return

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm(f"Delete every entry in {store.directory}?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    removed = store.wipe()
    success(f"Deleted {removed} entr{'y' if removed == 1 else 'ies'}.")
