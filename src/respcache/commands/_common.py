"""Helpers shared by the CLI command modules."""

from __future__ import annotations

from typing import Any

import typer

from respcache.exceptions import ConfigError
from respcache.models import CacheConfig
from respcache.output import error


def resolve_from_context(ctx: typer.Context) -> CacheConfig:
    """Resolve the cache config using the root ``--dir``/``--duration`` overrides.

    Raises:
        typer.Exit: With the error's exit code if the config is invalid.
    """
    from respcache.config import resolve_config

    obj: dict[str, Any] = ctx.obj or {}
    try:
        return resolve_config(
            cli_directory=obj.get("directory"),
            cli_duration=obj.get("duration"),
        )
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def parse_pairs(pairs: list[str], option: str) -> dict[str, str]:
    """Turn ``["a=1", "b=2"]`` into ``{"a": "1", "b": "2"}``.

    Raises:
        typer.Exit: With code 2 if an item has no ``=``.
    """
    result: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            error(f"Expected NAME=VALUE for {option}, got: {pair}")
            raise typer.Exit(code=2)
        result[name] = value
    return result
