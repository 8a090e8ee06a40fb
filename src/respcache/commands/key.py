"""``respcache key`` -- show which entry a request maps to.

Useful when debugging why two requests share (or do not share) a cache
file. Nothing is read or written; the cache directory is not created.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from respcache.cache.keys import collect_params, derive_identity, make_keys, serialize_params
from respcache.commands._common import parse_pairs, resolve_from_context
from respcache.output import format_response


def key_command(
    ctx: typer.Context,
    identity: str = typer.Argument(help="Controller name or path to its source file."),
    query: Optional[list[str]] = typer.Option(
        None, "--param", "-p", help="Query parameter NAME=VALUE (repeatable)."
    ),
    body: Optional[list[str]] = typer.Option(
        None, "--body", "-b", help="Body parameter NAME=VALUE (repeatable)."
    ),
    discriminator: str = typer.Option(
        "", "--discriminator", "-D", help="Extra namespace string."
    ),
) -> None:
    """Compute the base key, full key and entry path for a request.

    Example::

        respcache key ReportController -p b=2 -p a=1
        respcache --json key app/controllers/report.py -D en
    """
    config = resolve_from_context(ctx)
    query_params = parse_pairs(query or [], "--param")
    body_params = parse_pairs(body or [], "--body")

    name = derive_identity(identity)
    params = collect_params(query_params, body_params, config.bypass_param)
    base_key, full_key = make_keys(name, params, discriminator)

    format_response(
        {
            "identity": name,
            "params": serialize_params(params),
            "base_key": base_key,
            "key": full_key,
            "path": str(Path(config.directory) / f"{full_key}.json"),
        }
    )
