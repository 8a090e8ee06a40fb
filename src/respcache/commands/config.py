"""Config commands -- view and write the project configuration.

Provides the ``respcache config`` sub-command group. ``show`` prints the
fully resolved :class:`~respcache.models.CacheConfig`; ``init`` writes it to
``./respcache.json`` so a project can pin its cache settings.
"""

from __future__ import annotations

import typer

from respcache.commands._common import resolve_from_context
from respcache.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the resolved configuration.

    Example::

        respcache config show
        RESPCACHE_DURATION=60 respcache --json config show
    """
    config = resolve_from_context(ctx)
    format_response(config.model_dump(mode="json"))


@config_app.command("init")
def config_init(ctx: typer.Context) -> None:
    """Write the resolved configuration to ``./respcache.json``.

    Refuses to overwrite an existing file unless ``--force`` is given.
    """
    from pathlib import Path

    from respcache.config import save_project_config

    force = ctx.obj.get("force", False) if ctx.obj else False
    target = Path.cwd() / "respcache.json"
    if target.exists() and not force:
        error(f"{target} already exists.")
        info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    config = resolve_from_context(ctx)
    path = save_project_config(config, target)
    success(f"Wrote {path}")
