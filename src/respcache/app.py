"""Typer application and CLI entry point for respcache.

The CLI is an operator tool for a cache directory written by
:class:`~respcache.cache.ResponseCache`: compute the key a request maps to,
list entries, show totals, purge expired files, or clear entries.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. :class:`~respcache.exceptions.RespcacheError` is turned
into a clean exit with the error's code.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer

from respcache import __version__
from respcache.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="respcache",
    help="Inspect and maintain a file-backed response cache.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"respcache {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    directory: Optional[str] = typer.Option(
        None, "--dir", "-d", help="Cache directory (overrides config)."
    ),
    duration: Optional[int] = typer.Option(
        None, "--duration", "-t", min=0, help="Freshness window in seconds."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~respcache.output.OutputManager`, configures
    logging, and stores the directory/duration overrides and ``force`` flag
    in ``ctx.obj`` for sub-commands.
    """
    from respcache.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    ctx.ensure_object(dict)
    ctx.obj["directory"] = directory
    ctx.obj["duration"] = duration
    ctx.obj["force"] = force


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _register_commands() -> None:
    from respcache.commands.config import config_app
    from respcache.commands.entries import (
        clear_command,
        list_command,
        purge_command,
        stats_command,
    )
    from respcache.commands.key import key_command

    app.command("key")(key_command)
    app.command("list")(list_command)
    app.command("stats")(stats_command)
    app.command("purge")(purge_command)
    app.command("clear")(clear_command)
    app.add_typer(config_app, name="config", help="Configuration management.")


_register_commands()


def main() -> None:
    """CLI entry point invoked by the ``respcache`` console script.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from respcache.exceptions import RespcacheError
        from respcache.output import error

        if isinstance(exc, RespcacheError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
