"""Typer application and CLI entry point for cloudtargets.

This module wires together the top-level Typer application and registers
the ``collections``, ``targets`` and ``config`` sub-command groups. Global
options given before the sub-command (``--token``, ``--api-version``,
``--poll-interval``, ``--base-url``) are stored in the Typer context and
take precedence over environment variables and config files.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from cloudtargets import __version__
from cloudtargets.commands.collections import collections_app
from cloudtargets.commands.config import config_app
from cloudtargets.commands.targets import targets_app
from cloudtargets.exit_codes import EXIT_GENERIC_FAILURE
from cloudtargets.output import OutputFormat, OutputManager, set_output

app = typer.Typer(
    name="cloudtargets",
    help="Manage Wikitude Cloud Recognition target collections and targets.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

app.add_typer(collections_app, name="collections", help="Target collection management.")
app.add_typer(targets_app, name="targets", help="Target management.")
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"cloudtargets {__version__}")
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
    token: Optional[str] = typer.Option(
        None, "--token", help="API token (overrides CLOUDTARGETS_TOKEN)."
    ),
    api_version: Optional[str] = typer.Option(
        None, "--api-version", help="API version (overrides CLOUDTARGETS_VERSION)."
    ),
    poll_interval: Optional[int] = typer.Option(
        None, "--poll-interval", min=0, help="Milliseconds between status polls."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="API endpoint."
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
        False, "--verbose", "-v", help="Show requests and polling progress."
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Skip confirmations."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~cloudtargets.output.OutputManager` from
    the output flags and stores the connection overrides in ``ctx.obj``
    for :func:`~cloudtargets.commands.common.settings_from_context`.
    """
    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["token"] = token
    ctx.obj["api_version"] = api_version
    ctx.obj["poll_interval"] = poll_interval
    ctx.obj["base_url"] = base_url
    ctx.obj["force"] = force


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly, even mid-poll."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from cloudtargets.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``cloudtargets`` console script.

    :class:`~cloudtargets.exceptions.CloudTargetsError` instances that
    escape a command cause a clean exit with the error's ``exit_code``.
    All other exceptions produce a crash log and a generic failure exit.
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
        from cloudtargets.exceptions import CloudTargetsError
        from cloudtargets.output import error

        if isinstance(exc, CloudTargetsError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
