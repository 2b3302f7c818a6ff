"""Helpers shared by the command modules.

Commands never talk to :mod:`httpx` directly: they resolve settings from the
Typer context, open a :class:`~cloudtargets.manager.TargetsManager`, and run
the call inside :func:`api_errors` so library exceptions end the process
with the matching exit code.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import typer

from cloudtargets.client.transport import HttpTransport
from cloudtargets.config import resolve_settings
from cloudtargets.exceptions import CloudTargetsError, ConfigError, InvalidUsageError
from cloudtargets.manager import TargetsManager
from cloudtargets.models import ClientSettings
from cloudtargets.output import OutputFormat, error, format_response, get_output, print_table


def make_transport(settings: ClientSettings) -> HttpTransport:
    return HttpTransport(
        base_url=settings.base_url,
        timeout=settings.timeout,
        verify_ssl=settings.verify_ssl,
    )


def settings_from_context(ctx: typer.Context) -> ClientSettings:
    """Resolve :class:`ClientSettings` using the global CLI flags stored in ``ctx.obj``."""
    obj = ctx.obj or {}
    return resolve_settings(
        cli_token=obj.get("token"),
        cli_version=obj.get("api_version"),
        cli_poll_interval=obj.get("poll_interval"),
        cli_base_url=obj.get("base_url"),
    )


@contextmanager
def api_errors() -> Iterator[None]:
    """Report :class:`CloudTargetsError` on stderr and exit with its code."""
    try:
        yield
    except CloudTargetsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


@contextmanager
def open_manager(ctx: typer.Context) -> Iterator[TargetsManager]:
    """Yield a manager built from the resolved settings, closing it afterwards."""
    settings = settings_from_context(ctx)
    transport = make_transport(settings)
    try:
        manager = TargetsManager.from_settings(settings, transport=transport)
    except ConfigError:
        transport.close()
        raise
    with manager:
        yield manager


def parse_json_arg(value: str) -> Any:
    """Parse a JSON command argument.

    ``@path`` reads the JSON from a file, anything else is parsed inline.

    Raises:
        InvalidUsageError: If the file is missing or the text is not JSON.
    """
    text = value
    if value.startswith("@"):
        path = Path(value[1:]).expanduser()
        if not path.is_file():
            raise InvalidUsageError(f"JSON file not found: {path}")
        text = path.read_text(encoding="utf-8")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"Invalid JSON: {exc}") from exc


def is_force(ctx: typer.Context) -> bool:
    return bool(ctx.obj.get("force", False)) if ctx.obj else False


def render_listing(data: Any, columns: list[str], title: str) -> None:
    """Show a list of objects as a table, or verbatim in JSON mode."""
    rows_ok = isinstance(data, list) and all(isinstance(item, dict) for item in data)
    if get_output().format == OutputFormat.JSON or not rows_ok:
        format_response(data)
        return
    rows = [[str(item.get(col, "")) for col in columns] for item in data]
    print_table(columns, rows, title=title)
