"""Config commands -- view and modify the user settings file.

Provides the ``cloudtargets config`` sub-command group. Settings are
persisted in the cloudtargets config directory and supply defaults for the
token, API version, poll interval and endpoint.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from cloudtargets.commands.common import api_errors, settings_from_context
from cloudtargets.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)

_MASK = "********"


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective settings (flags, environment and files merged).

    The token is masked.

    Example::

        cloudtargets config show
        cloudtargets --json config show
    """
    from cloudtargets.config import get_config_dir

    with api_errors():
        settings = settings_from_context(ctx)
    info(f"Config directory: {get_config_dir()}")
    data = settings.model_dump(mode="json")
    if data.get("token"):
        data["token"] = _MASK
    format_response(data)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Setting key (dot notation, e.g., 'poll_interval' or 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a value in the user settings file.

    The value is coerced to the existing field's type (bool, int, or str)
    and the result is validated before saving. Setting ``token`` stores
    the token in the file.

    Example::

        cloudtargets config set version 2
        cloudtargets config set poll_interval 5000
    """
    from cloudtargets.config import load_user_settings, save_user_settings
    from cloudtargets.models import ClientSettings

    with api_errors():
        settings = load_user_settings()
    data = settings.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, int):
        try:
            coerced = int(value)
        except ValueError:
            error(f"Expected integer for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        new_settings = ClientSettings.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_user_settings(new_settings, include_token=new_settings.token is not None)
    shown = _MASK if final_key == "token" else coerced
    success(f"Set {key} = {shown}")
