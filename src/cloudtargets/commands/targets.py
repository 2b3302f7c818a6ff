"""Target commands -- manage the targets of one collection.

Provides the ``cloudtargets targets`` sub-command group. Commands that
take target properties accept inline JSON or ``@file.json``::

    cloudtargets targets add 5c8f0b7e '{"name": "cover", "imageUrl": "https://..."}'
    cloudtargets targets add-many 5c8f0b7e @targets.json
"""

from __future__ import annotations

import typer

from cloudtargets.commands.common import (
    api_errors,
    is_force,
    open_manager,
    parse_json_arg,
    render_listing,
)
from cloudtargets.exceptions import InvalidUsageError
from cloudtargets.output import format_response, info, success

targets_app = typer.Typer(no_args_is_help=True)


@targets_app.command("list")
def targets_list(
    ctx: typer.Context,
    tc_id: str = typer.Argument(help="Collection id."),
) -> None:
    """List all targets of a collection."""
    with api_errors(), open_manager(ctx) as api:
        data = api.get_all_targets(tc_id)
    render_listing(data, ["id", "name"], title=f"Targets of {tc_id}")


@targets_app.command("add")
def targets_add(
    ctx: typer.Context,
    tc_id: str = typer.Argument(help="Collection id."),
    target: str = typer.Argument(help="Target properties as JSON or @file."),
) -> None:
    """Add one target to a collection."""
    with api_errors():
        payload = parse_json_arg(target)
        if not isinstance(payload, dict):
            raise InvalidUsageError("Target must be a JSON object")
        with open_manager(ctx) as api:
            data = api.add_target(tc_id, payload)
    format_response(data)


@targets_app.command("add-many")
def targets_add_many(
    ctx: typer.Context,
    tc_id: str = typer.Argument(help="Collection id."),
    targets: str = typer.Argument(help="JSON array of targets or @file."),
) -> None:
    """Add many targets in one job and wait for it to finish."""
    with api_errors():
        payload = parse_json_arg(targets)
        if not isinstance(payload, list):
            raise InvalidUsageError("Targets must be a JSON array")
        info(f"Adding {len(payload)} targets to {tc_id}, this may take a while...")
        with open_manager(ctx) as api:
            status = api.add_targets(tc_id, payload)
    format_response(status)


@targets_app.command("get")
def targets_get(
    ctx: typer.Context,
    tc_id: str = typer.Argument(help="Collection id."),
    target_id: str = typer.Argument(help="Target id."),
) -> None:
    """Show one target."""
    with api_errors(), open_manager(ctx) as api:
        data = api.get_target(tc_id, target_id)
    format_response(data)


@targets_app.command("update")
def targets_update(
    ctx: typer.Context,
    tc_id: str = typer.Argument(help="Collection id."),
    target_id: str = typer.Argument(help="Target id."),
    properties: str = typer.Argument(help="Properties to change as JSON or @file."),
) -> None:
    """Update properties of a target, e.g. ``'{"physicalHeight": 200}'``."""
    with api_errors():
        payload = parse_json_arg(properties)
        if not isinstance(payload, dict):
            raise InvalidUsageError("Target properties must be a JSON object")
        with open_manager(ctx) as api:
            data = api.update_target(tc_id, target_id, payload)
    format_response(data)


@targets_app.command("delete")
def targets_delete(
    ctx: typer.Context,
    tc_id: str = typer.Argument(help="Collection id."),
    target_id: str = typer.Argument(help="Target id."),
) -> None:
    """Delete a target. Asks for confirmation unless ``--force`` is active."""
    if not is_force(ctx):
        if not typer.confirm(f"Delete target {target_id} from {tc_id}?"):
            info("Cancelled.")
            raise typer.Exit()
    with api_errors(), open_manager(ctx) as api:
        api.delete_target(tc_id, target_id)
    success(f"Deleted target {target_id}")
