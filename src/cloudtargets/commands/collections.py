"""Collection commands -- create, inspect, rename, delete and generate target collections.

Provides the ``cloudtargets collections`` sub-command group.
``generate`` blocks until the server has rebuilt the recognition archive,
which can take minutes for large collections.
"""

from __future__ import annotations

import typer

from cloudtargets.commands.common import api_errors, is_force, open_manager, render_listing
from cloudtargets.output import format_response, info, success

collections_app = typer.Typer(no_args_is_help=True)


@collections_app.command("list")
def collections_list(ctx: typer.Context) -> None:
    """List all target collections."""
    with api_errors(), open_manager(ctx) as api:
        data = api.get_all_target_collections()
    render_listing(data, ["id", "name"], title="Target collections")


@collections_app.command("create")
def collections_create(
    ctx: typer.Context,
    name: str = typer.Argument(help="Name of the new collection."),
) -> None:
    """Create an empty target collection.

    Example::

        cloudtargets collections create shelf1
    """
    with api_errors(), open_manager(ctx) as api:
        data = api.create_target_collection(name)
    format_response(data)


@collections_app.command("get")
def collections_get(
    ctx: typer.Context,
    tc_id: str = typer.Argument(help="Collection id."),
) -> None:
    """Show one target collection."""
    with api_errors(), open_manager(ctx) as api:
        data = api.get_target_collection(tc_id)
    format_response(data)


@collections_app.command("rename")
def collections_rename(
    ctx: typer.Context,
    tc_id: str = typer.Argument(help="Collection id."),
    name: str = typer.Argument(help="New name."),
) -> None:
    """Rename a target collection."""
    with api_errors(), open_manager(ctx) as api:
        data = api.rename_target_collection(tc_id, name)
    format_response(data)


@collections_app.command("delete")
def collections_delete(
    ctx: typer.Context,
    tc_id: str = typer.Argument(help="Collection id."),
) -> None:
    """Delete a collection and all of its targets.

    Asks for confirmation unless ``--force`` is active.
    """
    if not is_force(ctx):
        if not typer.confirm(f"Delete target collection {tc_id} and all its targets?"):
            info("Cancelled.")
            raise typer.Exit()
    with api_errors(), open_manager(ctx) as api:
        api.delete_target_collection(tc_id)
    success(f"Deleted target collection {tc_id}")


@collections_app.command("generate")
def collections_generate(
    ctx: typer.Context,
    tc_id: str = typer.Argument(help="Collection id."),
) -> None:
    """Generate the cloud archive of a collection and wait for completion."""
    info(f"Generating target collection {tc_id}, this may take a while...")
    with api_errors(), open_manager(ctx) as api:
        status = api.generate_target_collection(tc_id)
    format_response(status)
