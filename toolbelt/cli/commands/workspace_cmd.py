"""``toolbelt workspace``: create and list workspaces."""

from __future__ import annotations

import logging
import re

import typer
from rich.table import Table

from toolbelt.cli.commands._common import CliState, console, fail, get_state, require_account, run
from toolbelt.clients.workspaces import WorkspacesClient
from toolbelt.errors import PlatformRequestError

logger = logging.getLogger(__name__)

VALID_WORKSPACE = re.compile(r"^[a-z][a-z0-9-]{0,126}[a-z0-9]$")

workspace_app = typer.Typer(help="Manage workspaces.", no_args_is_help=True)


async def _create(state: CliState, name: str, production: bool) -> bool:
    settings = state.settings
    async with WorkspacesClient(settings) as client:
        try:
            await client.create(settings.account, name, production)
        except PlatformRequestError as exc:
            if exc.code == "WorkspaceAlreadyExists":
                logger.error(exc.message)
                return False
            raise
        await client.warm_up_routes(settings.account, name)
    return True


@workspace_app.command(name="create", help="Create a new workspace.")
def create_cmd(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Workspace name."),
    production: bool = typer.Option(
        False,
        "--production",
        "-p",
        help="Create a production workspace.",
    ),
) -> None:
    """Create a workspace in the current account."""
    if not VALID_WORKSPACE.match(name):
        fail(
            "Whoops! That's not a valid workspace name. "
            "Please use only lowercase letters, numbers and hyphens."
        )
    state = get_state(ctx)
    require_account(state.settings)
    logger.debug("Creating workspace %s", name)

    if run(_create(state, name, production)):
        console.print(
            f"Workspace [green]{name}[/green] created [green]successfully[/green] "
            f"with [green]production={str(production).lower()}[/green]"
        )


@workspace_app.command(name="list", help="List workspaces of the current account.")
def list_cmd(ctx: typer.Context) -> None:
    """List workspaces, marking the one in use."""
    state = get_state(ctx)
    settings = state.settings
    require_account(settings)

    async def _list():
        async with WorkspacesClient(settings) as client:
            return await client.list(settings.account)

    workspaces = run(_list())
    if not workspaces:
        console.print("[dim]No workspaces found.[/dim]")
        return

    table = Table(title=f"Workspaces in {settings.account}")
    table.add_column("Name", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Production", justify="center")

    for ws in workspaces:
        name = f"[bold green]{ws.name} *[/bold green]" if ws.name == settings.workspace else ws.name
        production = "[green]Yes[/green]" if ws.production else "[dim]No[/dim]"
        table.add_row(name, str(ws.weight), production)

    console.print(table)
