"""``toolbelt install APP_ID``: install an app in the current workspace."""

from __future__ import annotations

import typer

from toolbelt.cli.commands._common import (
    console,
    fail,
    get_state,
    reported_errors,
    require_account,
    run,
    watch_build,
)
from toolbelt.clients.apps import AppsClient
from toolbelt.manifest import parse_app_locator

WORKSPACE_MASTER_MESSAGE = "[green]master[/green] is [red]read-only[/red], please use another workspace"


def install_cmd(
    ctx: typer.Context,
    app_id: str = typer.Argument(..., help="App to install, as vendor.name@version."),
) -> None:
    """Install an app and wait for its build."""
    state = get_state(ctx)
    settings = state.settings
    if settings.is_master:
        fail(WORKSPACE_MASTER_MESSAGE)
    require_account(settings)
    with reported_errors():
        locator = parse_app_locator(app_id)

    console.print(f"[bold cyan]Installing {locator.app_id} in {settings.workspace}...[/bold cyan]")

    async def _install():
        async with AppsClient(settings) as apps:
            return await watch_build(
                state,
                locator.app_id,
                lambda: apps.install_app(settings.account, settings.workspace, locator),
            )

    run(_install())
    console.print(f"[bold green]Installed {locator.app_id} successfully.[/bold green]")
