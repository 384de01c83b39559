"""``toolbelt publish``: publish the app in the current directory.

Uploads the app files to the registry and follows the remote build until
the builder reports success or failure.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from toolbelt.cli.commands._common import (
    console,
    get_state,
    reported_errors,
    require_account,
    run,
    watch_build,
)
from toolbelt.clients.registry import RegistryClient
from toolbelt.manifest import list_app_files, load_manifest

logger = logging.getLogger(__name__)


def publish_cmd(
    ctx: typer.Context,
    root: Path = typer.Option(
        Path("."),
        "--root",
        "-r",
        help="App directory containing manifest.json.",
    ),
    development: bool = typer.Option(
        False,
        "--development/--release",
        help="Publish as a development version.",
    ),
) -> None:
    """Publish the app and wait for its build."""
    state = get_state(ctx)
    settings = state.settings
    with reported_errors():
        manifest = load_manifest(root)
    require_account(settings)

    files = list_app_files(root)
    logger.debug("Publishing %d files for %s", len(files), manifest.app_id)
    console.print(f"[bold cyan]Publishing {manifest.app_id}...[/bold cyan]")

    async def _publish():
        async with RegistryClient(settings) as registry:
            return await watch_build(
                state,
                manifest.app_id,
                lambda: registry.publish_app(
                    settings.account, settings.workspace, root, files, development
                ),
            )

    run(_publish())
    console.print(f"[bold green]Published {manifest.app_id} successfully.[/bold green]")
