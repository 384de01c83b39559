"""Main Typer application: imports and registers all CLI commands.

Entry point: ``toolbelt`` (configured via pyproject.toml console_scripts).

Commands: init, workspace (create, list), publish, install, package.
"""

from __future__ import annotations

import typer

from toolbelt.cli.commands._common import CliState
from toolbelt.cli.commands.init_cmd import init_cmd
from toolbelt.cli.commands.install import install_cmd
from toolbelt.cli.commands.package import package_cmd
from toolbelt.cli.commands.publish import publish_cmd
from toolbelt.cli.commands.workspace_cmd import workspace_app
from toolbelt.config import ToolbeltConfig
from toolbelt.logger import configure_logging

app = typer.Typer(
    name="toolbelt",
    help="Toolbelt: command-line client for the app platform.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Show debug output."),
) -> None:
    """Load settings and set up logging for every command."""
    settings = ToolbeltConfig()
    configure_logging(settings, verbose=verbose)
    ctx.obj = CliState(settings=settings, verbose=verbose)


# Register subcommands
app.command(name="init", help="Create a manifest for a new app.")(init_cmd)
app.command(name="publish", help="Publish the app and wait for its build.")(publish_cmd)
app.command(name="install", help="Install an app in the current workspace.")(install_cmd)
app.command(name="package", help="Generate package.json from manifest.json.")(package_cmd)
app.add_typer(workspace_app, name="workspace")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
