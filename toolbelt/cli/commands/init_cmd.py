"""``toolbelt init``: create a manifest for a new app.

Prompts for the template and the app metadata, then writes
``<template>/manifest.json``, merging over any manifest already there.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from rich.prompt import Confirm, Prompt

from toolbelt.cli.commands._common import console, get_state
from toolbelt.manifest import MANIFEST_FILE_NAME, create_manifest, write_json
from toolbelt.models.manifest import APP_NAME_PATTERN

logger = logging.getLogger(__name__)

TEMPLATES: dict[str, dict[str, str]] = {
    "store-theme": {"title": "Store Theme", "description": "Store Theme app"},
}

_CANCEL = "cancel"
_INVALID_NAME = "should only contain numbers, lowercase letters, underscores and hyphens."


def _ask_identifier(label: str, default: str) -> str:
    while True:
        kwargs = {"default": default} if default else {}
        value = Prompt.ask(f"What's your app {label}?", console=console, **kwargs).strip()
        if APP_NAME_PATTERN.match(value):
            return value
        console.print(f"[yellow]The app {label} {_INVALID_NAME}[/yellow]")


def _bye() -> None:
    console.print("Bye o/")
    raise typer.Exit(code=0)


def init_cmd(ctx: typer.Context) -> None:
    """Prompt for app info and write its manifest.json."""
    settings = get_state(ctx).settings
    logger.debug("Prompting for app info")
    console.print("Hello! I will help you generate a manifest for your app.")

    template = Prompt.ask(
        "Choose where do you want to start from",
        choices=[*TEMPLATES, _CANCEL],
        default=next(iter(TEMPLATES)),
        console=console,
    )
    if template == _CANCEL:
        _bye()

    target = Path.cwd() / template
    if not Confirm.ask(
        f"You are about to write {target / MANIFEST_FILE_NAME}. Do you want to continue?",
        console=console,
    ):
        _bye()

    defaults = TEMPLATES[template]
    name = _ask_identifier("name", template)
    vendor = _ask_identifier("vendor", settings.account)
    title = Prompt.ask("What's your app title?", default=defaults["title"], console=console).strip()
    description = Prompt.ask(
        "What's your app description?", default=defaults["description"], console=console
    ).strip()

    manifest_path = target / MANIFEST_FILE_NAME
    existing: dict = {}
    if manifest_path.exists():
        existing = json.loads(manifest_path.read_text(encoding="utf-8"))
    synthetic = create_manifest(name, vendor, title, description)
    write_json(manifest_path, {**existing, **synthetic.model_dump(by_alias=True)})

    console.print(
        f"Run [bold green]cd {template}[/bold green] and "
        f"[bold green]toolbelt publish[/bold green] to start developing!"
    )
