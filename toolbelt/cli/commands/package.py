"""``toolbelt package``: generate package.json from manifest.json."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer

from toolbelt.cli.commands._common import console, reported_errors
from toolbelt.manifest import build_package, load_manifest, write_json

logger = logging.getLogger(__name__)


def package_cmd(
    root: Path = typer.Option(
        Path("."),
        "--root",
        "-r",
        help="App directory containing manifest.json.",
    ),
) -> None:
    """Write package.json next to manifest.json."""
    with reported_errors():
        manifest = load_manifest(root)
    pkg = build_package(manifest)
    logger.debug("Generating package: %s", json.dumps(pkg, indent=2))
    write_json(root / "package.json", pkg)
    console.print("[green]Generated package.json successfully.[/green]")
