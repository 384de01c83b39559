"""Reading, creating and converting ``manifest.json``."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from toolbelt.errors import CommandError
from toolbelt.models.manifest import AppLocator, Manifest

MANIFEST_FILE_NAME = "manifest.json"
NPM_PREFIX = "npm:"

# Never shipped to the registry.
_IGNORED_DIRS = {".git", "node_modules", "__pycache__"}


def load_manifest(root: Path) -> Manifest:
    """Load ``manifest.json`` from ``root``."""
    path = root / MANIFEST_FILE_NAME
    if not path.exists():
        raise CommandError(f"No {MANIFEST_FILE_NAME} found in {root}")
    try:
        return Manifest.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except (ValueError, ValidationError) as exc:
        raise CommandError(f"Invalid {MANIFEST_FILE_NAME}: {exc}") from exc


def write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def parse_app_locator(app_id: str) -> AppLocator:
    """Split ``vendor.name@version`` (version optional)."""
    vendor_and_name, _, version = app_id.partition("@")
    vendor, dot, name = vendor_and_name.partition(".")
    if not dot or not vendor or not name:
        raise CommandError(f"Invalid app id {app_id!r}, expected vendor.name@version")
    return AppLocator(vendor=vendor, name=name, version=version)


def create_manifest(
    name: str,
    vendor: str,
    title: str = "",
    description: str = "",
    today: date | None = None,
) -> Manifest:
    """A fresh manifest at version 0.1.0, due for update one year from ``today``."""
    today = today or date.today()
    try:
        must_update = today.replace(year=today.year + 1)
    except ValueError:
        # Feb 29
        must_update = today.replace(year=today.year + 1, day=28)
    return Manifest(
        name=name,
        vendor=vendor,
        version="0.1.0",
        title=title,
        description=description,
        mustUpdateAt=must_update.isoformat(),
        registries=["smartcheckout"],
    )


def build_package(manifest: Manifest) -> dict[str, Any]:
    """Derive a package.json document from the manifest.

    ``npm:``-prefixed dependencies become npm dependencies (prefix
    stripped); the rest are app dependencies.  Both are key-sorted.
    """
    deps = manifest.dependencies
    npm = {k[len(NPM_PREFIX):]: deps[k] for k in sorted(deps) if k.startswith(NPM_PREFIX)}
    apps = {k: deps[k] for k in sorted(deps) if not k.startswith(NPM_PREFIX)}
    pkg = manifest.model_dump(by_alias=True)
    pkg.update(
        version=None,
        vtexVersion=manifest.version,
        dependencies=npm,
        vtexDependencies=apps,
    )
    return pkg


def list_app_files(root: Path) -> list[str]:
    """Publishable files under ``root`` as sorted POSIX relative paths."""
    files: list[str] = []
    for path in root.rglob("*"):
        rel = path.relative_to(root)
        if any(part in _IGNORED_DIRS or part.startswith(".") for part in rel.parts):
            continue
        if path.is_file():
            files.append(rel.as_posix())
    return sorted(files)
