"""Registry API: publishes app files.

Files are packed into an in-memory zip (paths relative to the app root)
and uploaded as ``application/zip``.
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import httpx

from toolbelt.clients.base import PlatformClient
from toolbelt.config import ToolbeltConfig


def zip_files(root: Path, files: Iterable[str]) -> bytes:
    """Zip ``files`` (relative to ``root``) into bytes."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for rel in files:
            archive.write(root / rel, arcname=rel)
    return buffer.getvalue()


class RegistryClient(PlatformClient):
    def __init__(
        self,
        settings: ToolbeltConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings, settings.endpoint("apps"), transport=transport)

    async def publish_app(
        self,
        account: str,
        workspace: str,
        root: Path,
        files: list[str],
        is_development: bool = False,
    ) -> Any:
        """Publish the app in ``root`` to the registry."""
        resp = await self._request(
            "POST",
            f"/{account}/{workspace}/registry",
            params={"isDevelopment": str(is_development).lower()},
            content=zip_files(root, files),
            headers={"Content-Type": "application/zip"},
        )
        return resp.json() if resp.content else None
