"""Apps API: installs apps into a workspace."""

from __future__ import annotations

from typing import Any

import httpx

from toolbelt.clients.base import PlatformClient
from toolbelt.config import ToolbeltConfig
from toolbelt.models.manifest import AppLocator


class AppsClient(PlatformClient):
    def __init__(
        self,
        settings: ToolbeltConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings, settings.endpoint("apps"), transport=transport)

    async def install_app(self, account: str, workspace: str, locator: AppLocator) -> Any:
        """Install ``locator`` in ``account/workspace``; returns the API response body."""
        resp = await self._request(
            "POST",
            f"/{account}/{workspace}/apps",
            json={"id": locator.app_id},
        )
        return resp.json() if resp.content else None
