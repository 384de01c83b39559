"""Workspaces API: create and list workspaces of an account."""

from __future__ import annotations

import logging

import httpx

from toolbelt.clients.base import PlatformClient
from toolbelt.config import ToolbeltConfig
from toolbelt.models.workspace import WorkspaceMetadata

logger = logging.getLogger(__name__)


class WorkspacesClient(PlatformClient):
    def __init__(
        self,
        settings: ToolbeltConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(settings, settings.endpoint("vbase"), transport=transport)

    async def create(self, account: str, name: str, production: bool = False) -> None:
        await self._request(
            "POST",
            f"/{account}/workspaces",
            json={"name": name, "production": production},
        )

    async def list(self, account: str) -> list[WorkspaceMetadata]:
        resp = await self._request("GET", f"/{account}/workspaces")
        return [WorkspaceMetadata.model_validate(item) for item in resp.json()]

    async def warm_up_routes(self, account: str, name: str) -> None:
        """Request the route map of a new workspace so it gets generated.

        The first request to a brand new workspace is slow while the route
        map is built.
        """
        url = f"{self._settings.endpoint('colossus')}/{account}/{name}/routes"
        await self._request("GET", url)
        logger.debug("Warmed up route map of %s", name)
