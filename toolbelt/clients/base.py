"""Shared HTTP plumbing for the platform clients.

Every client talks to one service base URL with the session token and
user agent attached.  Non-2xx responses become ``PlatformRequestError``
carrying the platform's ``{"code", "message"}`` error body when present.
No retries.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx

from toolbelt.config import ToolbeltConfig
from toolbelt.errors import PlatformRequestError

logger = logging.getLogger(__name__)

C = TypeVar("C", bound="PlatformClient")


class PlatformClient:
    """Base class for the service clients.

    Parameters
    ----------
    settings:
        Token, user agent and request timeout.
    base_url:
        Service root, usually ``settings.endpoint(<service>)``.
    transport:
        Optional ``httpx`` transport override (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        settings: ToolbeltConfig,
        base_url: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": settings.token,
                "User-Agent": settings.user_agent,
            },
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s%s", method, self._client.base_url, path)
        resp = await self._client.request(method, path, **kwargs)
        if resp.is_error:
            raise _to_error(resp)
        return resp

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self: C) -> C:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()


def _to_error(resp: httpx.Response) -> PlatformRequestError:
    code, message = "", ""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        code = str(data.get("code") or "")
        message = str(data.get("message") or "")
    if not message:
        message = resp.text.strip() or f"{resp.request.method} {resp.request.url} failed"
    logger.debug("Request failed: status=%d code=%s", resp.status_code, code)
    return PlatformRequestError(resp.status_code, code, message)
