"""Event Subscription Facade: SSE streams from the platform event gateway.

Bridge boundary
---------------
The gateway (``colossus``) publishes named events on a persistent
``text/event-stream`` connection.  This module exposes it through two
calls that the build monitor depends on:

- ``subscribe(channel, event_name, handler)``: deliver every event the
  ``channel`` sender publishes under ``event_name`` to ``handler``.
- ``subscribe_logs(level, filter_key)``: stream app log lines at or above
  ``level`` into the ``toolbelt.remote`` logger.

Both return a zero-argument unsubscribe callable.  Each subscription runs
as its own asyncio task over a streaming ``httpx`` request, so callers
must be inside a running event loop.  A dropped stream is logged and not
reopened.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any

import httpx

from toolbelt.config import ToolbeltConfig

logger = logging.getLogger(__name__)
remote_logger = logging.getLogger("toolbelt.remote")

Unsubscribe = Callable[[], None]

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


# ---------------------------------------------------------------------------
# Wire format
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ServerSentEvent:
    """One dispatched SSE event."""

    event: str = "message"
    data: str = ""
    id: str = ""

    def json(self) -> Any:
        return json.loads(self.data)


async def iter_sse_events(lines: AsyncIterator[str]) -> AsyncIterator[ServerSentEvent]:
    """Parse ``text/event-stream`` lines into events.

    Multi-line ``data:`` fields are joined with ``\\n``; comment lines
    (``:``) are skipped; an event is dispatched on a blank line, and only
    if it carried data.
    """
    event, data, event_id = "", [], ""
    async for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            if data:
                yield ServerSentEvent(event=event or "message", data="\n".join(data), id=event_id)
            event, data = "", []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            event = value
        elif field == "data":
            data.append(value)
        elif field == "id":
            event_id = value
    if data:
        yield ServerSentEvent(event=event or "message", data="\n".join(data), id=event_id)


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------


class Subscription:
    """One active listener; ``cancel()`` may be called any number of times."""

    def __init__(self, task: asyncio.Task[None], description: str) -> None:
        self._task = task
        self._description = description

    @property
    def active(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        if self._task.done():
            return
        self._task.cancel()
        logger.debug("Unsubscribed from %s", self._description)


class EventSource:
    """SSE client for the platform event gateway.

    Parameters
    ----------
    settings:
        Account, workspace, token and region used to build stream URLs.
    client:
        Optional pre-built ``httpx.AsyncClient`` (tests pass one backed by
        ``httpx.MockTransport``).  When omitted one is created and closed
        by ``aclose()``.
    """

    def __init__(
        self,
        settings: ToolbeltConfig,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout, read=None),
        )
        self._subscriptions: list[Subscription] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def subscribe(
        self,
        channel: str,
        event_name: str,
        handler: Callable[[dict[str, Any]], None],
    ) -> Unsubscribe:
        """Deliver ``event_name`` events published by ``channel`` to ``handler``."""
        url = self._stream_url("events")
        params = {"sender": channel, "keys": event_name}

        def on_event(sse: ServerSentEvent) -> None:
            payload = _decode(sse)
            if payload is None:
                return
            key = payload.get("key")
            if key and key != event_name:
                return
            handler(payload)

        return self._start(url, params, on_event, f"{channel}/{event_name}")

    def subscribe_logs(self, level: str, filter_key: str) -> Unsubscribe:
        """Stream app log lines for ``filter_key`` at or above ``level``."""
        url = self._stream_url("logs")
        threshold = _LEVELS.get(level.lower(), logging.INFO)
        params = {"level": level.lower(), "app": filter_key}

        def on_log(sse: ServerSentEvent) -> None:
            payload = _decode(sse)
            if payload is None:
                return
            line_level = _LEVELS.get(str(payload.get("level", "info")).lower(), logging.INFO)
            if line_level < threshold:
                return
            body = payload.get("body")
            message = body.get("message") if isinstance(body, dict) else None
            if message:
                remote_logger.log(line_level, "%s %s", payload.get("sender", filter_key), message)

        return self._start(url, params, on_log, f"logs/{filter_key}")

    async def aclose(self) -> None:
        """Cancel every subscription and close the owned HTTP client."""
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> EventSource:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _stream_url(self, resource: str) -> str:
        s = self._settings
        return f"{s.endpoint('colossus')}/{s.account}/{s.workspace}/{resource}"

    def _start(
        self,
        url: str,
        params: dict[str, str],
        on_event: Callable[[ServerSentEvent], None],
        description: str,
    ) -> Unsubscribe:
        task = asyncio.get_running_loop().create_task(
            self._pump(url, params, on_event, description)
        )
        subscription = Subscription(task, description)
        self._subscriptions.append(subscription)
        logger.debug("Subscribed to %s", description)
        return subscription.cancel

    async def _pump(
        self,
        url: str,
        params: dict[str, str],
        on_event: Callable[[ServerSentEvent], None],
        description: str,
    ) -> None:
        headers = {
            "Accept": "text/event-stream",
            "Authorization": self._settings.token,
            "User-Agent": self._settings.user_agent,
        }
        try:
            async with self._client.stream("GET", url, params=params, headers=headers) as resp:
                if resp.status_code != 200:
                    logger.warning(
                        "Event stream %s refused with status %d", description, resp.status_code
                    )
                    return
                async for sse in iter_sse_events(resp.aiter_lines()):
                    on_event(sse)
        except httpx.HTTPError as exc:
            logger.warning("Event stream %s dropped: %s", description, exc)
            return
        logger.debug("Event stream %s ended", description)


def _decode(sse: ServerSentEvent) -> dict[str, Any] | None:
    try:
        payload = sse.json()
    except ValueError:
        logger.debug("Ignoring non-JSON event data: %r", sse.data)
        return None
    return payload if isinstance(payload, dict) else None
