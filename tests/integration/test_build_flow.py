"""Integration tests: resolver + multiplexer + SSE event source over a mock gateway.

The mock gateway answers each ``/events`` stream according to its ``keys``
parameter, the way the builder channel would publish them.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from toolbelt.bridge.sse import EventSource
from toolbelt.build.multiplexer import BuildEventMultiplexer
from toolbelt.build.resolver import BuildOutcomeResolver
from toolbelt.errors import BuildFailedError


def _gateway(streams: dict[str, list[dict]], delays: dict[str, float] | None = None):
    requested: list[str] = []
    delays = delays or {}

    async def handler(request: httpx.Request) -> httpx.Response:
        key = request.url.params.get("keys") or "logs"
        requested.append(key)
        await asyncio.sleep(delays.get(key, 0))
        body = "".join(f"data: {json.dumps(payload)}\n\n" for payload in streams.get(key, []))
        return httpx.Response(
            200, headers={"content-type": "text/event-stream"}, content=body.encode()
        )

    return requested, httpx.MockTransport(handler)


async def _listen(settings, transport, trigger, start_timeout: float = 5.0):
    client = httpx.AsyncClient(transport=transport)
    try:
        async with EventSource(settings, client=client) as source:
            multiplexer = BuildEventMultiplexer(
                source, channel=settings.builder_channel, start_timeout=start_timeout
            )
            return await BuildOutcomeResolver(multiplexer).listen_build(
                "acme.store@1.2.3", trigger
            )
    finally:
        await client.aclose()


async def _publish():
    await asyncio.sleep(0.01)
    return {"published": True}


class TestBuildFlow:
    @pytest.mark.asyncio
    async def test_success(self, settings):
        requested, transport = _gateway(
            {
                "build.start": [{"key": "build.start", "sender": "vtex.render-builder"}],
                "build.success": [{"key": "build.success", "body": {"id": "b-1"}}],
            },
            delays={"build.success": 0.05},
        )

        result = await _listen(settings, transport, _publish)

        assert result == {"published": True}
        assert "build.success" in requested

    @pytest.mark.asyncio
    async def test_fail_reports_builder_message(self, settings):
        _, transport = _gateway(
            {"build.fail": [{"key": "build.fail", "body": {"message": "disk full"}}]}
        )

        with pytest.raises(BuildFailedError, match="disk full"):
            await _listen(settings, transport, _publish)

    @pytest.mark.asyncio
    async def test_silent_gateway_times_out_as_success(self, settings):
        _, transport = _gateway({})

        result = await _listen(settings, transport, _publish, start_timeout=0.05)

        assert result == {"published": True}

    @pytest.mark.asyncio
    async def test_trigger_failure_wins_over_silence(self, settings):
        _, transport = _gateway({})

        async def trigger():
            raise httpx.ConnectError("registry unreachable")

        with pytest.raises(httpx.ConnectError, match="registry unreachable"):
            await _listen(settings, transport, trigger)
