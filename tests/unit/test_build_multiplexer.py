"""Tests for BuildEventMultiplexer and WatchSession: fan-out and selective release."""

from __future__ import annotations

import asyncio

import pytest

from toolbelt.build.multiplexer import BUILDER_CHANNEL, BuildEventMultiplexer, WatchSession
from toolbelt.models.build import ALL_EVENTS, BuildEvent, BuildMessage


class TestWatchSession:
    def test_release_subset_only(self):
        calls: list[str] = []
        session = WatchSession(
            start=lambda: calls.append("start"),
            success=lambda: calls.append("success"),
            fail=lambda: calls.append("fail"),
            logs=lambda: calls.append("logs"),
            timeout=lambda: calls.append("timeout"),
        )

        session.release(BuildEvent.START, BuildEvent.TIMEOUT)

        assert calls == ["start", "timeout"]
        assert session.pending() == [BuildEvent.SUCCESS, BuildEvent.FAIL, BuildEvent.LOGS]

    def test_release_twice_is_noop(self):
        calls: list[str] = []
        session = WatchSession(start=lambda: calls.append("start"))

        session.release(BuildEvent.START)
        session.release(BuildEvent.START)
        session.release(*ALL_EVENTS)

        assert calls == ["start"]
        assert session.pending() == []


class TestOnBuildEvent:
    @pytest.mark.asyncio
    async def test_opens_logs_and_flow_subscriptions(self, events):
        multiplexer = BuildEventMultiplexer(events, log_level="debug")

        unlisten = multiplexer.on_build_event("acme.store@1.2.3", lambda *_: None)

        assert events.log_subscriptions == [("debug", "acme.store")]
        assert set(events.handlers) == {
            (BUILDER_CHANNEL, "build.start"),
            (BUILDER_CHANNEL, "build.success"),
            (BUILDER_CHANNEL, "build.fail"),
        }
        unlisten(*ALL_EVENTS)

    @pytest.mark.asyncio
    async def test_identifier_without_version(self, events):
        multiplexer = BuildEventMultiplexer(events)
        unlisten = multiplexer.on_build_event("acme.store", lambda *_: None)

        assert events.log_subscriptions == [("info", "acme.store")]
        unlisten(*ALL_EVENTS)

    @pytest.mark.asyncio
    async def test_events_forwarded_with_kind_and_message(self, events):
        received: list[tuple[BuildEvent, BuildMessage | None]] = []
        multiplexer = BuildEventMultiplexer(events)
        unlisten = multiplexer.on_build_event("acme.store@1.2.3", lambda k, m: received.append((k, m)))

        events.emit("build.start", {"key": "build.start", "sender": BUILDER_CHANNEL})
        events.emit("build.fail", {"body": {"message": "disk full"}})

        assert [kind for kind, _ in received] == [BuildEvent.START, BuildEvent.FAIL]
        assert received[0][1].sender == BUILDER_CHANNEL
        assert received[1][1].fail_reason == "disk full"
        unlisten(*ALL_EVENTS)

    @pytest.mark.asyncio
    async def test_timeout_fires_once(self, events):
        received: list[BuildEvent] = []
        multiplexer = BuildEventMultiplexer(events, start_timeout=0.02)
        unlisten = multiplexer.on_build_event("acme.store@1.2.3", lambda k, m: received.append(k))

        await asyncio.sleep(0.06)

        assert received == [BuildEvent.TIMEOUT]
        unlisten(*ALL_EVENTS)

    @pytest.mark.asyncio
    async def test_cancelled_timeout_never_fires(self, events):
        received: list[BuildEvent] = []
        multiplexer = BuildEventMultiplexer(events, start_timeout=0.02)
        unlisten = multiplexer.on_build_event("acme.store@1.2.3", lambda k, m: received.append(k))

        unlisten(BuildEvent.TIMEOUT)
        await asyncio.sleep(0.05)

        assert received == []
        unlisten(*ALL_EVENTS)

    @pytest.mark.asyncio
    async def test_unlisten_subset_then_repeat(self, events):
        multiplexer = BuildEventMultiplexer(events)
        unlisten = multiplexer.on_build_event("acme.store@1.2.3", lambda *_: None)

        unlisten(BuildEvent.START, BuildEvent.LOGS)
        unlisten(BuildEvent.START, BuildEvent.LOGS)

        assert events.cancel_calls["build.start"] == 1
        assert events.cancel_calls["logs"] == 1
        assert events.cancel_calls["build.success"] == 0
        assert events.active == {"build.success", "build.fail"}
        unlisten(*ALL_EVENTS)

    @pytest.mark.asyncio
    async def test_partial_subscribe_failure_releases_opened(self, events):
        original = events.subscribe

        def flaky(channel, event_name, handler):
            if event_name == "build.fail":
                raise ConnectionError("gateway down")
            return original(channel, event_name, handler)

        events.subscribe = flaky
        multiplexer = BuildEventMultiplexer(events)

        with pytest.raises(ConnectionError):
            multiplexer.on_build_event("acme.store@1.2.3", lambda *_: None)

        assert events.active == set()
        assert events.cancel_calls["logs"] == 1
        assert events.cancel_calls["build.start"] == 1
        assert events.cancel_calls["build.success"] == 1
