"""Build outcome resolver: drives one build attempt to exactly one outcome.

State machine
-------------
- Armed: subscriptions attached, trigger running, its response cached.
- ``start``: the start subscription and timer are released; the remote
  builder is alive, so wait for ``success`` / ``fail`` with no deadline.
- ``success`` or ``timeout``: release everything and return the trigger's
  response as cached at that moment (``None`` while the trigger is still
  running), never the event payload.  A start timeout without any
  ``start`` is an optimistic success, not an error.
- ``fail``: release everything, raise ``BuildFailedError`` with
  ``body.message`` or ``"Build fail"``.
- trigger raises first: release everything, re-raise the same error.

The first terminal source wins.  The ``outcome`` future is the resolved
flag: it completes once and every inbound signal checks it before acting.
Stragglers delivered after a non-atomic transport cancel are ignored, and
so is a trigger error raised after the outcome is settled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from toolbelt.build.multiplexer import BuildEventMultiplexer
from toolbelt.errors import BuildFailedError
from toolbelt.models.build import ALL_EVENTS, BuildEvent, BuildMessage

logger = logging.getLogger(__name__)

R = TypeVar("R")


def _cached_response(trigger: asyncio.Future[R] | None) -> R | None:
    if trigger is None or not trigger.done() or trigger.cancelled():
        return None
    if trigger.exception() is not None:
        return None
    return trigger.result()


def _resolved_ok(outcome: asyncio.Future[Any]) -> bool:
    return outcome.done() and not outcome.cancelled() and outcome.exception() is None


class BuildOutcomeResolver:
    """Resolves ``listen_build`` calls against a multiplexer.

    Each call owns an independent watch session; concurrent calls for the
    same app are not deduplicated.
    """

    def __init__(self, multiplexer: BuildEventMultiplexer) -> None:
        self._multiplexer = multiplexer
        self._detached: set[asyncio.Future[Any]] = set()

    async def listen_build(
        self,
        identifier: str,
        trigger_build: Callable[[], Awaitable[R]],
    ) -> R | None:
        """Trigger a build for ``identifier`` and wait for its outcome.

        Returns the trigger's response on success (or start timeout), or
        ``None`` when the build resolved before the trigger completed.  A
        trigger still running at that point is left to finish on its own;
        its result and any error it raises are discarded.

        Raises
        ------
        BuildFailedError
            If the builder publishes ``build.fail``.
        Exception
            Whatever ``trigger_build`` raised, unchanged, if it raised first.
        """
        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[R | None] = loop.create_future()
        trigger: asyncio.Future[R] | None = None

        def on_event(kind: BuildEvent, message: BuildMessage | None) -> None:
            if outcome.done():
                logger.debug("Ignoring %s for %s after resolution", kind.value, identifier)
                return
            if kind is BuildEvent.START:
                logger.debug("Build of %s started", identifier)
                unlisten(BuildEvent.START, BuildEvent.TIMEOUT)
            elif kind in (BuildEvent.SUCCESS, BuildEvent.TIMEOUT):
                unlisten(*ALL_EVENTS)
                if kind is BuildEvent.TIMEOUT:
                    logger.debug("No build start for %s, assuming success", identifier)
                outcome.set_result(_cached_response(trigger))
            elif kind is BuildEvent.FAIL:
                reason = (message or BuildMessage()).fail_reason
                unlisten(*ALL_EVENTS)
                outcome.set_exception(BuildFailedError(reason))

        def on_trigger_done(task: asyncio.Future[R]) -> None:
            if task.cancelled():
                return
            exc = task.exception()
            if exc is None:
                return
            if outcome.done():
                logger.debug("Ignoring trigger error for %s after resolution: %r", identifier, exc)
                return
            unlisten(*ALL_EVENTS)
            outcome.set_exception(exc)

        unlisten = self._multiplexer.on_build_event(identifier, on_event)
        try:
            trigger = asyncio.ensure_future(trigger_build())
            trigger.add_done_callback(on_trigger_done)
            return await outcome
        finally:
            unlisten(*ALL_EVENTS)
            if trigger is not None and not trigger.done():
                if _resolved_ok(outcome):
                    self._detached.add(trigger)
                    trigger.add_done_callback(self._detached.discard)
                else:
                    trigger.cancel()
