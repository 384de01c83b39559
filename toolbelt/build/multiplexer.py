"""Build event multiplexer: one watch request, four subscriptions, one timer.

``on_build_event`` opens, in order:

1. a log-line subscription filtered by the app name (the part of the
   identifier before ``@``) at the configured verbosity,
2. ``build.start`` / ``build.success`` / ``build.fail`` subscriptions on
   the builder channel,
3. a start timer that reports ``TIMEOUT`` once unless cancelled first.

Everything it opens is owned by a ``WatchSession`` whose ``release``
method is handed back to the caller as the selective unsubscribe.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from toolbelt.models.build import ALL_EVENTS, FLOW_EVENTS, BuildEvent, BuildMessage

logger = logging.getLogger(__name__)

DEFAULT_START_TIMEOUT = 5.0
BUILDER_CHANNEL = "vtex.render-builder"

Unsubscribe = Callable[[], None]
BuildCallback = Callable[[BuildEvent, "BuildMessage | None"], None]


class EventSubscriber(Protocol):
    """What the multiplexer needs from the event transport."""

    def subscribe(
        self, channel: str, event_name: str, handler: Callable[[Any], None]
    ) -> Unsubscribe: ...

    def subscribe_logs(self, level: str, filter_key: str) -> Unsubscribe: ...


@dataclass
class WatchSession:
    """Cancel slots for one watch request, one per event kind.

    A slot is emptied before its cancel runs, so releasing a kind twice
    is a no-op.
    """

    start: Unsubscribe | None = None
    success: Unsubscribe | None = None
    fail: Unsubscribe | None = None
    logs: Unsubscribe | None = None
    timeout: Unsubscribe | None = None

    def release(self, *kinds: BuildEvent) -> None:
        """Cancel the subscription or timer behind each named kind."""
        for kind in kinds:
            cancel = getattr(self, kind.value)
            if cancel is None:
                continue
            setattr(self, kind.value, None)
            cancel()

    def pending(self) -> list[BuildEvent]:
        """Kinds whose subscription or timer is still held."""
        return [kind for kind in ALL_EVENTS if getattr(self, kind.value) is not None]


class BuildEventMultiplexer:
    """Fans one "watch this build" request out over the event transport.

    Parameters
    ----------
    events:
        The Event Subscription Facade (``EventSource`` or a test double).
    log_level:
        Verbosity for the app log stream (``"debug"``, ``"info"``...).
    channel:
        Builder channel that publishes ``build.<kind>`` events.
    start_timeout:
        Seconds to wait for ``build.start`` before reporting ``TIMEOUT``.
    """

    def __init__(
        self,
        events: EventSubscriber,
        *,
        log_level: str = "info",
        channel: str = BUILDER_CHANNEL,
        start_timeout: float = DEFAULT_START_TIMEOUT,
    ) -> None:
        self._events = events
        self._log_level = log_level
        self._channel = channel
        self._start_timeout = start_timeout

    @property
    def start_timeout(self) -> float:
        return self._start_timeout

    def on_build_event(
        self, identifier: str, callback: BuildCallback
    ) -> Callable[..., None]:
        """Attach a new watch session and return its selective unsubscribe."""
        session = WatchSession()
        app_name = identifier.split("@")[0]
        try:
            session.logs = self._events.subscribe_logs(self._log_level, app_name)
            for kind in FLOW_EVENTS:
                setattr(
                    session,
                    kind.value,
                    self._events.subscribe(
                        self._channel, f"build.{kind.value}", _forward(callback, kind)
                    ),
                )
            timer = asyncio.get_running_loop().call_later(
                self._start_timeout, callback, BuildEvent.TIMEOUT, None
            )
            session.timeout = timer.cancel
        except BaseException:
            session.release(*ALL_EVENTS)
            raise

        logger.debug(
            "Watching build of %s on %s (start timeout %.1fs)",
            identifier,
            self._channel,
            self._start_timeout,
        )
        return session.release


def _forward(callback: BuildCallback, kind: BuildEvent) -> Callable[[Any], None]:
    def handler(payload: Any) -> None:
        callback(kind, BuildMessage.coerce(payload))

    return handler
