"""Shared test fixtures for Toolbelt."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from toolbelt.build.multiplexer import BUILDER_CHANNEL, BuildEventMultiplexer
from toolbelt.build.resolver import BuildOutcomeResolver
from toolbelt.config import ToolbeltConfig


class FakeEventSource:
    """Records subscriptions and cancels; ``emit`` plays the builder."""

    def __init__(self) -> None:
        self.handlers: dict[tuple[str, str], Callable[[Any], None]] = {}
        self.log_subscriptions: list[tuple[str, str]] = []
        self.cancel_calls: Counter[str] = Counter()
        self.active: set[str] = set()

    def subscribe(
        self, channel: str, event_name: str, handler: Callable[[Any], None]
    ) -> Callable[[], None]:
        self.handlers[(channel, event_name)] = handler
        self.active.add(event_name)

        def cancel() -> None:
            self.cancel_calls[event_name] += 1
            self.active.discard(event_name)

        return cancel

    def subscribe_logs(self, level: str, filter_key: str) -> Callable[[], None]:
        self.log_subscriptions.append((level, filter_key))
        self.active.add("logs")

        def cancel() -> None:
            self.cancel_calls["logs"] += 1
            self.active.discard("logs")

        return cancel

    def emit(self, event_name: str, message: Any = None, *, force: bool = False) -> None:
        """Deliver an event; cancelled subscriptions stay silent unless ``force``."""
        if event_name not in self.active and not force:
            return
        self.handlers[(BUILDER_CHANNEL, event_name)](message)


@pytest.fixture
def events() -> FakeEventSource:
    return FakeEventSource()


@pytest.fixture
def make_resolver(events: FakeEventSource) -> Callable[..., BuildOutcomeResolver]:
    """Factory fixture: a resolver over the fake source with a chosen start timeout."""

    def _factory(start_timeout: float = 5.0, log_level: str = "info") -> BuildOutcomeResolver:
        multiplexer = BuildEventMultiplexer(
            events, log_level=log_level, start_timeout=start_timeout
        )
        return BuildOutcomeResolver(multiplexer)

    return _factory


@pytest.fixture
def settings(tmp_path: Path) -> ToolbeltConfig:
    """Settings isolated from the developer's environment."""
    return ToolbeltConfig(
        _env_file=None,
        account="acme",
        workspace="dev",
        token="test-token",
        config_dir=tmp_path / "config",
    )


@pytest.fixture
def app_id() -> str:
    return "acme.store@1.2.3"
