"""Helpers shared by the commands: CLI state, async runner, build watching."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, NoReturn, TypeVar

import httpx
import typer
from rich.console import Console
from rich.markup import escape

from toolbelt.bridge.sse import EventSource
from toolbelt.build.multiplexer import BuildEventMultiplexer
from toolbelt.build.resolver import BuildOutcomeResolver
from toolbelt.config import ToolbeltConfig
from toolbelt.config import config as default_config
from toolbelt.errors import BuildFailedError, ToolbeltError
from toolbelt.logger import effective_level

logger = logging.getLogger(__name__)
console = Console()

T = TypeVar("T")


@dataclass
class CliState:
    """Per-invocation state stored on the Typer context."""

    settings: ToolbeltConfig
    verbose: bool = False

    @property
    def log_level(self) -> str:
        return effective_level(self.settings, self.verbose)


def get_state(ctx: typer.Context) -> CliState:
    if isinstance(ctx.obj, CliState):
        return ctx.obj
    return CliState(settings=default_config)


def require_account(settings: ToolbeltConfig) -> None:
    if not settings.account:
        fail("No account configured. Set TOOLBELT_ACCOUNT.")


def fail(message: str) -> NoReturn:
    """Print ``message`` as an error and exit with code 1."""
    console.print(f"[bold red]Error:[/bold red] {message}")
    raise typer.Exit(code=1)


@contextmanager
def reported_errors() -> Iterator[None]:
    """Turn toolbelt and network errors raised inside the block into exit code 1."""
    try:
        yield
    except BuildFailedError as exc:
        logger.debug("Build failed: %s", exc.reason)
        fail(f"Build failed: {escape(exc.reason)}")
    except ToolbeltError as exc:
        fail(escape(str(exc)))
    except httpx.HTTPError as exc:
        logger.debug("Request failed", exc_info=True)
        fail(escape(f"Request failed: {exc}"))


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run ``coro`` to completion under ``reported_errors``."""
    with reported_errors():
        return asyncio.run(coro)


async def watch_build(
    state: CliState,
    identifier: str,
    trigger_build: Callable[[], Awaitable[T]],
) -> T:
    """Trigger a build and follow the builder until it resolves."""
    settings = state.settings
    async with EventSource(settings) as events:
        multiplexer = BuildEventMultiplexer(
            events,
            log_level=state.log_level,
            channel=settings.builder_channel,
            start_timeout=settings.build_start_timeout,
        )
        return await BuildOutcomeResolver(multiplexer).listen_build(identifier, trigger_build)
