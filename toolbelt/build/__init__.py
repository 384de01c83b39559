"""Build monitoring: turns one remote build into exactly one outcome.

Modules
-------
multiplexer
    ``BuildEventMultiplexer`` fans a watch request out into the builder's
    start / success / fail subscriptions, a filtered log stream and a
    start timeout, all owned by one ``WatchSession``.
resolver
    ``BuildOutcomeResolver.listen_build`` triggers the build, races the
    trigger against the inbound events and resolves or raises once.
"""

from toolbelt.build.multiplexer import (
    DEFAULT_START_TIMEOUT,
    BuildEventMultiplexer,
    EventSubscriber,
    WatchSession,
)
from toolbelt.build.resolver import BuildOutcomeResolver

__all__ = [
    "DEFAULT_START_TIMEOUT",
    "BuildEventMultiplexer",
    "BuildOutcomeResolver",
    "EventSubscriber",
    "WatchSession",
]
