"""Bridge layer between Toolbelt and the platform event gateway.

Modules
-------
sse
    ``EventSource`` subscribes to named builder events and to filtered
    app log lines over Server-Sent Events.  Every subscription returns
    an idempotent unsubscribe callable; there is no reconnection.
"""

from toolbelt.bridge.sse import EventSource, ServerSentEvent, iter_sse_events

__all__ = ["EventSource", "ServerSentEvent", "iter_sse_events"]
