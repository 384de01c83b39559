"""Build event models: channel labels and builder payloads."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

DEFAULT_FAIL_REASON = "Build fail"


class BuildEvent(str, Enum):
    """Which channel produced a build notification."""

    START = "start"
    SUCCESS = "success"
    FAIL = "fail"
    TIMEOUT = "timeout"
    LOGS = "logs"


ALL_EVENTS: tuple[BuildEvent, ...] = tuple(BuildEvent)

# Events published by the builder on its channel as ``build.<kind>``.
FLOW_EVENTS: tuple[BuildEvent, ...] = (
    BuildEvent.START,
    BuildEvent.SUCCESS,
    BuildEvent.FAIL,
)


class BuildMessage(BaseModel):
    """Payload attached to start / success / fail notifications.

    The builder's schema is not fixed; unknown fields are kept and
    ``body`` may be anything, including absent.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    sender: str = ""
    key: str = ""
    subject: str = ""
    body: Any = None

    @classmethod
    def coerce(cls, payload: Any) -> BuildMessage:
        """Build a message from whatever the transport delivered."""
        if isinstance(payload, BuildMessage):
            return payload
        if isinstance(payload, dict):
            try:
                return cls.model_validate(payload)
            except ValidationError:
                return cls(body=payload.get("body"))
        return cls()

    @property
    def fail_reason(self) -> str:
        """Human-readable failure reason from ``body.message``."""
        if isinstance(self.body, dict):
            message = self.body.get("message")
            if isinstance(message, str) and message:
                return message
        return DEFAULT_FAIL_REASON
