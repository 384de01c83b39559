"""Exception hierarchy shared by the CLI commands and the build monitor."""

from __future__ import annotations


class ToolbeltError(RuntimeError):
    """Base class for errors reported to the user."""


class CommandError(ToolbeltError):
    """Raised when a command cannot proceed because of user input."""


class BuildFailedError(ToolbeltError):
    """Raised when the remote builder reports a failed build."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PlatformRequestError(ToolbeltError):
    """Raised when a platform API call returns a non-2xx response."""

    def __init__(self, status_code: int, code: str, message: str) -> None:
        super().__init__(message or f"Request failed with status {status_code}")
        self.status_code = status_code
        self.code = code
        self.message = message
