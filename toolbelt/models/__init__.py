"""Toolbelt data models: all Pydantic v2."""

from toolbelt.models.build import (
    ALL_EVENTS,
    DEFAULT_FAIL_REASON,
    FLOW_EVENTS,
    BuildEvent,
    BuildMessage,
)
from toolbelt.models.manifest import APP_NAME_PATTERN, AppLocator, Manifest
from toolbelt.models.workspace import WorkspaceMetadata

__all__ = [
    # build
    "BuildEvent",
    "BuildMessage",
    "ALL_EVENTS",
    "FLOW_EVENTS",
    "DEFAULT_FAIL_REASON",
    # manifest
    "APP_NAME_PATTERN",
    "AppLocator",
    "Manifest",
    # workspace
    "WorkspaceMetadata",
]
