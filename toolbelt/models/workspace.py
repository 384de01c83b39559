"""Workspace metadata returned by the workspaces API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class WorkspaceMetadata(BaseModel):
    """A named, isolated deployment environment inside an account."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    weight: int = 0
    production: bool = False
