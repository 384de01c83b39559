"""Thin async REST clients for the platform APIs."""

from toolbelt.clients.apps import AppsClient
from toolbelt.clients.base import PlatformClient
from toolbelt.clients.registry import RegistryClient
from toolbelt.clients.workspaces import WorkspacesClient

__all__ = ["AppsClient", "PlatformClient", "RegistryClient", "WorkspacesClient"]
