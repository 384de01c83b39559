"""Toolbelt: command-line client for the app platform.

Scaffolds app manifests, manages workspaces, and publishes or installs
apps while watching the remote builder for the outcome:
  - Build monitoring over Server-Sent Events (start / success / fail / logs)
  - Workspace create / list against the workspaces API
  - Registry publish and app install with build tracking
  - package.json generation from manifest.json
"""

__version__ = "0.5.0"
__author__ = "Toolbelt contributors"
__description__ = "Command-line client for the app platform"

from toolbelt.build.resolver import BuildOutcomeResolver
from toolbelt.cli.app import app as cli

__all__ = ["BuildOutcomeResolver", "cli", "__version__"]
