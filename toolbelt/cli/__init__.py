"""Toolbelt CLI: Typer-based command-line interface.

Provides the ``toolbelt`` command with subcommands for creating app
manifests, managing workspaces, publishing and installing apps, and
generating package.json.

All output uses Rich for formatted terminal display.
"""
