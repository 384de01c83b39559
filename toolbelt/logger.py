"""Logging setup for the CLI.

Two handlers hang off the ``toolbelt`` logger:

- a Rich console handler (INFO, or DEBUG with ``--verbose``)
- a rotating debug file in the config directory, always at DEBUG

Modules log through ``logging.getLogger(__name__)`` and never configure
handlers themselves.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from toolbelt.config import ToolbeltConfig

DEBUG_LOG_FILE_NAME = "toolbelt_debug.txt"
_FILE_FORMAT = "%(asctime)s.%(msecs)03d - %(levelname)s:  %(message)s %(name)s"
_MAX_BYTES = 10_000_000

_ROOT_LOGGER = "toolbelt"


def debug_log_path(settings: ToolbeltConfig) -> Path:
    """Return the path of the rotating debug log file."""
    return settings.config_dir / DEBUG_LOG_FILE_NAME


def effective_level(settings: ToolbeltConfig, verbose: bool = False) -> str:
    """Console verbosity as a lowercase level name (``"debug"``, ``"info"``...)."""
    return "debug" if verbose else settings.log_level.lower()


def configure_logging(settings: ToolbeltConfig, verbose: bool = False) -> logging.Logger:
    """Install the console and debug-file handlers on the ``toolbelt`` logger.

    Safe to call more than once: previously installed handlers are
    replaced, not duplicated.
    """
    root = logging.getLogger(_ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.setLevel(logging.DEBUG)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        markup=False,
    )
    console_handler.setLevel(effective_level(settings, verbose).upper())
    root.addHandler(console_handler)

    try:
        settings.config_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            debug_log_path(settings),
            maxBytes=_MAX_BYTES,
            backupCount=1,
            encoding="utf-8",
        )
    except OSError as exc:
        root.warning("Debug log file disabled: %s", exc)
    else:
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%H:%M:%S"))
        file_handler.setLevel(logging.DEBUG)
        root.addHandler(file_handler)

    return root
