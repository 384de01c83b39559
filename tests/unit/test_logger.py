"""Tests for logging setup: console and debug-file handlers."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler

from toolbelt.logger import configure_logging, debug_log_path, effective_level


class TestConfigureLogging:
    def test_installs_console_and_file_handlers(self, settings):
        root = configure_logging(settings)
        kinds = {type(h) for h in root.handlers}
        assert kinds == {RichHandler, RotatingFileHandler}
        console = next(h for h in root.handlers if isinstance(h, RichHandler))
        assert console.level == logging.INFO

    def test_verbose_console_is_debug(self, settings):
        root = configure_logging(settings, verbose=True)
        console = next(h for h in root.handlers if isinstance(h, RichHandler))
        assert console.level == logging.DEBUG

    def test_idempotent(self, settings):
        configure_logging(settings)
        root = configure_logging(settings)
        assert len(root.handlers) == 2

    def test_debug_file_written(self, settings):
        configure_logging(settings)
        logging.getLogger("toolbelt.test").debug("hello debug file")
        for handler in logging.getLogger("toolbelt").handlers:
            handler.flush()
        assert "hello debug file" in debug_log_path(settings).read_text()

    def test_effective_level(self, settings):
        assert effective_level(settings) == "info"
        assert effective_level(settings, verbose=True) == "debug"
