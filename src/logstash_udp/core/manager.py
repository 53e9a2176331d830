"""Logging manager responsible for runtime configuration and lifecycle."""

from __future__ import annotations

import logging
from typing import Dict

from ..config.schema import Settings
from ..handlers.console import build_console_handler
from ..handlers.logstash_udp import build_logstash_handler
from .context import ContextAdapter, inject_context
from .diagnostics import status_logger
from .levels import ensure_level
from .validation import validate_configuration


class LogManager:
    """Central coordinator that installs the sink on the root logger."""

    def __init__(self) -> None:
        self._settings: Settings | None = None
        self._handlers: Dict[str, logging.Handler] = {}

    @property
    def settings(self) -> Settings | None:
        return self._settings

    def handler(self, name: str) -> logging.Handler | None:
        return self._handlers.get(name)

    # ------------------------------------------------------------------
    def configure(self, settings: Settings) -> None:
        """Apply the supplied settings, replacing any previous ones."""

        validate_configuration(settings)
        self._teardown()

        handlers: Dict[str, logging.Handler] = {}
        if settings.logstash_enabled:
            if settings.logstash is not None:
                handlers["logstash"] = build_logstash_handler(settings.logstash, level=settings.logstash_level)
            else:
                status_logger.warning("Logstash handler enabled but no 'logstash.port' configured; skipping it")
        if settings.console_enabled:
            handlers["console"] = build_console_handler(settings.console)

        self._settings = settings
        self._handlers = handlers
        logging.captureWarnings(settings.capture_warnings)

        root_logger = logging.getLogger()
        root_logger.setLevel(ensure_level(settings.root_level))
        for handler in handlers.values():
            root_logger.addHandler(handler)

    # ------------------------------------------------------------------
    def shutdown(self) -> None:
        """Detach and close every handler installed by :meth:`configure`."""

        self._teardown()
        self._settings = None

    # ------------------------------------------------------------------
    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def get_context_logger(self, name: str, **context_kv: object) -> ContextAdapter:
        return inject_context(self.get_logger(name), base_context=context_kv)

    # ------------------------------------------------------------------
    def _teardown(self) -> None:
        root_logger = logging.getLogger()
        for handler in self._handlers.values():
            root_logger.removeHandler(handler)
            try:
                handler.flush()
            finally:
                handler.close()
        self._handlers.clear()


GLOBAL_MANAGER = LogManager()
