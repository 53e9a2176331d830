"""Logstash UDP handler implementation."""

from __future__ import annotations

import logging
from logging.handlers import DatagramHandler
from typing import Any, Dict, Mapping

from ..config.schema import LogstashConfig, build_logstash_config
from ..core.diagnostics import SelfLoggingFilter
from ..core.events import RecordEvent
from ..core.levels import ensure_level
from ..core.validation import ConfigurationError, validate_logstash_config
from ..formatters.logstash_json import LogstashJSONEncoder
from ..transport.udp import UDPTransport

__all__ = ["LogstashUDPHandler", "build_logstash_handler", "create_handler"]

# Attribute names accepted by ``create_handler``, mapped to config keys.
_ATTRIBUTES = {
    "application": "application",
    "environment": "environment",
    "logstashHost": "host",
    "logstashPort": "port",
    "mdcKeys": "mdc_keys",
    "parameters": "parameters",
    "appendClassInformation": "append_class_information",
    "stacktraceLength": "stacktrace_length",
}


class LogstashUDPHandler(DatagramHandler):
    """Ship each record to Logstash as one JSON datagram.

    The destination is resolved and the socket opened when the handler is
    built. A handler whose setup failed drops every record without encoding
    it.
    """

    def __init__(self, config: LogstashConfig, *, transport: UDPTransport | None = None) -> None:
        validate_logstash_config(config)
        super().__init__(config.host, config.port)
        self.config = config
        self.encoder = LogstashJSONEncoder(config)
        self.transport = transport if transport is not None else UDPTransport(config.host, config.port).open()
        self.addFilter(SelfLoggingFilter())

    @property
    def enabled(self) -> bool:
        return self.transport.enabled

    def makePickle(self, record: logging.LogRecord) -> bytes:  # type: ignore[override]
        return self.encoder.encode(RecordEvent(record, self.formatter))

    def send(self, s: bytes) -> None:  # type: ignore[override]
        self.transport.send(s)

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        if not self.transport.enabled:
            return
        try:
            self.send(self.makePickle(record))
        except Exception:
            self.handleError(record)

    def close(self) -> None:  # type: ignore[override]
        self.acquire()
        try:
            self.transport.close()
        finally:
            self.release()
        super().close()


def build_logstash_handler(config: LogstashConfig, *, level: int | str = logging.NOTSET) -> logging.Handler:
    handler = LogstashUDPHandler(config)
    handler.setLevel(ensure_level(level))
    return handler


def create_handler(attributes: Mapping[str, Any], *, name: str | None = None) -> LogstashUDPHandler:
    """Build a handler from textual attributes such as ``logstashPort="5959"``.

    Raises :class:`ConfigurationError` for unknown attributes, a missing or
    non-numeric port, a malformed boolean or a non-numeric stacktrace length;
    no socket is opened in that case.
    """

    data: Dict[str, Any] = {}
    for key, value in attributes.items():
        target = _ATTRIBUTES.get(key)
        if target is None:
            raise ConfigurationError(f"Unknown logstash attribute '{key}'")
        data[target] = value

    handler = LogstashUDPHandler(build_logstash_config(data))
    if name:
        handler.set_name(name)
    return handler
