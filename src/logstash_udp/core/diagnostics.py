"""Internal status logging for the sink itself."""

from __future__ import annotations

import logging
import sys

__all__ = [
    "PACKAGE_LOGGER_NAME",
    "STATUS_LOGGER_NAME",
    "SelfLoggingFilter",
    "StatusStreamHandler",
    "status_logger",
]

PACKAGE_LOGGER_NAME = "logstash_udp"
STATUS_LOGGER_NAME = f"{PACKAGE_LOGGER_NAME}.status"

_STATUS_FMT = "logstash_udp %(levelname)s: %(message)s"


class StatusStreamHandler(logging.StreamHandler):
    """Write to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        logging.Handler.__init__(self)

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr


def _build_status_logger() -> logging.Logger:
    logger = logging.getLogger(STATUS_LOGGER_NAME)
    if not any(isinstance(handler, StatusStreamHandler) for handler in logger.handlers):
        handler = StatusStreamHandler()
        handler.setFormatter(logging.Formatter(_STATUS_FMT))
        logger.addHandler(handler)
    # Diagnostics must not depend on the host's root handlers, which may be
    # nothing but the sink itself.
    logger.propagate = False
    return logger


status_logger = _build_status_logger()


class SelfLoggingFilter(logging.Filter):
    """Reject records emitted by this package's own loggers.

    Attached to the Logstash handler so a failing send never ships its own
    diagnostic back through the socket that just failed.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        name = record.name
        return not (name == PACKAGE_LOGGER_NAME or name.startswith(PACKAGE_LOGGER_NAME + "."))
