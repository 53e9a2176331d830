"""Read-only event view consumed by the JSON encoder."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from . import context as mdc

__all__ = ["LogEvent", "RecordEvent", "SourceLocation"]

_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "asctime",
        "message",
    }
)


@dataclass(frozen=True, slots=True)
class SourceLocation:
    class_name: str
    line_number: int


@runtime_checkable
class LogEvent(Protocol):
    """What the encoder needs to know about one log event."""

    @property
    def message(self) -> str: ...

    @property
    def logger_name(self) -> str: ...

    @property
    def level(self) -> int: ...

    @property
    def level_name(self) -> str: ...

    @property
    def source(self) -> SourceLocation | None: ...

    def stacktrace(self) -> str | None:
        """Rendered stack trace of the thrown error, ``None`` without one."""

    def context_value(self, key: str) -> str | None:
        """Contextual value for ``key``, ``None`` when absent."""


class RecordEvent:
    """Adapt a :class:`logging.LogRecord` to :class:`LogEvent`.

    Context values are looked up on the record first (``extra=`` or a
    :class:`~logstash_udp.core.context.ContextAdapter`) and then in the
    mapped diagnostic context of the emitting thread.
    """

    __slots__ = ("_record", "_formatter")

    def __init__(self, record: logging.LogRecord, formatter: logging.Formatter | None = None) -> None:
        self._record = record
        self._formatter = formatter or logging.Formatter()

    @property
    def record(self) -> logging.LogRecord:
        return self._record

    @property
    def message(self) -> str:
        return self._record.getMessage()

    @property
    def logger_name(self) -> str:
        return self._record.name

    @property
    def level(self) -> int:
        return self._record.levelno

    @property
    def level_name(self) -> str:
        return self._record.levelname

    @property
    def source(self) -> SourceLocation | None:
        module = getattr(self._record, "module", None)
        lineno = getattr(self._record, "lineno", None)
        if not module or lineno is None:
            return None
        return SourceLocation(class_name=module, line_number=lineno)

    def stacktrace(self) -> str | None:
        exc_info = self._record.exc_info
        if exc_info and exc_info[0] is not None:
            return self._formatter.formatException(exc_info)
        return self._record.exc_text or None

    def context_value(self, key: str) -> str | None:
        if key not in _STANDARD_ATTRS:
            value = self._record.__dict__.get(key)
            if value is not None:
                return str(value)
        return mdc.get(key)
