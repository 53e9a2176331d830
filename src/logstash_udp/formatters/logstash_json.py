"""Compact JSON encoding of log events for Logstash."""

from __future__ import annotations

from typing import Any, Dict, List

from ..config.schema import LogstashConfig
from ..core.events import LogEvent

__all__ = [
    "ENCODING",
    "TRUNCATION_MARKER",
    "LogstashJSONEncoder",
    "escape",
    "truncate_stacktrace",
]

ENCODING = "utf-8"
TRUNCATION_MARKER = "...[truncated by logstash appender]"


def _build_escape_table() -> Dict[int, str]:
    table: Dict[int, str] = {}
    for start, stop in ((0x0000, 0x001F), (0x007F, 0x009F), (0x2000, 0x20FF)):
        for code in range(start, stop + 1):
            table[code] = f"\\u{code:04X}"
    table.update(
        {
            ord('"'): '\\"',
            ord("\\"): "\\\\",
            ord("\b"): "\\b",
            ord("\f"): "\\f",
            ord("\n"): "\\n",
            ord("\r"): "\\r",
            ord("\t"): "\\t",
            ord("/"): "\\/",
        }
    )
    return table


_ESCAPE_TABLE = _build_escape_table()


def escape(text: str) -> str:
    """Escape ``text`` for use inside a JSON string literal."""

    return text.translate(_ESCAPE_TABLE)


def truncate_stacktrace(stacktrace: str, length: int | None) -> str:
    """Cut ``stacktrace`` so that, marker included, it fits in ``length``.

    The marker is always appended once a length is set, even to traces that
    are already shorter. A length below the marker size yields the marker
    alone.
    """

    if length is None or length < 0:
        return stacktrace
    keep = max(min(len(stacktrace), length) - len(TRUNCATION_MARKER), 0)
    return stacktrace[:keep] + TRUNCATION_MARKER


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _append_field(parts: List[str], key: str, value: Any) -> None:
    parts.append("," if parts else "{")
    parts.append(f'"{escape(key)}":')
    text = "" if value is None else escape(str(value))
    parts.append(text if _is_number(value) else f'"{text}"')


class LogstashJSONEncoder:
    """Turn a :class:`LogEvent` into the JSON document Logstash receives.

    Fields are written in a fixed order: message, name, severity,
    severityText, then the optional application, environment, class
    information and stacktrace, then the configured context keys and
    finally the literal parameters. ``severity`` is the only unquoted
    value.
    """

    def __init__(self, config: LogstashConfig) -> None:
        self.config = config

    def render(self, event: LogEvent) -> str:
        cfg = self.config
        parts: List[str] = []
        _append_field(parts, "message", event.message)
        _append_field(parts, "name", event.logger_name)
        _append_field(parts, "severity", event.level)
        _append_field(parts, "severityText", event.level_name)

        if cfg.application is not None:
            _append_field(parts, "application", cfg.application)
        if cfg.environment is not None:
            _append_field(parts, "environment", cfg.environment)

        if cfg.append_class_information:
            source = event.source
            _append_field(parts, "className", source.class_name if source else None)
            _append_field(parts, "lineNumber", str(source.line_number) if source else None)

        stacktrace = event.stacktrace()
        if stacktrace is not None:
            _append_field(parts, "stacktrace", truncate_stacktrace(stacktrace, cfg.stacktrace_length))

        for key in cfg.mdc_keys:
            value = event.context_value(key)
            if value is not None:
                _append_field(parts, key, value)

        for key, value in cfg.parameters.items():
            _append_field(parts, key, value)

        parts.append("}")
        return "".join(parts)

    def encode(self, event: LogEvent) -> bytes:
        return self.render(event).encode(ENCODING)
