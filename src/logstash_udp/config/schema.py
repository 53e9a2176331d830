"""Configuration schema definition for logstash_udp."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple

from ..core.validation import ConfigurationError, validate_port
from ..handlers.console import ConsoleHandlerConfig

DEFAULT_CONFIG: Dict[str, Any] = {
    "logstash": {
        "enabled": True,
        "level": "NOTSET",
        "host": "localhost",
        "port": None,
        "application": None,
        "environment": None,
        "mdc_keys": [],
        "parameters": {},
        "append_class_information": False,
        "stacktrace_length": None,
    },
    "console": {
        "enabled": True,
        "stream": "stderr",
        "level": "INFO",
    },
    "logging": {
        "root": {
            "level": "INFO",
        },
        "capture_warnings": False,
    },
}

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off", ""}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


@dataclass(frozen=True, slots=True)
class LogstashConfig:
    """Static settings of one Logstash sink, fixed for its whole lifetime."""

    host: str
    port: int
    application: str | None = None
    environment: str | None = None
    mdc_keys: Tuple[str, ...] = ()
    parameters: Mapping[str, str] = field(default_factory=dict)
    append_class_information: bool = False
    stacktrace_length: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "application", _optional_str(self.application))
        object.__setattr__(self, "environment", _optional_str(self.environment))
        object.__setattr__(self, "mdc_keys", tuple(str(key) for key in self.mdc_keys))
        parameters = {str(key): str(value) for key, value in self.parameters.items()}
        object.__setattr__(self, "parameters", MappingProxyType(parameters))


@dataclass(frozen=True, slots=True)
class Settings:
    logstash: LogstashConfig | None
    logstash_enabled: bool
    logstash_level: str | int
    console: ConsoleHandlerConfig
    console_enabled: bool
    root_level: str | int
    capture_warnings: bool
    raw: Dict[str, Any] = field(repr=False, default_factory=dict)


# -- Value parsers ----------------------------------------------------------
def parse_mdc_keys(value: str | Iterable[str] | None) -> Tuple[str, ...]:
    """Parse a comma separated key list, dropping whitespace and blanks."""

    if value is None:
        return ()
    if isinstance(value, str):
        items: Iterable[str] = "".join(value.split()).split(",")
    else:
        items = ("".join(str(item).split()) for item in value)
    return tuple(item for item in items if item)


def parse_parameters(value: str | Mapping[str, Any] | None) -> Dict[str, str]:
    """Parse ``key=value`` pairs joined by ``&``.

    Pairs without ``=`` are ignored. A key given twice is a configuration
    error since the emitted JSON object would carry a duplicate member.
    """

    if value is None:
        return {}
    if isinstance(value, Mapping):
        return {str(key): str(item) for key, item in value.items()}

    result: Dict[str, str] = {}
    for pair in str(value).split("&"):
        key, sep, item = pair.partition("=")
        if not sep:
            continue
        if key in result:
            raise ConfigurationError(f"Duplicate parameter key '{key}'")
        result[key] = item
    return result


def parse_port(value: Any) -> int:
    if value is None:
        raise ConfigurationError("logstash port is required")
    if isinstance(value, bool):
        raise ConfigurationError("logstash port must be an integer value")
    if isinstance(value, int):
        return validate_port(value)
    try:
        port = int(str(value).strip())
    except ValueError:
        raise ConfigurationError("logstash port must be an integer value") from None
    return validate_port(port)


def parse_bool(value: Any, *, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Expected a boolean value, got {value!r}")


def parse_stacktrace_length(value: Any) -> int | None:
    """Parse the truncation length; a negative length disables truncation."""

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ConfigurationError("stacktrace length must be an integer value")
    if isinstance(value, int):
        length = value
    else:
        try:
            length = int(str(value).strip())
        except ValueError:
            raise ConfigurationError("stacktrace length must be an integer value") from None
    return length if length >= 0 else None


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


# -- Builders ---------------------------------------------------------------
def build_logstash_config(data: Mapping[str, Any]) -> LogstashConfig:
    """Build a :class:`LogstashConfig` from a ``logstash`` section mapping."""

    return LogstashConfig(
        host=str(data.get("host") or "localhost"),
        port=parse_port(data.get("port")),
        application=_optional_str(data.get("application")),
        environment=_optional_str(data.get("environment")),
        mdc_keys=parse_mdc_keys(data.get("mdc_keys")),
        parameters=parse_parameters(data.get("parameters")),
        append_class_information=parse_bool(data.get("append_class_information")),
        stacktrace_length=parse_stacktrace_length(data.get("stacktrace_length")),
    )


def _to_console(data: Mapping[str, Any]) -> tuple[ConsoleHandlerConfig, bool]:
    enabled = parse_bool(data.get("enabled"), default=True)
    config = ConsoleHandlerConfig(
        stream=str(data.get("stream", "stderr")),
        level=data.get("level", "INFO"),
    )
    return config, enabled


def _to_logstash(data: Mapping[str, Any]) -> tuple[LogstashConfig | None, bool, str | int]:
    enabled = parse_bool(data.get("enabled"), default=True)
    level = data.get("level", "NOTSET")
    if not enabled or data.get("port") is None:
        return None, enabled, level
    return build_logstash_config(data), enabled, level


def build_config(data: Mapping[str, Any]) -> Settings:
    logstash_data = data.get("logstash", {})
    if not isinstance(logstash_data, Mapping):
        logstash_data = {}
    console_data = data.get("console", {})
    if not isinstance(console_data, Mapping):
        console_data = {}
    logging_data = data.get("logging", {})
    if not isinstance(logging_data, Mapping):
        logging_data = {}
    root_data = logging_data.get("root", {})
    if not isinstance(root_data, Mapping):
        root_data = {}

    logstash, logstash_enabled, logstash_level = _to_logstash(logstash_data)
    console, console_enabled = _to_console(console_data)

    return Settings(
        logstash=logstash,
        logstash_enabled=logstash_enabled,
        logstash_level=logstash_level,
        console=console,
        console_enabled=console_enabled,
        root_level=root_data.get("level", "INFO"),
        capture_warnings=parse_bool(logging_data.get("capture_warnings"), default=False),
        raw=deepcopy({k: v for k, v in data.items()}),
    )
