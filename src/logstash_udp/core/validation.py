"""Configuration validation helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from ..config.schema import LogstashConfig, Settings

MAX_PORT = 65535


class ConfigurationError(ValueError):
    """Raised when configuration validation fails."""


def validate_port(port: int) -> int:
    if isinstance(port, bool) or not isinstance(port, int):
        raise ConfigurationError(f"logstash port must be an integer, got {port!r}")
    if not 0 <= port <= MAX_PORT:
        raise ConfigurationError(f"logstash port must be between 0 and {MAX_PORT}, got {port}")
    return port


def validate_logstash_config(config: LogstashConfig) -> None:
    """Ensure a handler configuration is usable before any socket is opened."""

    if not config.host:
        raise ConfigurationError("logstash host must not be empty")
    validate_port(config.port)
    if config.stacktrace_length is not None and config.stacktrace_length < 0:
        raise ConfigurationError(
            f"stacktrace length must be non-negative, got {config.stacktrace_length}"
        )
    for key in config.mdc_keys:
        if not key:
            raise ConfigurationError("mdc keys must not contain empty names")


def validate_configuration(settings: Settings) -> None:
    """Ensure the runtime settings are consistent."""

    if settings.logstash_enabled and settings.logstash is not None:
        validate_logstash_config(settings.logstash)
    elif not settings.console_enabled:
        raise ConfigurationError(
            "At least one handler must be enabled; set 'logstash.port' or enable 'console'"
        )
