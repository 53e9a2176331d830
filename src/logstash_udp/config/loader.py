"""Configuration loading pipeline.

Sources are merged in increasing precedence: built-in defaults, the user
config directory, ``logstash_udp.{toml,yaml,yml}`` in the working directory,
``[tool.logstash_udp]`` in ``pyproject.toml``, ``LOGSTASH_UDP__SECTION__KEY``
environment variables and finally explicit overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Mapping, Tuple

from platformdirs import user_config_dir

from .schema import Settings, build_config, default_config, parse_bool, parse_port, parse_stacktrace_length

try:  # pragma: no cover
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[no-redef]

try:  # pragma: no cover
    import yaml
except ModuleNotFoundError:  # pragma: no cover
    yaml = None  # type: ignore[assignment]

__all__ = ["load_configuration"]

_APP_NAME = "logstash_udp"
_ENV_PREFIX = "LOGSTASH_UDP__"
_SUFFIXES = (".toml", ".yaml", ".yml")

# Environment values are text. Only fields with a numeric or boolean type are
# converted here; everything else reaches the schema parsers verbatim.
_ENV_COERCERS: Dict[Tuple[str, ...], Callable[[str], Any]] = {
    ("logstash", "port"): parse_port,
    ("logstash", "stacktrace_length"): parse_stacktrace_length,
    ("logstash", "enabled"): parse_bool,
    ("logstash", "append_class_information"): parse_bool,
    ("logstash", "level"): str.strip,
    ("console", "enabled"): parse_bool,
    ("console", "level"): str.strip,
    ("console", "stream"): str.strip,
    ("logging", "capture_warnings"): parse_bool,
    ("logging", "root", "level"): str.strip,
}


def _read_toml(path: Path) -> Any:
    with path.open("rb") as fh:
        return tomllib.load(fh)


def _read_yaml(path: Path) -> Any:
    if yaml is None:
        return None
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def _read(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    data = _read_toml(path) if path.suffix == ".toml" else _read_yaml(path)
    if not isinstance(data, Mapping):
        return {}
    return {str(key): value for key, value in data.items()}


def _config_files() -> Iterator[Path]:
    """Yield candidate files, lowest precedence first."""

    user_dir = Path(user_config_dir(_APP_NAME))
    for directory in (user_dir, Path.cwd()):
        for suffix in _SUFFIXES:
            yield directory / f"{_APP_NAME}{suffix}"


def _pyproject_section() -> Dict[str, Any]:
    section = _read(Path("pyproject.toml")).get("tool", {})
    if isinstance(section, Mapping):
        section = section.get(_APP_NAME, {})
    if not isinstance(section, Mapping):
        return {}
    return {str(key): value for key, value in section.items()}


def _env_section() -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for env_key, raw_value in os.environ.items():
        if not env_key.startswith(_ENV_PREFIX):
            continue
        path = tuple(segment.lower() for segment in env_key[len(_ENV_PREFIX) :].split("__"))
        coerce = _ENV_COERCERS.get(path)
        target = data
        for segment in path[:-1]:
            target = target.setdefault(segment, {})
        target[path[-1]] = coerce(raw_value) if coerce else raw_value
    return data


def _deep_merge(base: Dict[str, Any], incoming: Mapping[str, Any]) -> Dict[str, Any]:
    for key, value in incoming.items():
        current = base.get(key)
        if isinstance(value, Mapping):
            base[key] = _deep_merge(dict(current) if isinstance(current, Mapping) else {}, value)
        else:
            base[key] = value
    return base


def load_configuration(overrides: Mapping[str, Any] | None = None) -> Settings:
    """Load configuration from supported sources in precedence order."""

    merged = default_config()
    for path in _config_files():
        _deep_merge(merged, _read(path))
    _deep_merge(merged, _pyproject_section())
    _deep_merge(merged, _env_section())
    _deep_merge(merged, overrides or {})
    return build_config(merged)
