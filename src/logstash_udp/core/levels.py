"""Log level helpers."""

from __future__ import annotations

import logging


def get_level_by_name(name: str) -> int:
    """Resolve a logging level from a friendly name."""

    stripped = name.strip()
    if stripped.isdigit():
        return int(stripped)
    resolved = logging.getLevelName(stripped.upper())
    if isinstance(resolved, int):
        return resolved
    return logging.INFO


def ensure_level(value: int | str) -> int:
    """Normalize user supplied level values."""

    if isinstance(value, int):
        return value
    return get_level_by_name(value)
