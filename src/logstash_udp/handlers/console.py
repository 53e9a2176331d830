"""Console handler helpers."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any

from ..core.levels import ensure_level

__all__ = ["ConsoleHandlerConfig", "build_console_handler"]

_DEFAULT_FMT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s"


@dataclass(frozen=True, slots=True)
class ConsoleHandlerConfig:
    """Configuration for the local echo handler."""

    stream: str = "stderr"
    level: int | str = logging.INFO


def build_console_handler(config: ConsoleHandlerConfig | None = None) -> logging.Handler:
    """Construct a :class:`logging.StreamHandler` based on ``config``."""

    cfg = config or ConsoleHandlerConfig()
    stream: Any
    if cfg.stream == "stdout":
        stream = sys.stdout
    elif cfg.stream == "stderr":
        stream = sys.stderr
    else:
        stream = None
    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(ensure_level(cfg.level))
    handler.setFormatter(logging.Formatter(_DEFAULT_FMT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler
