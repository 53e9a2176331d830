"""Mapped diagnostic context and a context-aware logging adapter."""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Tuple

__all__ = [
    "ContextAdapter",
    "bind",
    "clear",
    "get",
    "inject_context",
    "put",
    "remove",
    "snapshot",
]

_EMPTY: Mapping[str, str] = MappingProxyType({})

_MDC: contextvars.ContextVar[Mapping[str, str]] = contextvars.ContextVar("logstash_udp_mdc", default=_EMPTY)


# -- Mapped diagnostic context ---------------------------------------------
# Every mutation installs a fresh mapping so copies taken by other threads or
# tasks never observe later changes.
def put(key: str, value: Any) -> None:
    current = dict(_MDC.get())
    current[key] = str(value)
    _MDC.set(MappingProxyType(current))


def get(key: str) -> str | None:
    return _MDC.get().get(key)


def remove(key: str) -> None:
    current = _MDC.get()
    if key not in current:
        return
    updated = {k: v for k, v in current.items() if k != key}
    _MDC.set(MappingProxyType(updated))


def clear() -> None:
    _MDC.set(_EMPTY)


def snapshot() -> Mapping[str, str]:
    """Return a read-only view of the current context values."""

    return _MDC.get()


@contextmanager
def bind(**values: Any) -> Iterator[Mapping[str, str]]:
    """Temporarily add ``values`` to the context for the enclosed block."""

    merged = dict(_MDC.get())
    merged.update({key: str(value) for key, value in values.items()})
    token = _MDC.set(MappingProxyType(merged))
    try:
        yield _MDC.get()
    finally:
        _MDC.reset(token)


# -- Logger adapter ----------------------------------------------------------
class ContextAdapter(logging.LoggerAdapter):
    """Logger adapter that keeps persistent context for one logger.

    The context is merged into the ``extra`` mapping of every call, so the
    Logstash handler finds it through record attributes. Per-call ``extra``
    values win over the persistent ones.
    """

    def __init__(self, logger: logging.Logger, *, base_context: Mapping[str, Any] | None = None) -> None:
        super().__init__(logger, {})
        self._context: Dict[str, Any] = dict(base_context or {})

    @property
    def context(self) -> Mapping[str, Any]:
        return MappingProxyType(self._context)

    def set_context(self, ctx: Mapping[str, Any] | str) -> None:
        if isinstance(ctx, str):
            self._context = self._parse_ctx_string(ctx)
        else:
            self._context = dict(ctx)

    def add_context(self, **kwargs: Any) -> None:
        self._context.update(kwargs)

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> Tuple[str, MutableMapping[str, Any]]:
        call_extra = kwargs.get("extra")
        merged: Dict[str, Any] = dict(self._context)
        if isinstance(call_extra, Mapping):
            merged.update(call_extra)
        kwargs["extra"] = merged
        return msg, kwargs

    @staticmethod
    def _parse_ctx_string(value: str) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for part in value.strip().split():
            if "=" not in part:
                continue
            key, raw = part.split("=", 1)
            result[key] = raw
        return result


def inject_context(logger: logging.Logger, *, base_context: Mapping[str, Any] | None = None) -> ContextAdapter:
    """Return a :class:`ContextAdapter` wrapping ``logger``."""

    return ContextAdapter(logger, base_context=base_context)
