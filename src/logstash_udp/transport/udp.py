"""Fire-and-forget UDP transport."""

from __future__ import annotations

import socket
from typing import Any, Tuple

from ..core.diagnostics import status_logger

__all__ = ["UDPTransport"]


class UDPTransport:
    """Own one outbound UDP socket and one resolved destination.

    The destination is resolved and the socket created once, on
    :meth:`open`. If either step fails the transport stays disabled for
    good and every :meth:`send` is dropped silently; the failure has
    already been reported on the status logger. Send errors are logged
    per datagram and never raised.
    """

    def __init__(self, host: str, port: int) -> None:
        self.host = host
        self.port = port
        self._address: Tuple[Any, ...] | None = None
        self._sock: socket.socket | None = None
        self._opened = False

    @property
    def address(self) -> Tuple[Any, ...] | None:
        return self._address

    @property
    def enabled(self) -> bool:
        return self._sock is not None and self._address is not None

    def open(self) -> "UDPTransport":
        """Resolve the destination and create the socket; later calls do nothing."""

        if self._opened:
            return self
        self._opened = True
        try:
            infos = socket.getaddrinfo(self.host, self.port, type=socket.SOCK_DGRAM)
        except OSError as exc:
            status_logger.error("Could not find host: %s (%s)", self.host, exc)
            return self
        if not infos:
            status_logger.error("Could not find host: %s", self.host)
            return self
        family, socktype, proto, _, sockaddr = infos[0]

        try:
            sock = socket.socket(family, socktype, proto)
            sock.bind(("::", 0) if family == socket.AF_INET6 else ("0.0.0.0", 0))
        except OSError as exc:
            status_logger.error("Could not create UDP socket: %s", exc)
            return self

        self._address = sockaddr
        self._sock = sock
        status_logger.debug("UDP transport ready for %s:%s via %s", self.host, self.port, sockaddr[0])
        return self

    def send(self, payload: bytes) -> None:
        sock = self._sock
        if sock is None or self._address is None:
            return
        try:
            sock.sendto(payload, self._address)
        except OSError as exc:
            status_logger.warning("Could not send UDP packet to %s:%s: %s", self.host, self.port, exc)

    def close(self) -> None:
        sock, self._sock = self._sock, None
        if sock is None:
            return
        sock.close()
        status_logger.debug("UDP transport to %s:%s closed", self.host, self.port)

    def __enter__(self) -> "UDPTransport":
        return self.open()

    def __exit__(self, exc_type, exc: BaseException | None, tb) -> None:  # type: ignore[override]
        self.close()
