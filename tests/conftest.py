from __future__ import annotations

import logging
import os
import socket
from pathlib import Path
from typing import Iterator

import pytest

import logstash_udp.api as logstash_api
from logstash_udp import mdc
from logstash_udp.config import loader
from logstash_udp.core.manager import GLOBAL_MANAGER


class UDPReceiver:
    """Loopback UDP socket standing in for a Logstash input."""

    def __init__(self) -> None:
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(5.0)
        self.host, self.port = self.sock.getsockname()

    def receive(self) -> bytes:
        data, _ = self.sock.recvfrom(65535)
        return data

    def assert_nothing_received(self, timeout: float = 0.2) -> None:
        self.sock.settimeout(timeout)
        try:
            data, _ = self.sock.recvfrom(65535)
        except socket.timeout:
            return
        finally:
            self.sock.settimeout(5.0)
        pytest.fail(f"Unexpected datagram received: {data!r}")

    def close(self) -> None:
        self.sock.close()


@pytest.fixture
def udp_receiver() -> Iterator[UDPReceiver]:
    receiver = UDPReceiver()
    try:
        yield receiver
    finally:
        receiver.close()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    user_dir = tmp_path / "user-config"
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(user_dir))
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    for key in list(os.environ):
        if key.startswith("LOGSTASH_UDP__"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def reset_logstash_udp() -> Iterator[None]:
    yield
    GLOBAL_MANAGER.shutdown()
    logstash_api._CONFIGURED = False
    mdc.clear()
    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    logging.captureWarnings(False)
