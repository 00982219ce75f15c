"""Shared fixtures: a scripted fake switch and a local TCP server."""

from __future__ import annotations

import socketserver
import sys
import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from tesmart_mcp.config import DeviceConfig
from tesmart_mcp.device import TESmartSwitch
from tesmart_mcp.protocol.framing import PREAMBLE, RESPONSE_TOKEN, TERMINATOR
from tesmart_mcp.transport.retry import RequestExecutor


def _pad_quad(value: str) -> str:
    return ".".join(f"{int(octet):03d}" for octet in value.split("."))


class FakeSwitch:
    """In-memory stand-in for the device, speaking the wire protocol.

    Network values are reported zero-padded the way the hardware does.
    """

    def __init__(self, current_input: int = 1) -> None:
        self.current_input = current_input
        self.network = {
            "IP": "192.168.1.10",
            "PT": "5000",
            "MA": "255.255.255.0",
            "GW": "192.168.1.1",
        }
        self.buzzer: int | None = None
        self.led_timeout: int | None = None
        self.input_detection: int | None = None
        self.follow_switch = True
        self.apply_sets = True
        self.ack_sets = True
        self.sent: list[bytes] = []

    def send(self, payload: bytes) -> bytes:
        self.sent.append(payload)
        if payload.startswith(PREAMBLE) and len(payload) == 6:
            return self._binary(payload[3], payload[4])
        return self._ascii(payload.decode("ascii"))

    def _binary(self, opcode: int, param: int) -> bytes:
        if opcode == 0x10:
            return PREAMBLE + bytes([RESPONSE_TOKEN, self.current_input - 1, TERMINATOR])
        if opcode == 0x01 and self.follow_switch:
            self.current_input = param
        elif opcode == 0x02:
            self.buzzer = param
        elif opcode == 0x03:
            self.led_timeout = param
        elif opcode == 0x81:
            self.input_detection = param
        return b""

    def _ascii(self, text: str) -> bytes:
        key, _, rest = text.partition("?" if "?" in text else ":")
        if text.endswith("?;"):
            value = self.network[key]
            padded = f"{int(value):04d}" if key == "PT" else _pad_quad(value)
            return f"{key}:{padded};\x00".encode("ascii")
        if self.apply_sets:
            self.network[key] = rest.strip().rstrip(";")
        return b"OK\r\n" if self.ack_sets else b"ERR\r\n"


@pytest.fixture
def fake_switch() -> FakeSwitch:
    return FakeSwitch()


@pytest.fixture
def make_switch():
    """Build a TESmartSwitch over a fake connection, without retry delays."""

    def factory(connection, max_attempts: int = 10) -> TESmartSwitch:
        executor = RequestExecutor(connection, max_attempts=max_attempts, retry_delay=0)
        return TESmartSwitch(DeviceConfig(), executor=executor)

    return factory


class _Handler(socketserver.BaseRequestHandler):
    def handle(self):
        data = self.request.recv(1024)
        self.server.received.append(data)
        reply = self.server.reply_for(data)
        if reply:
            self.request.sendall(reply)
        for chunk in self.server.trickle:
            time.sleep(self.server.trickle_interval)
            try:
                self.request.sendall(chunk)
            except OSError:
                return
        if self.server.hold_open:
            time.sleep(self.server.hold_open)


@pytest.fixture
def tcp_device():
    """A local TCP server that answers each connection once, then closes.

    Set ``reply_for`` to a callable mapping request bytes to reply bytes and
    ``hold_open`` to keep the connection open for that many seconds.
    ``trickle`` is a list of chunks sent one per ``trickle_interval`` after
    the reply.
    """
    server = socketserver.ThreadingTCPServer(("127.0.0.1", 0), _Handler)
    server.daemon_threads = True
    server.received = []
    server.reply_for = lambda data: b""
    server.hold_open = 0
    server.trickle = []
    server.trickle_interval = 0.1
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()
        server.server_close()


@pytest.fixture
def server_module():
    """Import the server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Decorators return the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        sys.modules.pop("tesmart_mcp.server", None)
        import tesmart_mcp.server as server_mod

    yield server_mod
    sys.modules.pop("tesmart_mcp.server", None)
