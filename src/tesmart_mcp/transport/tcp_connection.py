"""Single-shot TCP exchange with a TESmart switch.

The device does not keep sessions: every request opens a fresh connection,
writes one command, collects whatever the device sends back until it closes
the socket, goes quiet or the attempt deadline passes, and closes.
"""

from __future__ import annotations

import logging
import socket
import time

from ..config import DEFAULT_TIMEOUT, DeviceConfig
from ..exceptions import TransportError

logger = logging.getLogger(__name__)

RECV_SIZE = 1024


class TCPConnection:
    """Sends raw payloads to the switch.

    Usage::

        conn = TCPConnection("192.168.1.10", 5000)
        reply = conn.send(b"IP?;")
    """

    def __init__(
        self,
        host: str,
        port: int,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout

    @classmethod
    def from_config(cls, config: DeviceConfig) -> TCPConnection:
        return cls(config.host, config.port, config.timeout)

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def timeout(self) -> float:
        return self._timeout

    def send(self, payload: bytes) -> bytes:
        """Send ``payload`` and return everything read before close or timeout.

        The timeout is a total deadline for the attempt, so a device that
        keeps trickling bytes cannot hold the connection open indefinitely.

        Args:
            payload: Encoded command bytes.

        Returns:
            The reply bytes, ``b""`` if the device sent nothing in time.

        Raises:
            TransportError: If the connection cannot be established or
                breaks while writing.
        """
        logger.debug("Sending %r to %s:%s", payload, self._host, self._port)
        deadline = time.monotonic() + self._timeout
        try:
            sock = socket.create_connection(
                (self._host, self._port), timeout=self._timeout
            )
        except OSError as e:
            raise TransportError(
                f"Could not connect to {self._host}:{self._port}: {e}"
            ) from e

        try:
            sock.sendall(payload)
            return self._read_until_idle(sock, deadline)
        except socket.timeout:
            return b""
        except OSError as e:
            raise TransportError(
                f"Exchange with {self._host}:{self._port} failed: {e}"
            ) from e
        finally:
            sock.close()

    def _read_until_idle(self, sock: socket.socket, deadline: float) -> bytes:
        """Read until the peer closes, goes quiet or ``deadline`` passes."""
        chunks: list[bytes] = []
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug("Read deadline reached for %s:%s", self._host, self._port)
                break
            sock.settimeout(remaining)
            try:
                chunk = sock.recv(RECV_SIZE)
            except (socket.timeout, ConnectionResetError):
                break
            if not chunk:
                break
            chunks.append(chunk)
        data = b"".join(chunks)
        logger.debug("Received %d byte(s): %s", len(data), data.hex(" ") or "(empty)")
        return data
