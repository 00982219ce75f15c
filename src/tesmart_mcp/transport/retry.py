"""Polling request executor.

The switch sometimes answers before the awaited data is in its reply, with
stray noise, or not at all. :class:`RequestExecutor` resends a request
until a reply satisfies a validation predicate or the attempt budget runs
out.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from ..config import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY, DeviceConfig
from ..exceptions import DecodeError, NoValidReplyError, TransportError, ValidationError
from ..protocol.parser import decode_key_value, decode_status_byte, printable_text, strip_nul
from .tcp_connection import TCPConnection

logger = logging.getLogger(__name__)


class Connection(Protocol):
    def send(self, payload: bytes) -> bytes: ...


@dataclass(frozen=True)
class Reply:
    """A reply that passed validation."""

    data: bytes
    attempts: int

    @property
    def text(self) -> str:
        return printable_text(self.data)

    def __repr__(self) -> str:
        return f"Reply(data={self.data.hex(' ')}, attempts={self.attempts})"


Validator = Callable[[bytes], bool]


def has_printable(data: bytes) -> bool:
    """Accept any reply with at least one printable character."""
    return bool(printable_text(data))


def expect_text(pattern: str) -> Validator:
    """Accept replies whose printable text contains ``pattern``."""

    def validate(data: bytes) -> bool:
        return pattern in printable_text(data)

    return validate


def expect_bytes(pattern: bytes) -> Validator:
    """Accept replies containing the literal ``pattern``; binary-safe."""

    def validate(data: bytes) -> bool:
        return pattern in data

    return validate


def expect_status_frame(data: bytes) -> bool:
    """Accept only a complete, terminated status frame.

    A reply cut off before its status byte raises :class:`DecodeError`,
    which the executor counts as a rejected attempt.
    """
    decode_status_byte(data)
    return True


def expect_key_value(key: str) -> Validator:
    """Accept replies carrying a complete ``KEY:value;`` pair."""

    def validate(data: bytes) -> bool:
        decode_key_value(data, key)
        return True

    return validate


class RequestExecutor:
    """Sends a request until a valid reply arrives.

    Each attempt is bounded by the connection timeout, so worst-case latency
    is ``max_attempts * (connection timeout + retry_delay)``.
    """

    def __init__(
        self,
        connection: Connection,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ) -> None:
        if max_attempts < 1:
            raise ValidationError(f"max_attempts must be at least 1, got {max_attempts}")
        self._connection = connection
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay

    @classmethod
    def from_config(cls, config: DeviceConfig) -> RequestExecutor:
        return cls(
            TCPConnection.from_config(config),
            max_attempts=config.max_attempts,
            retry_delay=config.retry_delay,
        )

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def execute(self, payload: bytes, validate: Validator | None = None) -> Reply:
        """Send ``payload`` until ``validate`` accepts a non-empty reply.

        Args:
            payload: Encoded command bytes.
            validate: Predicate over the NUL-stripped reply. Defaults to
                :func:`has_printable`.

        Returns:
            The first accepted :class:`Reply`.

        Raises:
            NoValidReplyError: After ``max_attempts`` rejected replies.
        """
        if validate is None:
            validate = has_printable

        data = b""
        for attempt in range(1, self._max_attempts + 1):
            try:
                data = strip_nul(self._connection.send(payload))
            except TransportError as e:
                logger.debug("Attempt %d/%d: %s", attempt, self._max_attempts, e)
                data = b""

            if data and self._accepts(validate, data):
                logger.debug(
                    "Got a valid answer after %d attempt(s): %r", attempt, data
                )
                return Reply(data=data, attempts=attempt)

            logger.debug(
                "Attempt %d/%d rejected: raw=%r printable=%r",
                attempt,
                self._max_attempts,
                data,
                printable_text(data),
            )
            if attempt < self._max_attempts:
                time.sleep(self._retry_delay)

        logger.warning(
            "No valid reply to %r after %d attempt(s)", payload, self._max_attempts
        )
        raise NoValidReplyError(payload, self._max_attempts, data)

    @staticmethod
    def _accepts(validate: Validator, data: bytes) -> bool:
        try:
            return bool(validate(data))
        except DecodeError as e:
            logger.debug("Reply rejected: %s", e)
            return False


def execute_with_retry(
    host: str,
    port: int,
    payload: bytes,
    validate: Validator | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    retry_delay: float = DEFAULT_RETRY_DELAY,
) -> Reply:
    """One-off helper: poll ``host:port`` with ``payload`` until a valid reply."""
    executor = RequestExecutor(
        TCPConnection(host, port), max_attempts=max_attempts, retry_delay=retry_delay
    )
    return executor.execute(payload, validate)
