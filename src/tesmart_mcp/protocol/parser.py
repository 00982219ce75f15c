"""Reply parsing for device messages."""

from __future__ import annotations

import re
import string

from ..exceptions import DecodeError
from .commands import NetworkField
from .framing import STATUS_HEADER, TERMINATOR

# Status value reported for input 1 when its 0x00 byte was lost to NUL
# stripping, leaving the 0x11 response token in the status position.
WRAPPED_INPUT_STATUS = 0x11

_PRINTABLE = frozenset(string.printable.encode("ascii")) - frozenset(b"\t\n\r\x0b\x0c")


def strip_nul(data: bytes) -> bytes:
    """Remove the NUL bytes the device pads its replies with."""
    return data.replace(b"\x00", b"")


def printable_text(data: bytes) -> str:
    """Keep only printable ASCII characters (space included)."""
    return bytes(b for b in data if b in _PRINTABLE).decode("ascii")


def decode_status_byte(reply: bytes) -> int:
    """Extract the status byte from an input query reply.

    The reply follows ``AA BB 03 11 <status> EE``; the status is the byte
    right before the terminator that follows the header. Noise before or
    after the frame is ignored.

    Raises:
        DecodeError: If no status frame can be located.
    """
    start = reply.find(STATUS_HEADER)
    if start < 0:
        raise DecodeError(f"No status frame in reply {reply.hex(' ')!r}")
    end = reply.find(bytes([TERMINATOR]), start + len(STATUS_HEADER))
    if end < 0:
        raise DecodeError(f"Unterminated status frame in reply {reply.hex(' ')!r}")
    # With a stripped 0x00 status the terminator directly follows the header,
    # and the byte before it is the response token itself.
    return reply[end - 1]


def decode_input_id(status: int) -> int:
    """Translate a 0-indexed status byte into a 1-indexed input number."""
    if status == WRAPPED_INPUT_STATUS:
        return 1
    return status + 1


def decode_key_value(reply: bytes | str, key: str) -> str:
    """Extract ``<value>`` from a ``<key>:<value>;`` reply.

    Raises:
        DecodeError: If the key is absent from the printable content.
    """
    text = printable_text(reply) if isinstance(reply, bytes) else reply
    match = re.search(rf"{re.escape(key)}:([^;]+);", text)
    if match is None:
        raise DecodeError(f"No {key} value in reply {text!r}")
    return match.group(1).strip()


def sanitize_decimal(value: str) -> str:
    """Strip zero-padding from a decimal string: ``"0080"`` -> ``"80"``."""
    return value.strip().lstrip("0") or "0"


def sanitize_dotted_quad(value: str) -> str:
    """Strip zero-padding from every octet.

    ``"192.168.001.010"`` -> ``"192.168.1.10"``; ``"000"`` becomes ``"0"``.
    """
    return ".".join(sanitize_decimal(octet) for octet in value.strip().split("."))


def sanitize_field(field: NetworkField, value: str) -> str:
    """Canonicalize a network setting value as read from or sent to the device."""
    if field.is_dotted_quad:
        return sanitize_dotted_quad(value)
    return sanitize_decimal(value)


def parse_network_field(reply: bytes | str, field: NetworkField) -> str:
    """Decode and canonicalize a network setting reply."""
    return sanitize_field(field, decode_key_value(reply, field.value))
