"""Frame builders for the two TESmart wire grammars.

Binary frame layout::

    +-----------+--------+-------+------------+
    | Preamble  | Opcode | Param | Terminator |
    | AA BB 03  | 1 byte | 1 byte| EE         |
    +-----------+--------+-------+------------+

- Opcode: command identifier (see :class:`~.commands.Opcode`)
- Param: command argument, one byte
- Replies to the input query use the same layout with opcode 0x11 and the
  0-indexed current input as the param byte.

ASCII frames carry network settings as ``<KEY>?;`` (query),
``<KEY>: <value>;`` (set) and ``<KEY>:<value>;`` (reply).
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import ValidationError

PREAMBLE = b"\xAA\xBB\x03"
TERMINATOR = 0xEE
RESPONSE_TOKEN = 0x11
FRAME_SIZE = 6
STATUS_HEADER = PREAMBLE + bytes([RESPONSE_TOKEN])


def encode_binary(opcode: int, param: int) -> bytes:
    """Build a 6-byte binary frame.

    Args:
        opcode: Command identifier byte.
        param: Command argument byte.

    Returns:
        ``AA BB 03 <opcode> <param> EE``
    """
    for name, value in (("opcode", opcode), ("param", param)):
        if not 0 <= value <= 0xFF:
            raise ValidationError(f"{name} must be 0-255, got {value}")
    return PREAMBLE + bytes([opcode, param, TERMINATOR])


def encode_query(key: str) -> bytes:
    """Build an ASCII query frame, e.g. ``IP?;``."""
    return f"{key}?;".encode("ascii")


def encode_set(key: str, value: str) -> bytes:
    """Build an ASCII set frame, e.g. ``IP: 192.168.1.10;``."""
    return f"{key}: {value};".encode("ascii")


@dataclass(frozen=True)
class BinaryCommand:
    """A fixed-length binary command."""

    opcode: int
    param: int

    def encode(self) -> bytes:
        return encode_binary(self.opcode, self.param)

    def __repr__(self) -> str:
        return f"BinaryCommand(opcode=0x{self.opcode:02X}, param=0x{self.param:02X})"


@dataclass(frozen=True)
class AsciiCommand:
    """A variable-length ASCII command; a query when ``value`` is None."""

    key: str
    value: str | None = None

    @property
    def is_query(self) -> bool:
        return self.value is None

    def encode(self) -> bytes:
        if self.value is None:
            return encode_query(self.key)
        return encode_set(self.key, self.value)
