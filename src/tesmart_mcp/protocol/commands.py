"""Opcode constants and high-level command builders.

Binary commands share the 6-byte frame from :mod:`.framing`; network
settings use the ASCII grammar keyed by :class:`NetworkField`.
All builders validate their arguments and raise
:class:`~tesmart_mcp.exceptions.ValidationError` before anything is sent.
"""

from __future__ import annotations

import re
from enum import Enum, IntEnum

from ..exceptions import ValidationError
from .framing import AsciiCommand, BinaryCommand

MIN_INPUT = 1
MAX_INPUT = 16
MAX_PORT = 65535

DOTTED_QUAD_RE = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+$")
PORT_RE = re.compile(r"^[0-9]+$")


class Opcode(IntEnum):
    """Binary command identifiers."""

    SWITCH_INPUT = 0x01
    BUZZER = 0x02
    LED_TIMEOUT = 0x03
    GET_INPUT = 0x10
    INPUT_DETECTION = 0x81


class NetworkField(str, Enum):
    """ASCII keys of the network settings."""

    IP = "IP"
    PORT = "PT"
    NETMASK = "MA"
    GATEWAY = "GW"

    @property
    def label(self) -> str:
        return _FIELD_LABELS[self]

    @property
    def is_dotted_quad(self) -> bool:
        return self is not NetworkField.PORT


_FIELD_LABELS = {
    NetworkField.IP: "ip",
    NetworkField.PORT: "port",
    NetworkField.NETMASK: "netmask",
    NetworkField.GATEWAY: "gateway",
}

# Human-readable names accepted wherever a field is selected by name
FIELD_ALIASES: dict[str, NetworkField] = {
    "ip": NetworkField.IP,
    "port": NetworkField.PORT,
    "pt": NetworkField.PORT,
    "netmask": NetworkField.NETMASK,
    "mask": NetworkField.NETMASK,
    "ma": NetworkField.NETMASK,
    "gateway": NetworkField.GATEWAY,
    "gw": NetworkField.GATEWAY,
}

# LED timeout argument -> param byte
LED_TIMEOUTS: dict[str, int] = {
    "0": 0x00,
    "off": 0x00,
    "disable": 0x00,
    "never": 0x00,
    "10": 0x0A,
    "10s": 0x0A,
    "10-seconds": 0x0A,
    "30": 0x1E,
    "30s": 0x1E,
    "30-seconds": 0x1E,
}

_ON_WORDS = {"on", "enable", "enabled", "true", "1", "yes", "unmute"}
_OFF_WORDS = {"off", "disable", "disabled", "false", "0", "no", "mute"}


def parse_switch(value: bool | str) -> bool:
    """Interpret an on/off argument."""
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _ON_WORDS:
        return True
    if word in _OFF_WORDS:
        return False
    raise ValidationError(f"Invalid value {value!r}. Allowed values: on|off")


def resolve_field(field: NetworkField | str) -> NetworkField:
    """Look up a network field by enum, wire key or human-readable name."""
    if isinstance(field, NetworkField):
        return field
    name = str(field).strip().lower()
    if name in FIELD_ALIASES:
        return FIELD_ALIASES[name]
    raise ValidationError(
        f"Unknown network field {field!r}. Valid: {sorted(FIELD_ALIASES)}"
    )


def validate_input_id(input_id: int | str) -> int:
    """Return ``input_id`` as an int, checking it is 1-16."""
    try:
        value = int(str(input_id).strip())
    except ValueError:
        raise ValidationError(
            f"Invalid input ID {input_id!r}. Allowed values: {MIN_INPUT}-{MAX_INPUT}"
        ) from None
    if not MIN_INPUT <= value <= MAX_INPUT:
        raise ValidationError(
            f"Input ID must be {MIN_INPUT}-{MAX_INPUT}, got {value}"
        )
    return value


def validate_network_value(field: NetworkField, value: int | str) -> str:
    """Check a value destined for ``field`` and return its wire form."""
    text = str(value).strip()
    if field is NetworkField.PORT:
        if not PORT_RE.match(text) or int(text) > MAX_PORT:
            raise ValidationError(f"{text} is not a valid port number.")
        return text
    if not DOTTED_QUAD_RE.match(text):
        raise ValidationError(f"{text} is not a valid {field.label}.")
    return text


def encode_input_switch(input_id: int) -> bytes:
    """Encode the switch-input frame for ``input_id`` (1-16)."""
    return build_switch_input(input_id).encode()


def build_switch_input(input_id: int | str) -> BinaryCommand:
    """Build a SwitchInput command.

    The param byte is the 1-indexed input number, so inputs 1-9 map to
    0x01-0x09 and 10-16 to 0x0A-0x10.
    """
    return BinaryCommand(Opcode.SWITCH_INPUT, validate_input_id(input_id))


def build_get_input() -> BinaryCommand:
    """Build the current-input query."""
    return BinaryCommand(Opcode.GET_INPUT, 0x00)


def build_set_buzzer(enabled: bool | str) -> BinaryCommand:
    """Build a Buzzer command (0x01 on, 0x00 muted)."""
    return BinaryCommand(Opcode.BUZZER, 0x01 if parse_switch(enabled) else 0x00)


def build_set_led_timeout(timeout: int | str) -> BinaryCommand:
    """Build an LedTimeout command.

    Args:
        timeout: 0/"never" to disable, 10 or 30 seconds.
    """
    key = str(timeout).strip().lower()
    if key not in LED_TIMEOUTS:
        raise ValidationError(
            f"Invalid time {timeout!r}. It's either 10s, 30s or never"
        )
    return BinaryCommand(Opcode.LED_TIMEOUT, LED_TIMEOUTS[key])


def build_set_input_detection(enabled: bool | str) -> BinaryCommand:
    """Build an InputDetection command (0x01 on, 0x00 off)."""
    return BinaryCommand(
        Opcode.INPUT_DETECTION, 0x01 if parse_switch(enabled) else 0x00
    )


def build_query(field: NetworkField | str) -> AsciiCommand:
    """Build a network setting query, e.g. ``IP?;``."""
    return AsciiCommand(resolve_field(field).value)


def build_set_network_field(field: NetworkField | str, value: int | str) -> AsciiCommand:
    """Build a network setting update, e.g. ``PT: 5000;``."""
    field = resolve_field(field)
    return AsciiCommand(field.value, validate_network_value(field, value))


def parse_hex_payload(text: str) -> bytes:
    r"""Parse a user-supplied raw command.

    Accepts ``"AA BB 03 10 00 EE"``, ``"aabb031000ee"`` and the
    shell-escaped ``"\xaa\xbb\x03\x10\x00\xee"`` forms.
    """
    cleaned = re.sub(r"\\x|0x|[\s:,]", "", text.strip(), flags=re.IGNORECASE)
    if not cleaned or len(cleaned) % 2:
        raise ValidationError(f"Invalid hex command {text!r}")
    try:
        return bytes.fromhex(cleaned)
    except ValueError:
        raise ValidationError(f"Invalid hex command {text!r}") from None
