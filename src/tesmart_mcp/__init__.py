"""TESmart HDMI matrix switch control over TCP, with an MCP server front-end."""

from .config import DeviceConfig
from .device import TESmartSwitch, connect
from .exceptions import (
    DecodeError,
    NoValidReplyError,
    StateMismatchError,
    TESmartError,
    TransportError,
    ValidationError,
)
from .models.network import NetworkInfo
from .protocol.commands import NetworkField

__version__ = "0.1.0"
__all__ = [
    "DeviceConfig",
    "TESmartSwitch",
    "connect",
    "NetworkInfo",
    "NetworkField",
    "TESmartError",
    "ValidationError",
    "TransportError",
    "DecodeError",
    "NoValidReplyError",
    "StateMismatchError",
]
