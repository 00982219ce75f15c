"""MCP server entry point for TESmart HDMI matrix switches.

Exposes the device operations as tools, device state as resources, and a
troubleshooting prompt via the Model Context Protocol using the official
Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import DeviceConfig
from .device import TESmartSwitch
from .exceptions import TESmartError
from .protocol.commands import parse_hex_payload, resolve_field

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "tesmart",
    instructions="MCP server for TESmart HDMI matrix switches controlled over TCP",
)


def _get_switch() -> TESmartSwitch:
    """Build a client for the switch configured in the environment."""
    return TESmartSwitch(DeviceConfig.from_env())


def _error(e: TESmartError) -> dict[str, Any]:
    logger.warning("%s: %s", type(e).__name__, e)
    return {"error": str(e), "error_type": type(e).__name__}


# ─── INPUT TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def get_current_input() -> dict[str, Any]:
    """Report which input (1-16) the switch is currently showing."""
    try:
        return {"input": _get_switch().get_current_input()}
    except TESmartError as e:
        return _error(e)


@mcp.tool()
def switch_input(input_id: int) -> dict[str, Any]:
    """Switch to another input and confirm the switch followed.

    Args:
        input_id: Input number (1-16).
    """
    try:
        current = _get_switch().switch_input(input_id)
    except TESmartError as e:
        return _error(e)
    return {"switched": True, "input": current}


# ─── FRONT PANEL TOOLS ───────────────────────────────────────────────

@mcp.tool()
def set_buzzer(enabled: bool) -> dict[str, Any]:
    """Enable or mute the key-press buzzer.

    Args:
        enabled: True to enable the buzzer, False to mute it.
    """
    try:
        return {"buzzer": _get_switch().set_buzzer(enabled)}
    except TESmartError as e:
        return _error(e)


@mcp.tool()
def mute_buzzer() -> dict[str, Any]:
    """Mute the buzzer."""
    return set_buzzer(False)


@mcp.tool()
def unmute_buzzer() -> dict[str, Any]:
    """Unmute the buzzer."""
    return set_buzzer(True)


@mcp.tool()
def set_led_timeout(timeout: str) -> dict[str, Any]:
    """Set how long the front panel LEDs stay lit.

    Args:
        timeout: "10", "30" (seconds) or "never".
    """
    try:
        seconds = _get_switch().set_led_timeout(timeout)
    except TESmartError as e:
        return _error(e)
    return {"led_timeout": seconds or "never"}


@mcp.tool()
def set_input_detection(enabled: bool) -> dict[str, Any]:
    """Enable or disable automatic switching to newly connected inputs.

    Args:
        enabled: True to enable auto-detection.
    """
    try:
        return {"input_detection": _get_switch().set_input_detection(enabled)}
    except TESmartError as e:
        return _error(e)


# ─── NETWORK TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def get_network_info() -> dict[str, Any]:
    """Read the switch's IP address, port, netmask and gateway."""
    try:
        return _get_switch().get_network_info().to_dict()
    except TESmartError as e:
        return _error(e)


@mcp.tool()
def get_network_field(field: str) -> dict[str, Any]:
    """Read a single network setting.

    Args:
        field: One of ip, port, netmask, gateway.
    """
    try:
        network_field = resolve_field(field)
        value = _get_switch().get_network_field(network_field)
    except TESmartError as e:
        return _error(e)
    return {network_field.label: value}


@mcp.tool()
def set_network_field(field: str, value: str) -> dict[str, Any]:
    """Change a network setting and confirm it by reading it back.

    The switch may become unreachable at the old address after changing
    its IP address or port.

    Args:
        field: One of ip, port, netmask, gateway.
        value: Dotted-quad address, or a port number 0-65535.
    """
    try:
        network_field = resolve_field(field)
        current = _get_switch().set_network_field(network_field, value)
    except TESmartError as e:
        return _error(e)
    return {"updated": True, network_field.label: current}


# ─── RAW TOOLS ───────────────────────────────────────────────────────

@mcp.tool()
def send_command(hex_payload: str) -> dict[str, Any]:
    """Send an arbitrary command and return the raw reply.

    Args:
        hex_payload: Command bytes as hex, e.g. "AA BB 03 10 00 EE".
    """
    try:
        payload = parse_hex_payload(hex_payload)
        reply = _get_switch().send_raw(payload)
    except TESmartError as e:
        return _error(e)
    return {
        "sent": payload.hex(" "),
        "reply_hex": reply.hex(" "),
        "reply_text": reply.decode("ascii", errors="replace"),
    }


# ─── RESOURCES ───────────────────────────────────────────────────────

@mcp.resource("tesmart://device/config")
def resource_device_config() -> str:
    """Connection settings used to reach the switch."""
    return json.dumps(DeviceConfig.from_env().to_dict(), indent=2)


@mcp.resource("tesmart://device/input")
def resource_current_input() -> str:
    """The currently active input."""
    return json.dumps(get_current_input(), indent=2)


@mcp.resource("tesmart://device/network")
def resource_network_info() -> str:
    """The switch's network configuration."""
    return json.dumps(get_network_info(), indent=2)


# ─── PROMPTS ─────────────────────────────────────────────────────────

@mcp.prompt()
def troubleshoot_connection() -> str:
    """Walk through diagnosing an unresponsive switch."""
    return """Read the tesmart://device/config resource to see which host and port are used.
Call get_current_input. Then interpret the result:
- TransportError: the address is wrong or the switch is powered off / unplugged.
- NoValidReplyError: the switch accepts connections but never answers correctly;
  power-cycle it and try again.
- StateMismatchError after switch_input: the switch is reachable but ignored the
  command; check that the requested input exists on this model.

Use send_command with "AA BB 03 10 00 EE" to see the raw reply if needed."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
