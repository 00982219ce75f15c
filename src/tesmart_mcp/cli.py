"""Command-line interface for TESmart HDMI matrix switches.

Usage::

    tesmart [--host HOST] [--port PORT] [--debug] ACTION [ARGS]

Host and port default to ``TESMART_HOST`` / ``TESMART_PORT``.
"""

from __future__ import annotations

import argparse
import logging
import sys

from . import __version__
from .config import DeviceConfig
from .device import TESmartSwitch
from .exceptions import (
    DecodeError,
    NoValidReplyError,
    StateMismatchError,
    TESmartError,
    TransportError,
    ValidationError,
)
from .protocol.commands import NetworkField, parse_hex_payload

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_MISMATCH = 3
EXIT_NO_REPLY = 4
EXIT_TRANSPORT = 5

EXIT_CODES: list[tuple[type[TESmartError], int]] = [
    (ValidationError, EXIT_USAGE),
    (StateMismatchError, EXIT_MISMATCH),
    (NoValidReplyError, EXIT_NO_REPLY),
    (DecodeError, EXIT_NO_REPLY),
    (TransportError, EXIT_TRANSPORT),
]


def exit_code_for(error: TESmartError) -> int:
    for error_type, code in EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return 1


def _get_input(switch: TESmartSwitch, args) -> str:
    return f"Current input: {switch.get_current_input()}"


def _switch_input(switch: TESmartSwitch, args) -> str:
    return f"Switched to input {switch.switch_input(args.input_id)}"


def _mute(switch: TESmartSwitch, args) -> str:
    switch.mute()
    return "Buzzer muted"


def _unmute(switch: TESmartSwitch, args) -> str:
    switch.unmute()
    return "Buzzer unmuted"


def _sound(switch: TESmartSwitch, args) -> str:
    enabled = switch.set_buzzer(args.state)
    return f"Buzzer {'on' if enabled else 'off'}"


def _led_timeout(switch: TESmartSwitch, args) -> str:
    seconds = switch.set_led_timeout(args.timeout)
    return f"LED timeout set to {f'{seconds}s' if seconds else 'never'}"


def _input_detection(switch: TESmartSwitch, args) -> str:
    enabled = switch.set_input_detection(args.state)
    return f"Input detection {'enabled' if enabled else 'disabled'}"


def _nw_info(switch: TESmartSwitch, args) -> str:
    return str(switch.get_network_info())


def _getter(field: NetworkField):
    def run(switch: TESmartSwitch, args) -> str:
        return switch.get_network_field(field)

    return run


def _setter(field: NetworkField):
    def run(switch: TESmartSwitch, args) -> str:
        value = switch.set_network_field(field, args.value)
        return f"{field.label.capitalize()} updated to {value}"

    return run


def _exec(switch: TESmartSwitch, args) -> str:
    reply = switch.send_raw(parse_hex_payload(args.payload))
    return reply.hex(" ")


# (name, aliases, help, handler, positional argument)
ACTIONS = [
    ("get-input", ["g", "get", "state"], "Get current input ID", _get_input, None),
    ("switch-input", ["s", "sw", "switch"], "Set the current input ID", _switch_input,
     ("input_id", "input ID (1-16)")),
    ("mute", ["m"], "Mute buzzer", _mute, None),
    ("unmute", ["u"], "Unmute buzzer", _unmute, None),
    ("sound", ["beep", "b"], "Turn the buzzer on or off", _sound, ("state", "on|off")),
    ("led-timeout", ["l", "led", "light", "lights"], "Set LED timeout", _led_timeout,
     ("timeout", "10|30|never")),
    ("input-detection", ["d", "detection"], "Toggle input auto-detection",
     _input_detection, ("state", "on|off")),
    ("nw-info", ["n", "nw", "network-info", "get-network-info"],
     "Get the current network config", _nw_info, None),
    ("get-ip", ["ip", "i"], "Get the IP address", _getter(NetworkField.IP), None),
    ("get-port", ["port", "p"], "Get the TCP port", _getter(NetworkField.PORT), None),
    ("get-netmask", ["netmask", "nm", "ma", "mask"], "Get the netmask",
     _getter(NetworkField.NETMASK), None),
    ("get-gateway", ["gw"], "Get the gateway", _getter(NetworkField.GATEWAY), None),
    ("set-ip", ["sip", "si"], "Set the IP address", _setter(NetworkField.IP),
     ("value", "dotted-quad IP address")),
    ("set-port", ["sp"], "Set the TCP port", _setter(NetworkField.PORT),
     ("value", "port number (0-65535)")),
    ("set-netmask", ["snetmask", "snm"], "Set the netmask", _setter(NetworkField.NETMASK),
     ("value", "dotted-quad netmask")),
    ("set-gateway", ["sgateway", "sgw"], "Set the gateway", _setter(NetworkField.GATEWAY),
     ("value", "dotted-quad gateway")),
    ("exec", ["e", "c", "cmd", "command", "eval"], "Send arbitrary HEX command to the host",
     _exec, ("payload", 'hex bytes, e.g. "AA BB 03 10 00 EE"')),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tesmart",
        description="Control a TESmart HDMI matrix switch over TCP.",
    )
    parser.add_argument("-H", "--host", help="switch address (env TESMART_HOST)")
    parser.add_argument("-p", "--port", type=int, help="switch TCP port (env TESMART_PORT)")
    parser.add_argument("--timeout", type=float, help="per-attempt timeout in seconds")
    parser.add_argument(
        "-d", "-D", "--debug", action="store_true", help="log wire traffic to stderr"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    actions = parser.add_subparsers(dest="action", metavar="ACTION", required=True)
    for name, aliases, help_text, handler, positional in ACTIONS:
        sub = actions.add_parser(name, aliases=aliases, help=help_text)
        if positional is not None:
            sub.add_argument(positional[0], help=positional[1])
        sub.set_defaults(handler=handler)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = DeviceConfig.from_env().with_overrides(
            host=args.host, port=args.port, timeout=args.timeout
        )
        output = args.handler(TESmartSwitch(config), args)
    except TESmartError as e:
        print(f"Error: {e}", file=sys.stderr)
        return exit_code_for(e)

    print(output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
