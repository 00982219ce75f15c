"""Device operations for a TESmart HDMI matrix switch.

The switch holds all state; this client caches nothing. Mutations that can
be read back (active input, network settings) are verified by re-querying
the device, since the protocol gives no reliable acknowledgment.
"""

from __future__ import annotations

import logging

from .config import DeviceConfig
from .exceptions import NoValidReplyError, StateMismatchError, TransportError
from .models.network import NetworkInfo
from .protocol.commands import (
    NetworkField,
    build_get_input,
    build_query,
    build_set_buzzer,
    build_set_input_detection,
    build_set_led_timeout,
    build_set_network_field,
    build_switch_input,
    resolve_field,
)
from .protocol.framing import AsciiCommand, BinaryCommand
from .protocol.parser import (
    decode_input_id,
    decode_status_byte,
    parse_network_field,
    sanitize_field,
)
from .transport.retry import (
    Reply,
    RequestExecutor,
    Validator,
    expect_key_value,
    expect_status_frame,
    expect_text,
)

logger = logging.getLogger(__name__)

SET_OK_TOKEN = "OK"

class TESmartSwitch:
    """Operations catalog for one switch.

    Usage::

        switch = TESmartSwitch(DeviceConfig(host="192.168.1.10"))
        switch.switch_input(4)
        print(switch.get_network_info())
    """

    def __init__(
        self,
        config: DeviceConfig | None = None,
        executor: RequestExecutor | None = None,
    ) -> None:
        self._config = config or DeviceConfig()
        self._executor = executor or RequestExecutor.from_config(self._config)

    @property
    def config(self) -> DeviceConfig:
        return self._config

    @property
    def connection(self):
        return self._executor.connection

    # ─── INPUTS ──────────────────────────────────────────────────────

    def get_current_input(self) -> int:
        """Query the active input (1-16)."""
        reply = self._execute(build_get_input(), expect_status_frame)
        status = decode_status_byte(reply.data)
        input_id = decode_input_id(status)
        logger.debug("Status byte 0x%02X -> input %d", status, input_id)
        return input_id

    def switch_input(self, input_id: int | str) -> int:
        """Switch to ``input_id`` and confirm the device followed.

        A failed send is not fatal: the status query that follows decides the
        outcome.

        Raises:
            NoValidReplyError: If the status query never gets an answer.
            StateMismatchError: If the device reports a different input.
        """
        command = build_switch_input(input_id)
        self._fire(command, verified=True)
        current = self.get_current_input()
        if current != command.param:
            logger.warning(
                "Failed switching to %d. Current input: %d", command.param, current
            )
            raise StateMismatchError("input", command.param, current)
        logger.info("Switched to input %d", current)
        return current

    # ─── FRONT PANEL ─────────────────────────────────────────────────

    def set_buzzer(self, enabled: bool | str) -> bool:
        command = build_set_buzzer(enabled)
        self._fire(command)
        return bool(command.param)

    def mute(self) -> bool:
        return self.set_buzzer(False)

    def unmute(self) -> bool:
        return self.set_buzzer(True)

    def set_led_timeout(self, timeout: int | str) -> int:
        """Set the LED timeout; returns the duration in seconds (0 = never)."""
        command = build_set_led_timeout(timeout)
        self._fire(command)
        return command.param

    def set_input_detection(self, enabled: bool | str) -> bool:
        command = build_set_input_detection(enabled)
        self._fire(command)
        return bool(command.param)

    # ─── NETWORK ─────────────────────────────────────────────────────

    def get_network_field(self, field: NetworkField | str) -> str:
        """Read one network setting in canonical form."""
        command = build_query(field)
        field = resolve_field(field)
        reply = self._execute(command, expect_key_value(field.value))
        return parse_network_field(reply.text, field)

    def set_network_field(self, field: NetworkField | str, value: int | str) -> str:
        """Write one network setting and confirm it by reading it back.

        Raises:
            NoValidReplyError: If the device never acknowledged with ``OK``.
            StateMismatchError: If the read-back value differs.
        """
        command = build_set_network_field(field, value)
        field = resolve_field(field)
        self._execute(command, expect_text(SET_OK_TOKEN))

        expected = sanitize_field(field, command.value)
        actual = self.get_network_field(field)
        if actual != expected:
            logger.warning(
                "Failed to set %s to %s: device reports %s", field.label, expected, actual
            )
            raise StateMismatchError(field.label, expected, actual)
        logger.info("%s updated to %s", field.label.capitalize(), actual)
        return actual

    def get_network_info(self) -> NetworkInfo:
        return NetworkInfo(
            ip=self.get_ip(),
            port=self.get_port(),
            netmask=self.get_netmask(),
            gateway=self.get_gateway(),
        )

    def get_ip(self) -> str:
        return self.get_network_field(NetworkField.IP)

    def get_port(self) -> str:
        return self.get_network_field(NetworkField.PORT)

    def get_netmask(self) -> str:
        return self.get_network_field(NetworkField.NETMASK)

    def get_gateway(self) -> str:
        return self.get_network_field(NetworkField.GATEWAY)

    def set_ip(self, ip: str) -> str:
        return self.set_network_field(NetworkField.IP, ip)

    def set_port(self, port: int | str) -> str:
        return self.set_network_field(NetworkField.PORT, port)

    def set_netmask(self, netmask: str) -> str:
        return self.set_network_field(NetworkField.NETMASK, netmask)

    def set_gateway(self, gateway: str) -> str:
        return self.set_network_field(NetworkField.GATEWAY, gateway)

    # ─── RAW ─────────────────────────────────────────────────────────

    def send_raw(self, payload: bytes) -> bytes:
        """Send arbitrary bytes once and return the unprocessed reply."""
        return self.connection.send(payload)

    def _fire(self, command: BinaryCommand, verified: bool = False) -> None:
        """Send a command once; the device does not acknowledge it.

        When ``verified`` is set the caller reads the state back afterwards,
        so a send failure is only logged. Otherwise it is reported as
        :class:`NoValidReplyError`.
        """
        payload = command.encode()
        logger.debug("Sending %r", command)
        try:
            self.connection.send(payload)
        except TransportError as e:
            if not verified:
                raise NoValidReplyError(payload, 1) from e
            logger.warning("Sending %r failed: %s", command, e)

    def _execute(self, command: AsciiCommand | BinaryCommand, validate: Validator) -> Reply:
        return self._executor.execute(command.encode(), validate)


def connect(host: str | None = None, port: int | None = None, **overrides) -> TESmartSwitch:
    """Build a switch client from the environment, overriding host/port if given."""
    config = DeviceConfig.from_env().with_overrides(host=host, port=port, **overrides)
    return TESmartSwitch(config)
