"""Tests for the MCP tool wrappers."""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

from tesmart_mcp.exceptions import NoValidReplyError, StateMismatchError, ValidationError
from tesmart_mcp.models.network import NetworkInfo
from tesmart_mcp.protocol.commands import NetworkField


def test_get_current_input(server_module):
    switch = MagicMock()
    switch.get_current_input.return_value = 3

    with patch.object(server_module, "_get_switch", return_value=switch):
        assert server_module.get_current_input() == {"input": 3}


def test_switch_input_mismatch_reported_as_error(server_module):
    switch = MagicMock()
    switch.switch_input.side_effect = StateMismatchError("input", 3, 5)

    with patch.object(server_module, "_get_switch", return_value=switch):
        result = server_module.switch_input(3)

    assert result["error_type"] == "StateMismatchError"
    assert "device reports 5" in result["error"]


def test_mute_and_unmute_buzzer(server_module):
    switch = MagicMock()
    switch.set_buzzer.side_effect = lambda enabled: enabled

    with patch.object(server_module, "_get_switch", return_value=switch):
        assert server_module.mute_buzzer() == {"buzzer": False}
        assert server_module.unmute_buzzer() == {"buzzer": True}


def test_set_led_timeout_never(server_module):
    switch = MagicMock()
    switch.set_led_timeout.return_value = 0

    with patch.object(server_module, "_get_switch", return_value=switch):
        assert server_module.set_led_timeout("never") == {"led_timeout": "never"}


def test_get_network_info(server_module):
    switch = MagicMock()
    switch.get_network_info.return_value = NetworkInfo("10.0.0.2", "5000", "255.0.0.0", "10.0.0.1")

    with patch.object(server_module, "_get_switch", return_value=switch):
        result = server_module.get_network_info()

    assert result == {
        "ip": "10.0.0.2",
        "port": "5000",
        "netmask": "255.0.0.0",
        "gateway": "10.0.0.1",
    }


def test_get_network_field_unknown_field(server_module):
    switch = MagicMock()

    with patch.object(server_module, "_get_switch", return_value=switch):
        result = server_module.get_network_field("dns")

    assert result["error_type"] == "ValidationError"
    switch.get_network_field.assert_not_called()


def test_set_network_field(server_module):
    switch = MagicMock()
    switch.set_network_field.return_value = "8080"

    with patch.object(server_module, "_get_switch", return_value=switch):
        result = server_module.set_network_field("port", "08080")

    assert result == {"updated": True, "port": "8080"}
    switch.set_network_field.assert_called_once_with(NetworkField.PORT, "08080")


def test_set_network_field_no_reply(server_module):
    switch = MagicMock()
    switch.set_network_field.side_effect = NoValidReplyError(b"MA: 255.0.0.0;", 10)

    with patch.object(server_module, "_get_switch", return_value=switch):
        result = server_module.set_network_field("netmask", "255.0.0.0")

    assert result["error_type"] == "NoValidReplyError"


def test_send_command(server_module):
    switch = MagicMock()
    switch.send_raw.return_value = bytes.fromhex("aabb031103ee")

    with patch.object(server_module, "_get_switch", return_value=switch):
        result = server_module.send_command("AA BB 03 10 00 EE")

    switch.send_raw.assert_called_once_with(bytes.fromhex("aabb031000ee"))
    assert result["reply_hex"] == "aa bb 03 11 03 ee"


def test_send_command_invalid_hex(server_module):
    switch = MagicMock()

    with patch.object(server_module, "_get_switch", return_value=switch):
        result = server_module.send_command("not hex")

    assert result["error_type"] == ValidationError.__name__
    switch.send_raw.assert_not_called()


def test_config_resource(server_module, monkeypatch):
    monkeypatch.setenv("TESMART_HOST", "10.9.8.7")
    monkeypatch.setenv("TESMART_PORT", "6000")

    config = json.loads(server_module.resource_device_config())

    assert config["host"] == "10.9.8.7"
    assert config["port"] == 6000
