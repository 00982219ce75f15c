"""Tests for reply decoding and value sanitizing."""

import pytest

from tesmart_mcp.exceptions import DecodeError
from tesmart_mcp.protocol.commands import NetworkField
from tesmart_mcp.protocol.framing import encode_query
from tesmart_mcp.protocol.parser import (
    decode_input_id,
    decode_key_value,
    decode_status_byte,
    parse_network_field,
    printable_text,
    sanitize_decimal,
    sanitize_dotted_quad,
    strip_nul,
)


def test_decode_status_byte():
    assert decode_status_byte(bytes.fromhex("aabb031103ee")) == 0x03


def test_decode_status_byte_with_noise():
    """Noise around the frame does not shift the status position."""
    reply = b"\x7f\x01" + bytes.fromhex("aabb03110aee") + b"\r\n"
    assert decode_status_byte(reply) == 0x0A


def test_decode_status_byte_after_nul_strip():
    """A 0x00 status lost to NUL stripping decodes as the 0x11 alias."""
    reply = strip_nul(bytes.fromhex("aabb031100ee"))
    assert decode_status_byte(reply) == 0x11
    assert decode_input_id(decode_status_byte(reply)) == 1


def test_decode_status_byte_missing_header():
    with pytest.raises(DecodeError):
        decode_status_byte(bytes.fromhex("aabb030104ee"))


def test_decode_status_byte_too_short():
    with pytest.raises(DecodeError):
        decode_status_byte(bytes.fromhex("aabb0311"))
    with pytest.raises(DecodeError):
        decode_status_byte(b"")


def test_decode_input_id_translation():
    """Status bytes are 0-indexed."""
    for input_id in range(2, 17):
        assert decode_input_id(input_id - 1) == input_id
    assert decode_input_id(0) == 1


def test_decode_input_id_wrap():
    assert decode_input_id(17) == 1


def test_decode_key_value_roundtrip():
    assert encode_query("IP") == b"IP?;"
    assert decode_key_value("IP:192.168.1.10;", "IP") == "192.168.1.10"


def test_decode_key_value_from_bytes():
    """Non-printable bytes are dropped before matching."""
    reply = b"\x00PT:\x015000;\r\n"
    assert decode_key_value(reply, "PT") == "5000"


def test_decode_key_value_picks_requested_key():
    reply = "IP:192.168.001.010;GW:192.168.001.001;"
    assert decode_key_value(reply, "GW") == "192.168.001.001"
    assert decode_key_value(reply, "IP") == "192.168.001.010"


def test_decode_key_value_missing():
    with pytest.raises(DecodeError):
        decode_key_value("OK", "IP")
    with pytest.raises(DecodeError):
        decode_key_value("IP:;", "IP")


def test_sanitize_dotted_quad():
    assert sanitize_dotted_quad("192.168.001.010") == "192.168.1.10"
    assert sanitize_dotted_quad("255.255.255.000") == "255.255.255.0"
    assert sanitize_dotted_quad("010.000.000.001") == "10.0.0.1"
    assert sanitize_dotted_quad("192.168.1.10") == "192.168.1.10"


def test_sanitize_dotted_quad_idempotent():
    samples = [
        "192.168.001.010",
        "000.000.000.000",
        "10.0.0.1",
        "255.255.255.000",
        "001.002.003.004",
        "100.020.003.200",
    ]
    for sample in samples:
        once = sanitize_dotted_quad(sample)
        assert sanitize_dotted_quad(once) == once


def test_sanitize_decimal():
    assert sanitize_decimal("0080") == "80"
    assert sanitize_decimal("5000") == "5000"
    assert sanitize_decimal("0") == "0"
    assert sanitize_decimal("0000") == "0"


def test_parse_network_field():
    assert parse_network_field("MA:255.255.255.000;", NetworkField.NETMASK) == "255.255.255.0"
    assert parse_network_field("PT:05000;", NetworkField.PORT) == "5000"


def test_printable_text():
    assert printable_text(b"\x00OK\r\n\xff") == "OK"
    assert printable_text(b"\xaa\xbb\x03\x11\x03\xee") == ""
