"""Protocol layer: binary and ASCII framing, command builders, and reply parsing."""

from .framing import AsciiCommand, BinaryCommand, encode_binary, encode_query, encode_set
from .commands import NetworkField, Opcode, encode_input_switch
from .parser import (
    decode_input_id,
    decode_key_value,
    decode_status_byte,
    sanitize_decimal,
    sanitize_dotted_quad,
)
