"""Transport layer: single-shot TCP exchange and the polling executor."""

from .tcp_connection import TCPConnection
from .retry import (
    Reply,
    RequestExecutor,
    execute_with_retry,
    expect_bytes,
    expect_key_value,
    expect_status_frame,
    expect_text,
    has_printable,
)
