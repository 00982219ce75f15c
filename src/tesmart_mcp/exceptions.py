"""Error taxonomy for the TESmart control client.

Only :class:`NoValidReplyError` and :class:`StateMismatchError` are meant to
reach callers of the device operations after the network has been touched.
:class:`TransportError` and :class:`DecodeError` are absorbed by the retry
loop; :class:`ValidationError` is raised before any I/O happens.
"""

from __future__ import annotations


class TESmartError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(TESmartError, ValueError):
    """A user-supplied argument is malformed or out of range."""


class TransportError(TESmartError, ConnectionError):
    """The TCP exchange with the device failed at the connection level."""


class DecodeError(TESmartError, ValueError):
    """A reply does not match the expected frame shape."""


class NoValidReplyError(TESmartError):
    """The retry budget was exhausted without a valid reply."""

    def __init__(self, payload: bytes, attempts: int, last_reply: bytes = b"") -> None:
        self.payload = payload
        self.attempts = attempts
        self.last_reply = last_reply
        super().__init__(
            f"No valid reply to {payload!r} after {attempts} attempt(s)"
        )


class StateMismatchError(TESmartError):
    """The device is reachable but did not apply the requested change."""

    def __init__(self, what: str, expected, actual) -> None:
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Failed to set {what} to {expected}: device reports {actual}"
        )
