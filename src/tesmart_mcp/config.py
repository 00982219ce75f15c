"""Connection settings for a TESmart switch."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping

from .exceptions import ValidationError

DEFAULT_HOST = "192.168.1.10"
DEFAULT_PORT = 5000
DEFAULT_TIMEOUT = 1.0  # seconds, per attempt
DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_RETRY_DELAY = 0.2  # seconds

ENV_HOST = "TESMART_HOST"
ENV_PORT = "TESMART_PORT"
ENV_TIMEOUT = "TESMART_TIMEOUT"


@dataclass(frozen=True)
class DeviceConfig:
    """Where the switch lives and how patiently to talk to it."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY

    def __post_init__(self) -> None:
        if not self.host:
            raise ValidationError("Host must not be empty")
        if not 0 < self.port <= 65535:
            raise ValidationError(f"Port must be 1-65535, got {self.port}")
        if self.timeout <= 0:
            raise ValidationError(f"Timeout must be positive, got {self.timeout}")
        if self.max_attempts < 1:
            raise ValidationError(
                f"max_attempts must be at least 1, got {self.max_attempts}"
            )
        if self.retry_delay < 0:
            raise ValidationError(
                f"retry_delay must not be negative, got {self.retry_delay}"
            )

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    def with_overrides(self, **changes) -> DeviceConfig:
        """Return a copy with the non-None ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "port": self.port,
            "timeout": self.timeout,
            "max_attempts": self.max_attempts,
            "retry_delay": self.retry_delay,
        }

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DeviceConfig:
        """Build a config from ``TESMART_HOST``, ``TESMART_PORT`` and ``TESMART_TIMEOUT``."""
        env = os.environ if environ is None else environ
        host = env.get(ENV_HOST) or DEFAULT_HOST
        try:
            port = int(env.get(ENV_PORT) or DEFAULT_PORT)
            timeout = float(env.get(ENV_TIMEOUT) or DEFAULT_TIMEOUT)
        except ValueError as e:
            raise ValidationError(f"Invalid connection setting in environment: {e}") from e
        return cls(host=host, port=port, timeout=timeout)
