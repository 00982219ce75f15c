"""Network settings model."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass
class NetworkInfo:
    """Network configuration as reported by the switch."""

    ip: str = ""
    port: str = ""
    netmask: str = ""
    gateway: str = ""

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    def __str__(self) -> str:
        return (
            f"IP:      {self.ip}\n"
            f"Port:    {self.port}\n"
            f"Netmask: {self.netmask}\n"
            f"Gateway: {self.gateway}"
        )
