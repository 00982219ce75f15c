"""Data models for device state."""

from .network import NetworkInfo
