# ./src/expiringmap/models.py
"""Error types and value objects shared across ExpiringMap modules."""

from __future__ import annotations

from dataclasses import dataclass


class ExpiringMapError(Exception):
    """Base error for the expiringmap package."""


class InvalidTTLError(ExpiringMapError, ValueError):
    """Raised when a time-to-live is not a positive duration."""


@dataclass(frozen=True)
class MapStats:
    live: int
    expired: int
    tracked: int
