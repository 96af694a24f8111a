# ./src/expiringmap/__init__.py
"""ExpiringMap: a TTL mapping that keeps aged-out entries inspectable."""

from .expiring import ExpiringMap, build_map
from .models import ExpiringMapError, InvalidTTLError, MapStats
from .utils.clock import ManualClock

__all__ = [
    "ExpiringMap",
    "ExpiringMapError",
    "InvalidTTLError",
    "ManualClock",
    "MapStats",
    "build_map",
]
