# ./src/expiringmap/expiring.py
"""ExpiringMap core: a mapping whose entries age out into an expired store.

Used by the public Python API (``from expiringmap import ExpiringMap``) and the CLI.
Inputs: a positive TTL, an optional monotonic nanosecond clock, keys and values.
Outputs: live-view and expired-view lookups, read-only dict views, ``MapStats``.
Side effects: in-memory mutation of the three internal stores; DEBUG logging on moves.
Operational notes: expiration is lazy. Reads sweep first, writes never sweep, and
there is no background timer. Not thread-safe; guard with one lock if shared.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import (
    Any,
    Dict,
    ItemsView,
    Iterable,
    Iterator,
    KeysView,
    MutableMapping,
    Optional,
    Tuple,
    TypeVar,
    Union,
    ValuesView,
)

from .models import InvalidTTLError, MapStats
from .utils.clock import Clock, DurationLike, monotonic_ns, to_nanos
from .utils.config import Config, load_config
from .utils.logger import build_logger

K = TypeVar("K")
V = TypeVar("V")

_MISSING: Any = object()


def _hashable(key: object) -> bool:
    try:
        hash(key)
    except TypeError:
        return False
    return True


class ExpiringMap(MutableMapping[K, V]):
    """Mapping with one shared TTL and a caller-visible store of expired entries.

    Three stores back the container:

    * ``_live``: bindings still within their TTL.
    * ``_expirations``: key -> clock reading of the most recent ``put``.
    * ``_expired``: bindings that aged out and were not yet discarded.

    A full sweep checks every tracked timestamp, moves aged values into the
    expired store and drops their timestamps. A single-key sweep only moves
    the value and leaves the timestamp behind; later sweeps drop it without
    touching the expired store again.
    """

    def __init__(
        self,
        ttl: DurationLike,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ):
        try:
            ttl_ns = to_nanos(ttl)
            ttl_delta = (
                ttl
                if isinstance(ttl, timedelta)
                else timedelta(microseconds=ttl_ns // 1_000)
            )
        except (TypeError, ValueError, OverflowError) as err:
            raise InvalidTTLError(str(err)) from err
        if ttl_ns <= 0:
            raise InvalidTTLError("ttl must be a positive duration")

        self._ttl_ns = ttl_ns
        self._ttl = ttl_delta
        self._clock: Clock = clock or monotonic_ns
        self.log = logger or logging.getLogger("expiringmap")

        self._live: Dict[K, V] = {}
        self._expirations: Dict[K, int] = {}
        self._expired: Dict[K, V] = {}

        self.log.debug("expiring map created with ttl=%s", self.ttl)

    @property
    def ttl(self) -> timedelta:
        """TTL as given, or floored to whole microseconds for numeric seconds.

        Expiry always compares against ``ttl_ns``.
        """
        return self._ttl

    @property
    def ttl_ns(self) -> int:
        return self._ttl_ns

    @property
    def clock(self) -> Clock:
        return self._clock

    # ------------------------------------------------------------------
    # Live view
    # ------------------------------------------------------------------

    def size(self) -> int:
        self._remove_all_expired(self._clock())
        return len(self._live)

    def __len__(self) -> int:
        return self.size()

    def is_empty(self) -> bool:
        self._remove_all_expired(self._clock())
        return not self._live

    def contains_key(self, key: K) -> bool:
        if not _hashable(key):
            return False
        self._remove_if_expired(key, self._clock())
        return key in self._live

    def __contains__(self, key: object) -> bool:
        return self.contains_key(key)  # type: ignore[arg-type]

    def contains_value(self, value: V) -> bool:
        self._remove_all_expired(self._clock())
        return any(live == value for live in self._live.values())

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        if not _hashable(key):
            return default
        self._remove_if_expired(key, self._clock())
        return self._live.get(key, default)

    def __getitem__(self, key: K) -> V:
        self._remove_if_expired(key, self._clock())
        return self._live[key]

    def put(self, key: K, value: V) -> Optional[V]:
        """Bind ``key`` and restart its TTL; return the previous live value."""
        self._expirations[key] = self._clock()
        previous = self._live.get(key)
        self._live[key] = value
        return previous

    def __setitem__(self, key: K, value: V) -> None:
        self.put(key, value)

    def remove(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Drop ``key`` from the live view without creating an expired copy."""
        if not _hashable(key):
            return default
        self._expirations.pop(key, None)
        return self._live.pop(key, default)

    def pop(self, key: K, default: Any = _MISSING) -> Any:
        self._expirations.pop(key, None)
        if default is _MISSING:
            return self._live.pop(key)
        return self._live.pop(key, default)

    def __delitem__(self, key: K) -> None:
        self._expirations.pop(key, None)
        del self._live[key]

    def put_all(self, entries: Union[Mapping[K, V], Iterable[Tuple[K, V]]]) -> None:
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        for key, value in pairs:
            self.put(key, value)

    def clear(self) -> None:
        self._expirations.clear()
        self._live.clear()

    def key_set(self) -> KeysView[K]:
        self._remove_all_expired(self._clock())
        return self._live.keys()

    def keys(self) -> KeysView[K]:
        return self.key_set()

    def values(self) -> ValuesView[V]:
        self._remove_all_expired(self._clock())
        return self._live.values()

    def entry_set(self) -> ItemsView[K, V]:
        self._remove_all_expired(self._clock())
        return self._live.items()

    def items(self) -> ItemsView[K, V]:
        return self.entry_set()

    def __iter__(self) -> Iterator[K]:
        self._remove_all_expired(self._clock())
        return iter(self._live)

    # ------------------------------------------------------------------
    # Expired view
    # ------------------------------------------------------------------

    def expired_key_set(self) -> KeysView[K]:
        self._remove_all_expired(self._clock())
        return self._expired.keys()

    def expired_values(self) -> ValuesView[V]:
        self._remove_all_expired(self._clock())
        return self._expired.values()

    def expired_entry_set(self) -> ItemsView[K, V]:
        self._remove_all_expired(self._clock())
        return self._expired.items()

    def expired_size(self) -> int:
        self._remove_all_expired(self._clock())
        return len(self._expired)

    def expired_is_empty(self) -> bool:
        """Return ``True`` when the expired store holds at least one entry.

        The name reads inverted on purpose; callers depend on this polarity.
        """
        self._remove_all_expired(self._clock())
        return bool(self._expired)

    def expired_get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        if not _hashable(key):
            return default
        return self._expired.get(key, default)

    def expired_remove(self, key: K, default: Optional[V] = None) -> Optional[V]:
        if not _hashable(key):
            return default
        return self._expired.pop(key, default)

    def expired_clear(self) -> None:
        if self._expired:
            self.log.debug("discarding %d expired entries", len(self._expired))
        self._expired.clear()

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def sweep(self) -> int:
        """Move every aged entry to the expired store now; return how many moved."""
        return self._remove_all_expired(self._clock())

    def stats(self) -> MapStats:
        self._remove_all_expired(self._clock())
        return MapStats(
            live=len(self._live),
            expired=len(self._expired),
            tracked=len(self._expirations),
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(ttl={self.ttl!r}, live={len(self._live)}, "
            f"expired={len(self._expired)})"
        )

    def _is_expired(self, now: int, inserted_at: Optional[int]) -> bool:
        if inserted_at is None:
            return False
        return now - inserted_at >= self._ttl_ns

    def _remove_all_expired(self, now: int) -> int:
        aged = [
            key
            for key, inserted_at in self._expirations.items()
            if self._is_expired(now, inserted_at)
        ]
        moved = 0
        for key in aged:
            del self._expirations[key]
            # stale timestamps from a single-key sweep have no live value left
            if key in self._live:
                self._expired[key] = self._live.pop(key)
                moved += 1

        if moved:
            self.log.debug("swept %d expired entries", moved)
        return moved

    def _remove_if_expired(self, key: K, now: int) -> None:
        if key not in self._live:
            return
        if self._is_expired(now, self._expirations.get(key)):
            self._expired[key] = self._live.pop(key)
            self.log.debug("entry expired on lookup: %r", key)


def build_map(
    config_path: Optional[str] = None,
    clock: Optional[Clock] = None,
    cfg: Optional[Config] = None,
) -> ExpiringMap[Any, Any]:
    """Build an ``ExpiringMap`` from JSON/dotenv/env configuration."""
    cfg = cfg or load_config(config_path)
    log = build_logger(cfg.logger_name, cfg.log_level)
    return ExpiringMap(cfg.ttl_seconds, clock=clock, logger=log)
