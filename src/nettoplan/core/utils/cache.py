"""
In-memory caching with TTL expiry.

Each entry is stored as ``(value, expiry)`` where expiry is measured on the
injected clock. The clock defaults to ``time.monotonic`` so tests can swap in
a fake one instead of sleeping.

The cache belongs to whoever creates it. Calculators never touch it; it is
meant for the collaborator layer that fetches prices and analyses.
"""

import threading
import time
from collections.abc import Callable, Hashable
from typing import Any

from nettoplan.core.exceptions import CacheError

Clock = Callable[[], float]

DEFAULT_TTL_SECONDS = 24 * 60 * 60  # 24 hours


class TTLCache:
    """Thread-safe key/value cache with per-entry expiry."""

    def __init__(self, default_ttl: float = DEFAULT_TTL_SECONDS, clock: Clock | None = None):
        """
        Args:
            default_ttl: Lifetime in seconds used when ``set`` gets no ttl.
            clock: Zero-argument callable returning the current time in seconds.
        """
        if default_ttl <= 0:
            raise CacheError(f"default_ttl must be positive, got {default_ttl}")
        self.default_ttl = default_ttl
        self._clock = clock or time.monotonic
        self._entries: dict[Hashable, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def set(self, key: Hashable, value: Any, ttl: float | None = None) -> None:
        """Store a value that expires ``ttl`` seconds from now."""
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            raise CacheError(f"ttl must be positive, got {ttl}")
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl)

    def get_entry(self, key: Hashable) -> tuple[Any, float] | None:
        """Return ``(value, expiry)`` for a live entry, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry[1] <= self._clock():
                del self._entries[key]
                return None
            return entry

    def get(self, key: Hashable, default: Any = None) -> Any:
        """Return the cached value if present and not expired."""
        entry = self.get_entry(key)
        return default if entry is None else entry[0]

    def __contains__(self, key: Hashable) -> bool:
        return self.get_entry(key) is not None

    def get_or_set(self, key: Hashable, factory: Callable[[], Any], ttl: float | None = None) -> Any:
        """Return the cached value, computing and storing it on a miss.

        A cached None counts as a hit, so "no data" answers are not refetched
        until they expire.
        """
        entry = self.get_entry(key)
        if entry is not None:
            return entry[0]
        value = factory()
        self.set(key, value, ttl)
        return value

    def invalidate(self, key: Hashable) -> None:
        """Drop a single key (no-op if missing)."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop everything."""
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Remove expired entries and return how many were dropped."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, expiry) in self._entries.items() if expiry <= now]
            for k in expired:
                del self._entries[k]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
