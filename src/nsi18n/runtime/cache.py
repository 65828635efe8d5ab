"""Thread-safe resolution cache.

Holds the two pieces of per-root lookup state:

- resolved values: full key -> Found, LRU-bounded
- unresolved keys: full keys known to have no value, so repeated lookups
  skip the search and do not report the same error again; bounded by the
  same maxsize, oldest mark evicted first (an evicted key is searched and
  reported again on its next lookup)

Invalidation rules (applied by the resolver):
    - change_locale: clear_values() (unresolved keys are locale-independent)
    - set/use/borrowed target change: invalidate(full_key)
    - register(namespace): forget_unresolved(namespace)

Thread Safety:
    All operations protected by an RLock. Concurrent lookups running under
    the resolver's shared read lock populate the cache through here.

Python 3.13+.
"""

from __future__ import annotations

from collections import OrderedDict
from threading import RLock
from typing import TYPE_CHECKING

from nsi18n.constants import DEFAULT_CACHE_SIZE

if TYPE_CHECKING:
    from nsi18n.runtime.context import Found

__all__ = ["ResolutionCache"]


class ResolutionCache:
    """LRU cache of resolved values plus the set of unresolved keys.

    Attributes:
        maxsize: Maximum number of resolved values kept, and of unresolved
            marks kept
        hits: Number of cache hits (for metrics)
        misses: Number of cache misses (for metrics)
    """

    __slots__ = ("_hits", "_lock", "_maxsize", "_misses", "_unresolved", "_values")

    def __init__(self, maxsize: int = DEFAULT_CACHE_SIZE) -> None:
        """Initialize an empty cache.

        Args:
            maxsize: Maximum number of resolved values, and separately of
                unresolved marks (default: 1000)

        Raises:
            ValueError: If maxsize is not positive
        """
        if maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)

        self._values: OrderedDict[str, Found] = OrderedDict()
        # Insertion-ordered set: full key -> None
        self._unresolved: OrderedDict[str, None] = OrderedDict()
        self._maxsize = maxsize
        self._lock = RLock()
        self._hits = 0
        self._misses = 0

    def get(self, full_key: str) -> Found | None:
        """Return the cached resolution of full_key, or None on a miss."""
        with self._lock:
            found = self._values.get(full_key)
            if found is None:
                self._misses += 1
                return None
            self._values.move_to_end(full_key)
            self._hits += 1
            return found

    def put(self, full_key: str, found: Found) -> None:
        """Store a resolution, evicting the least recently used one when full."""
        with self._lock:
            if full_key in self._values:
                self._values.move_to_end(full_key)
            elif len(self._values) >= self._maxsize:
                self._values.popitem(last=False)
            self._values[full_key] = found

    def is_unresolved(self, full_key: str) -> bool:
        """True if full_key is known to have no value."""
        with self._lock:
            return full_key in self._unresolved

    def mark_unresolved(self, full_key: str) -> None:
        """Remember that full_key has no value, forgetting the oldest mark when full."""
        with self._lock:
            if full_key in self._unresolved:
                self._unresolved.move_to_end(full_key)
                return
            if len(self._unresolved) >= self._maxsize:
                self._unresolved.popitem(last=False)
            self._unresolved[full_key] = None

    def forget_unresolved(self, full_key: str) -> None:
        """Allow full_key to be searched (and reported) again."""
        with self._lock:
            self._unresolved.pop(full_key, None)

    def invalidate(self, full_key: str) -> None:
        """Drop both the cached value and the unresolved mark of full_key."""
        with self._lock:
            self._values.pop(full_key, None)
            self._unresolved.pop(full_key, None)

    def clear_values(self) -> None:
        """Drop every cached value, keeping unresolved marks. Resets metrics."""
        with self._lock:
            self._values.clear()
            self._hits = 0
            self._misses = 0

    def clear(self) -> None:
        """Drop all cached values and unresolved marks. Resets metrics."""
        with self._lock:
            self._values.clear()
            self._unresolved.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys:
            - size (int): Number of cached values
            - maxsize (int): Maximum number of cached values
            - unresolved (int): Number of keys marked unresolved
            - hits (int): Number of cache hits
            - misses (int): Number of cache misses
            - hit_rate (float): Hit rate as percentage (0.0-100.0)
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._values),
                "maxsize": self._maxsize,
                "unresolved": len(self._unresolved),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
            }

    def __len__(self) -> int:
        """Number of cached values."""
        with self._lock:
            return len(self._values)

    def __contains__(self, full_key: object) -> bool:
        """True if a value for full_key is cached. Does not touch metrics."""
        with self._lock:
            return full_key in self._values

    @property
    def maxsize(self) -> int:
        """Maximum number of cached values."""
        return self._maxsize

    @property
    def hits(self) -> int:
        """Number of cache hits."""
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        """Number of cache misses."""
        with self._lock:
            return self._misses
