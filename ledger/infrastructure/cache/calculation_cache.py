"""
Content-addressed memoization of engine results.

Engine functions are pure, so a result can be reused whenever the same
function is called with equal inputs. Keys are SHA-256 digests of the
function name and the ``repr`` of its arguments; the frozen domain models
have value-based reprs, so equal snapshots produce equal keys regardless
of object identity.

Results are frozen dataclasses or containers of them. Container results are
handed out as shallow copies so callers can sort or extend them freely.
"""

import copy
import hashlib
from collections.abc import Callable
from threading import RLock
from typing import Any

from cachetools import LRUCache
from loguru import logger

from ledger.core.constants import DEFAULT_CALCULATION_CACHE_SIZE


def content_key(name: str, *args: Any, **kwargs: Any) -> str:
    """Digest identifying a call by its function name and argument values."""
    payload = repr((name, args, sorted(kwargs.items())))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _detached(result: Any) -> Any:
    if isinstance(result, list | dict | set):
        return copy.copy(result)
    return result


class CalculationCache:
    """Bounded LRU cache of engine results keyed by content hash."""

    def __init__(self, cache_size: int = DEFAULT_CALCULATION_CACHE_SIZE) -> None:
        if cache_size <= 0:
            raise ValueError("Cache size must be positive")
        self.cache: LRUCache[str, Any] = LRUCache(maxsize=cache_size)
        self._cache_lock = RLock()
        self._hits = 0
        self._misses = 0

    def get_or_compute(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Return the cached result of ``func(*args, **kwargs)``, computing it on a miss."""
        key = content_key(func.__qualname__, *args, **kwargs)
        with self._cache_lock:
            if key in self.cache:
                self._hits += 1
                return _detached(self.cache[key])
            self._misses += 1

        result = func(*args, **kwargs)
        with self._cache_lock:
            self.cache[key] = result
        logger.debug(f"Cached result of {func.__qualname__} ({key[:12]})")
        return _detached(result)

    @property
    def hit_rate(self) -> float:
        """Share of lookups served from the cache, as a percentage."""
        with self._cache_lock:
            lookups = self._hits + self._misses
            return self._hits / lookups * 100 if lookups else 0.0

    def clear(self) -> None:
        with self._cache_lock:
            cleared = (len(self.cache), self._hits, self._misses)
            self.cache.clear()
            self._hits = 0
            self._misses = 0
        logger.debug(
            f"Cache cleared: {cleared[0]} entries, {cleared[1]} hits, {cleared[2]} misses"
        )

    def get_stats(self) -> dict[str, Any]:
        with self._cache_lock:
            return {
                "cache_size": len(self.cache),
                "max_size": int(self.cache.maxsize),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(self.hit_rate, 1),
            }
