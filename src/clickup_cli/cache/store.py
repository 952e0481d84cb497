"""Read-through response cache backed by diskcache.

Entries are persisted in a per-namespace directory so consecutive CLI
invocations share them. Every entry carries a tag naming the operation that
produced it, which makes grouped invalidation a tag-index lookup instead of a
scan over all keys.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

import diskcache

from clickup_cli.cache.keys import TTL, operation_of

logger = logging.getLogger(__name__)

T = TypeVar("T")
_MISSING = object()


@dataclass(slots=True)
class CacheStats:
    """Counters reported by ``cache-stats``."""

    hits: int
    misses: int
    size: int
    enabled: bool
    directory: str


class ReadThroughCache:
    """Key-based get-or-fetch memoization with per-entry TTL.

    Concurrent misses on the same key inside one process are single-flight:
    the second caller waits for the first and reuses its stored value.
    Separate processes may still fetch the same key twice.
    """

    def __init__(
        self,
        directory: Path | str,
        *,
        namespace: str = "default",
        default_ttl: int = TTL.FIVE_MINUTES,
        enabled: bool = True,
    ) -> None:
        self._directory = Path(directory) / namespace
        self._cache = diskcache.Cache(str(self._directory), tag_index=True)
        self._cache.stats(enable=True)
        self._default_ttl = default_ttl
        self._enabled = enabled
        # key -> (lock, callers holding or waiting on it); dropped at zero
        self._locks: dict[str, tuple[threading.Lock, int]] = {}
        self._locks_guard = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def directory(self) -> Path:
        return self._directory

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def get_or_fetch(
        self,
        key: str,
        producer: Callable[[], T],
        *,
        ttl: int | None = None,
        tag: str | None = None,
        bypass: bool = False,
    ) -> T:
        """Return the fresh value under ``key`` or store and return ``producer()``.

        A disabled cache or ``bypass=True`` calls the producer and stores
        nothing. Producer exceptions propagate and leave the cache untouched.
        """

        if bypass or not self._enabled:
            logger.debug("Cache bypass: %s", key)
            return producer()

        with self._key_lock(key):
            cached = self._cache.get(key, default=_MISSING)
            if cached is not _MISSING:
                logger.debug("Cache hit: %s", key)
                return cached  # type: ignore[return-value]

            logger.debug("Cache miss: %s", key)
            value = producer()
            self._cache.set(
                key,
                value,
                expire=ttl if ttl is not None else self._default_ttl,
                tag=tag or operation_of(key),
            )
            return value

    def invalidate(self, key: str) -> bool:
        removed = bool(self._cache.delete(key))
        logger.debug("Invalidate key %s: removed=%s", key, removed)
        return removed

    def invalidate_tag(self, tag: str) -> int:
        """Remove every entry stored under ``tag``."""

        removed = self._cache.evict(tag)
        logger.debug("Invalidate tag %s: removed=%d", tag, removed)
        return removed

    def invalidate_pattern(self, pattern: str | re.Pattern[str]) -> int:
        """Remove every entry whose key matches ``pattern`` from its start."""

        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        removed = 0
        for key in list(self._cache.iterkeys()):
            if isinstance(key, str) and compiled.match(key) and self._cache.delete(key):
                removed += 1
        logger.debug("Invalidate pattern %s: removed=%d", compiled.pattern, removed)
        return removed

    def clear(self) -> int:
        return self._cache.clear()

    def get_stats(self) -> CacheStats:
        self._cache.expire()
        hits, misses = self._cache.stats()
        return CacheStats(
            hits=hits,
            misses=misses,
            size=len(self._cache),
            enabled=self._enabled,
            directory=str(self._directory),
        )

    def close(self) -> None:
        self._cache.close()

    def __enter__(self) -> ReadThroughCache:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    @contextmanager
    def _key_lock(self, key: str) -> Iterator[None]:
        with self._locks_guard:
            lock, users = self._locks.get(key, (None, 0))
            lock = lock or threading.Lock()
            self._locks[key] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._locks_guard:
                _, users = self._locks[key]
                if users == 1:
                    del self._locks[key]
                else:
                    self._locks[key] = (lock, users - 1)
