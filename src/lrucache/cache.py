"""Fixed-capacity key-value cache with least-recently-used eviction.

`LruCache` pairs a `KeyIndex` (key -> entry handle) with a `RecencyList`
(entries in access order). Every operation locates the entry through the
index first and then relinks it in the list, so both `get` and `put` are O(1).

Reads promote the entry to most-recently-used by default. Passing
``promote_on_read=False`` keeps the older write-only ordering, where eviction
order is decided by writes alone.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from lrucache.errors import LruCapacityError
from lrucache.index import KeyIndex
from lrucache.recency import Entry, RecencyList

if TYPE_CHECKING:  # pragma: no cover
    from lrucache.config import CacheConfig

logger = logging.getLogger("lrucache.cache")


class _Miss:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISS"


MISS: Final = _Miss()


@dataclass(frozen=True, slots=True)
class CacheStats:
    hits: int
    misses: int
    evictions: int


def validate_capacity(max_size: object, *, name: str = "max_size") -> int:
    """Return `max_size` if it is a positive int, else raise LruCapacityError.

    `name` is the field reported in the error message.
    """

    if not isinstance(max_size, int) or isinstance(max_size, bool):
        raise LruCapacityError(f"{name} must be an integer, got {type(max_size).__name__}.")
    if max_size <= 0:
        raise LruCapacityError(f"{name} must be positive, got {max_size}.")
    return max_size


class LruCache:
    """LRU cache holding at most `max_size` keys. Not thread-safe."""

    def __init__(self, max_size: int, *, promote_on_read: bool = True) -> None:
        self._max_size = validate_capacity(max_size)
        self._promote_on_read = bool(promote_on_read)
        self._index = KeyIndex()
        self._recency = RecencyList()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        logger.debug(
            "Created LruCache(max_size=%d, promote_on_read=%s)",
            self._max_size,
            self._promote_on_read,
        )

    @classmethod
    def from_config(cls, cfg: CacheConfig) -> LruCache:
        return cls(cfg.max_size, promote_on_read=cfg.promote_on_read)

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def promote_on_read(self) -> bool:
        return self._promote_on_read

    @property
    def stats(self) -> CacheStats:
        return CacheStats(hits=self._hits, misses=self._misses, evictions=self._evictions)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: object) -> bool:
        # Membership checks never count as an access.
        return key in self._index

    def __repr__(self) -> str:
        return f"LruCache(max_size={self._max_size}, size={len(self)})"

    def lookup(self, key: Hashable) -> tuple[bool, Any]:
        """Return ``(found, value)``; `value` is None when not found.

        A hit counts as an access and promotes the key when read promotion is
        enabled.
        """

        entry = self._index.lookup(key)
        if entry is None:
            self._misses += 1
            return False, None

        self._hits += 1
        if self._promote_on_read:
            self._recency.move_to_most_recent(entry)
        return True, entry.value

    def get(self, key: Hashable, default: Any = MISS) -> Any:
        """Return the value for `key`, or `default` (MISS) when absent."""

        found, value = self.lookup(key)
        return value if found else default

    def peek(self, key: Hashable, default: Any = MISS) -> Any:
        """Like `get`, but leaves recency order and stats untouched."""

        entry = self._index.lookup(key)
        return default if entry is None else entry.value

    def put(self, key: Hashable, value: Any) -> None:
        """Insert or update `key`, making it the most recently used entry.

        Inserting a new key into a full cache first evicts exactly one entry:
        the least recently used one.
        """

        entry = self._index.lookup(key)
        if entry is not None:
            entry.value = value
            self._recency.move_to_most_recent(entry)
            return

        if len(self._index) >= self._max_size:
            self._evict()

        entry = Entry(key, value)
        self._recency.insert_most_recent(entry)
        self._index.insert(key, entry)

    def _evict(self) -> None:
        victim = self._recency.pop_least_recent()
        assert victim is not None, "full cache has an empty recency list"
        self._index.remove(victim.key)
        self._evictions += 1
        logger.debug("Evicted key %r (max_size=%d)", victim.key, self._max_size)

    def keys(self) -> list[Hashable]:
        """Keys from least to most recently used."""

        return [e.key for e in self._recency]

    def items(self) -> list[tuple[Hashable, Any]]:
        return [(e.key, e.value) for e in self._recency]

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.keys())

    def clear(self) -> None:
        """Drop every entry. Stats are kept."""

        self._recency.clear()
        self._index.clear()

    def check_invariants(self) -> None:
        """Assert that the index and the recency list agree (intended for tests)."""

        linked = list(self._recency)
        assert len(linked) == len(self._recency) == len(self._index), (
            f"size mismatch: list walk={len(linked)}, "
            f"list len={len(self._recency)}, index={len(self._index)}"
        )
        assert len(self._index) <= self._max_size, "capacity exceeded"
        assert {id(e) for e in linked} == {id(e) for e in self._index.entries()}, (
            "index and recency list hold different entries"
        )

        prev: Entry | None = None
        for entry in linked:
            assert entry.older is prev, f"broken older link at key {entry.key!r}"
            assert self._index.lookup(entry.key) is entry, f"stale handle for {entry.key!r}"
            prev = entry
        assert prev is self._recency.most_recent(), "newest end out of sync"
