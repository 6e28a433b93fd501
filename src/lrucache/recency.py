"""Recency ordering for cache entries.

`RecencyList` is a doubly-linked list ordered from least- to most-recently
used. It has no sentinel nodes: the two ends are plain references that are
`None` while the list is empty. Callers always hand in the `Entry` to move or
remove, so no operation ever walks the list.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True, eq=False)
class Entry:
    key: Any
    value: Any
    # Links are owned by RecencyList; both are None while detached.
    newer: Entry | None = field(default=None, repr=False)
    older: Entry | None = field(default=None, repr=False)


class RecencyList:
    """Entries from least recently used (oldest) to most recently used (newest)."""

    __slots__ = ("_oldest", "_newest", "_len")

    def __init__(self) -> None:
        self._oldest: Entry | None = None
        self._newest: Entry | None = None
        self._len = 0

    def __len__(self) -> int:
        return self._len

    def __iter__(self) -> Iterator[Entry]:
        cur = self._oldest
        while cur is not None:
            # Read the link first so callers may detach the yielded entry.
            nxt = cur.newer
            yield cur
            cur = nxt

    def least_recent(self) -> Entry | None:
        return self._oldest

    def most_recent(self) -> Entry | None:
        return self._newest

    def insert_most_recent(self, entry: Entry) -> None:
        """Link `entry` at the newest end. It must not already be linked."""

        entry.older = self._newest
        entry.newer = None
        if self._newest is None:
            self._oldest = entry
        else:
            self._newest.newer = entry
        self._newest = entry
        self._len += 1

    def detach(self, entry: Entry) -> None:
        """Unlink `entry` and clear its links. It must currently be linked."""

        older = entry.older
        newer = entry.newer

        if older is None:
            self._oldest = newer
        else:
            older.newer = newer

        if newer is None:
            self._newest = older
        else:
            newer.older = older

        entry.older = None
        entry.newer = None
        self._len -= 1

    def move_to_most_recent(self, entry: Entry) -> None:
        if entry is self._newest:
            return
        self.detach(entry)
        self.insert_most_recent(entry)

    def pop_least_recent(self) -> Entry | None:
        """Detach and return the oldest entry, or None when empty."""

        entry = self._oldest
        if entry is not None:
            self.detach(entry)
        return entry

    def clear(self) -> None:
        # Break the chain so dropped entries don't keep each other alive.
        for entry in self:
            entry.older = None
            entry.newer = None
        self._oldest = None
        self._newest = None
        self._len = 0
