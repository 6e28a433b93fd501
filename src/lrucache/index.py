from __future__ import annotations

from collections.abc import Hashable

from lrucache.recency import Entry


class KeyIndex:
    """Key -> Entry lookup.

    The index never owns entries; it only holds handles into the
    `RecencyList` that does. Ordering lives entirely in the list.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[Hashable, Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def lookup(self, key: Hashable) -> Entry | None:
        return self._entries.get(key)

    def insert(self, key: Hashable, entry: Entry) -> None:
        """Associate `key` with `entry` (last write wins)."""

        self._entries[key] = entry

    def remove(self, key: Hashable) -> None:
        """Drop `key`. Raises KeyError if it is not indexed."""

        del self._entries[key]

    def entries(self) -> list[Entry]:
        return list(self._entries.values())

    def clear(self) -> None:
        self._entries.clear()
