"""Operation scripts: parse `put`/`get` lines and replay them against a cache.

Script format, one operation per line::

    # comment
    put KEY VALUE...
    get KEY

Keys are single tokens; a value is the rest of the line after the key.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from lrucache.cache import LruCache
from lrucache.errors import LruScriptError


@dataclass(frozen=True, slots=True)
class Operation:
    op: Literal["put", "get"]
    key: str
    value: str | None
    lineno: int


@dataclass(frozen=True, slots=True)
class GetResult:
    key: str
    found: bool
    value: str | None
    lineno: int


def parse_script(lines: Iterable[str]) -> list[Operation]:
    ops: list[Operation] = []
    for lineno, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        parts = line.split(None, 2)
        verb = parts[0].lower()
        if verb == "put":
            if len(parts) < 3:
                raise LruScriptError("expected `put KEY VALUE`", lineno=lineno)
            ops.append(Operation("put", parts[1], parts[2], lineno))
        elif verb == "get":
            if len(parts) != 2:
                raise LruScriptError("expected `get KEY`", lineno=lineno)
            ops.append(Operation("get", parts[1], None, lineno))
        else:
            raise LruScriptError(f"unknown operation {parts[0]!r}", lineno=lineno)
    return ops


def replay(cache: LruCache, ops: Iterable[Operation]) -> list[GetResult]:
    """Apply `ops` in order; return one result per `get`."""

    results: list[GetResult] = []
    for op in ops:
        if op.op == "put":
            cache.put(op.key, op.value)
            continue
        found, value = cache.lookup(op.key)
        results.append(GetResult(op.key, found, value, op.lineno))
    return results
