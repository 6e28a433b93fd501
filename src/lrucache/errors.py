"""lrucache exception hierarchy.

Keep this module small and dependency-free: it is imported by every other
module and by tests.
"""


class LruCacheError(Exception):
    """Base exception for all lrucache errors."""


class LruCapacityError(LruCacheError, ValueError):
    """Raised when a cache capacity is not a positive integer."""


class LruConfigError(LruCacheError):
    """Raised for an unreadable or invalid lrucache.toml."""


class LruScriptError(LruCacheError):
    """Raised when a replay script line cannot be parsed."""

    def __init__(self, message: str, *, lineno: int | None = None) -> None:
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)
