from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from lrucache.cache import MISS, CacheStats, LruCache
from lrucache.errors import LruCacheError, LruCapacityError, LruConfigError, LruScriptError


def _package_version() -> str:
    try:
        return version("lrucache")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "MISS",
    "CacheStats",
    "LruCache",
    "LruCacheError",
    "LruCapacityError",
    "LruConfigError",
    "LruScriptError",
    "__version__",
]
