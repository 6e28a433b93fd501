"""Configuration loading for lrucache.

Only reads `lrucache.toml` and validates it; nothing here touches a cache.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lrucache.cache import validate_capacity
from lrucache.errors import LruCapacityError, LruConfigError

CONFIG_FILENAME = "lrucache.toml"
DEFAULT_MAX_SIZE = 128


@dataclass(frozen=True)
class CacheConfig:
    max_size: int = DEFAULT_MAX_SIZE
    promote_on_read: bool = True


@dataclass(frozen=True)
class LruConfig:
    version: int
    cache: CacheConfig


def find_project_root(start: Path) -> Path:
    """Walk upward from `start` (file or directory) looking for `lrucache.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        if (cur / CONFIG_FILENAME).is_file():
            return cur
        if cur.parent == cur:
            break
        cur = cur.parent

    raise LruConfigError(f"Could not find {CONFIG_FILENAME} by walking upward from start path.")


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise LruConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise LruConfigError(f"Expected {name} to be a boolean.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise LruConfigError(f"Expected {name} to be an integer.")
    return value


def load_config(*, root: Path | None = None, config_path: Path | None = None) -> LruConfig:
    """Load and validate `lrucache.toml`.

    If neither `root` nor `config_path` are provided, the project root is
    discovered by walking upward from the current working directory.
    """

    if config_path is None:
        if root is None:
            root = find_project_root(Path.cwd())
        config_path = root / CONFIG_FILENAME

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise LruConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise LruConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise LruConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise LruConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise LruConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise LruConfigError(f"Unsupported config version: {version_i} (expected 1).")

    cache_tbl = _as_table(data.get("cache"), name="cache")

    if "max_size" in cache_tbl:
        max_size = _as_int(cache_tbl["max_size"], name="cache.max_size")
    else:
        max_size = DEFAULT_MAX_SIZE

    if "promote_on_read" in cache_tbl:
        promote_on_read = _as_bool(cache_tbl["promote_on_read"], name="cache.promote_on_read")
    else:
        promote_on_read = True

    # Validation
    try:
        validate_capacity(max_size, name="cache.max_size")
    except LruCapacityError as e:
        raise LruConfigError(f"Invalid config: {e}") from e

    return LruConfig(
        version=version_i,
        cache=CacheConfig(max_size=max_size, promote_on_read=promote_on_read),
    )
