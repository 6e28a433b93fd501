from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from lrucache import __version__
from lrucache.cache import LruCache
from lrucache.config import CacheConfig, find_project_root, load_config
from lrucache.errors import LruCapacityError, LruConfigError, LruScriptError
from lrucache.replay import GetResult, parse_script, replay

EXIT_OK = 0
EXIT_CONFIG_OR_USAGE = 2
EXIT_SCRIPT_ERROR = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lrucache")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    replay_p = subparsers.add_parser("replay", help="Run a put/get script against a fresh cache.")
    replay_p.add_argument("script", type=str, help="Path to the script ('-' for stdin).")
    replay_p.add_argument(
        "--root",
        type=str,
        default=None,
        help="Project root (defaults to searching upward from cwd for lrucache.toml).",
    )
    replay_p.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to lrucache.toml (defaults to <root>/lrucache.toml).",
    )
    replay_p.add_argument("--max-size", type=int, default=None, help="Capacity override.")
    replay_p.add_argument(
        "--no-promote-on-read",
        action="store_true",
        help="Do not refresh recency on get (eviction order follows writes only).",
    )
    replay_p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Emit a single JSON document instead of text lines.",
    )

    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _print_error(e: BaseException) -> None:
    msg = (str(e) or repr(e)).strip()
    _eprint(f"error: {msg}")


def _resolve_cache_config(args: argparse.Namespace) -> CacheConfig:
    """Config file values, if any, with CLI flags applied on top."""

    root = Path(args.root).resolve() if args.root else None
    config_path = Path(args.config).resolve() if args.config else None

    if root is None and config_path is None:
        try:
            root = find_project_root(Path.cwd())
        except LruConfigError:
            root = None

    if root is None and config_path is None:
        cfg = CacheConfig()
    else:
        cfg = load_config(root=root, config_path=config_path).cache

    max_size = cfg.max_size if args.max_size is None else int(args.max_size)
    promote_on_read = cfg.promote_on_read and not bool(args.no_promote_on_read)
    return CacheConfig(max_size=max_size, promote_on_read=promote_on_read)


def _read_script(path: str) -> list[str]:
    name = "<stdin>" if path == "-" else path
    try:
        if path == "-":
            text = sys.stdin.read()
        else:
            text = Path(path).read_text(encoding="utf-8-sig")
    except OSError as e:
        raise LruScriptError(f"cannot read script {name}: {e.strerror or e}") from e
    except UnicodeDecodeError as e:
        raise LruScriptError(f"script is not valid UTF-8: {name}") from e
    # stdin is already decoded, so a leading BOM may survive.
    return text.removeprefix("\ufeff").splitlines()


def _format_result(r: GetResult) -> str:
    if not r.found:
        return f"get {r.key} (miss)"
    return f"get {r.key} = {r.value}"


def cmd_replay(args: argparse.Namespace) -> int:
    try:
        cache = LruCache.from_config(_resolve_cache_config(args))
    except (LruConfigError, LruCapacityError) as e:
        _print_error(e)
        return EXIT_CONFIG_OR_USAGE

    try:
        ops = parse_script(_read_script(args.script))
    except LruScriptError as e:
        _print_error(e)
        return EXIT_SCRIPT_ERROR

    results = replay(cache, ops)
    stats = cache.stats

    if args.json_output:
        doc = {
            "max_size": cache.max_size,
            "promote_on_read": cache.promote_on_read,
            "results": [
                {"line": r.lineno, "key": r.key, "found": r.found, "value": r.value}
                for r in results
            ],
            "keys": cache.keys(),
            "stats": {"hits": stats.hits, "misses": stats.misses, "evictions": stats.evictions},
        }
        print(json.dumps(doc, indent=2))
        return EXIT_OK

    for r in results:
        print(_format_result(r))
    print(
        f"size={len(cache)}/{cache.max_size} hits={stats.hits} "
        f"misses={stats.misses} evictions={stats.evictions}"
    )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_CONFIG_OR_USAGE

    if args.verbose:
        logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
        logging.getLogger("lrucache").setLevel(logging.DEBUG)

    if args.command == "replay":
        return cmd_replay(args)

    return EXIT_CONFIG_OR_USAGE


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
