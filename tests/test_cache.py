from __future__ import annotations

import logging
import random

import pytest

from lrucache import MISS, CacheStats, LruCache, LruCapacityError
from lrucache.config import CacheConfig


@pytest.mark.parametrize("bad", [0, -1, -100])
def test_non_positive_capacity_is_rejected(bad: int) -> None:
    with pytest.raises(LruCapacityError):
        LruCache(bad)


@pytest.mark.parametrize("bad", [1.5, "2", None, True])
def test_non_integer_capacity_is_rejected(bad: object) -> None:
    with pytest.raises(LruCapacityError):
        LruCache(bad)  # type: ignore[arg-type]


def test_capacity_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        LruCache(0)


def test_put_then_get_round_trips() -> None:
    cache = LruCache(2)
    cache.put(1, 100)
    assert cache.get(1) == 100


def test_get_never_put_key_is_miss() -> None:
    cache = LruCache(2)
    assert cache.get("nope") is MISS
    assert cache.get("nope", None) is None
    assert len(cache) == 0


def test_scenario_eviction_of_oldest_write() -> None:
    cache = LruCache(2)
    cache.put(1, 10)
    cache.put(2, 20)
    cache.put(3, 30)

    assert cache.get(1) is MISS
    assert cache.get(2) == 20
    assert cache.get(3) == 30
    cache.check_invariants()


def test_scenario_update_promotes_key() -> None:
    cache = LruCache(2)
    cache.put(1, 10)
    cache.put(2, 20)
    cache.put(1, 11)
    cache.put(3, 30)

    assert cache.get(1) == 11
    assert cache.get(2) is MISS
    assert cache.get(3) == 30
    cache.check_invariants()


def test_scenario_read_promotes_key() -> None:
    cache = LruCache(2)
    cache.put(1, 10)
    cache.put(2, 20)
    cache.get(1)
    cache.put(3, 30)

    assert cache.get(1) == 10
    assert cache.get(2) is MISS
    assert cache.get(3) == 30
    cache.check_invariants()


def test_without_read_promotion_reads_do_not_affect_eviction() -> None:
    cache = LruCache(2, promote_on_read=False)
    cache.put(1, 10)
    cache.put(2, 20)
    assert cache.get(1) == 10
    cache.put(3, 30)

    assert cache.get(1) is MISS
    assert cache.get(2) == 20
    assert cache.get(3) == 30


def test_update_does_not_grow_size() -> None:
    cache = LruCache(3)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.put("a", 3)
    assert len(cache) == 2
    assert cache.keys() == ["b", "a"]
    assert cache.get("a") == 3


def test_capacity_one_keeps_only_latest() -> None:
    cache = LruCache(1)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.keys() == ["b"]
    assert cache.get("a") is MISS
    assert cache.get("b") == 2


def test_lookup_distinguishes_stored_none_from_absent() -> None:
    cache = LruCache(2)
    cache.put("k", None)
    assert cache.lookup("k") == (True, None)
    assert cache.lookup("other") == (False, None)


def test_stored_miss_sentinel_is_reported_as_present() -> None:
    cache = LruCache(2)
    cache.put("k", MISS)
    found, value = cache.lookup("k")
    assert found is True
    assert value is MISS


def test_peek_and_contains_do_not_promote() -> None:
    cache = LruCache(2)
    cache.put(1, 10)
    cache.put(2, 20)
    assert cache.peek(1) == 10
    assert 1 in cache
    cache.put(3, 30)
    assert 1 not in cache
    assert cache.peek(1) is MISS
    assert cache.stats == CacheStats(hits=0, misses=0, evictions=1)


def test_stats_count_hits_misses_and_evictions() -> None:
    cache = LruCache(2)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.get("a")
    cache.get("zzz")
    cache.put("c", 3)
    cache.put("d", 4)
    assert cache.stats == CacheStats(hits=1, misses=1, evictions=2)


def test_keys_and_items_are_in_recency_order() -> None:
    cache = LruCache(3)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.put("c", 3)
    cache.get("a")
    assert cache.keys() == ["b", "c", "a"]
    assert cache.items() == [("b", 2), ("c", 3), ("a", 1)]
    assert list(cache) == ["b", "c", "a"]


def test_clear_empties_cache_and_keeps_capacity() -> None:
    cache = LruCache(2)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.clear()
    assert len(cache) == 0
    assert cache.get("a") is MISS
    cache.put("c", 3)
    cache.put("d", 4)
    cache.put("e", 5)
    assert cache.keys() == ["d", "e"]
    cache.check_invariants()


def test_from_config() -> None:
    cache = LruCache.from_config(CacheConfig(max_size=5, promote_on_read=False))
    assert cache.max_size == 5
    assert cache.promote_on_read is False


def test_eviction_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="lrucache.cache")
    cache = LruCache(1)
    cache.put("old", 1)
    cache.put("new", 2)
    assert any("Evicted key 'old'" in r.getMessage() for r in caplog.records)


def test_check_invariants_detects_desync() -> None:
    cache = LruCache(2)
    cache.put("a", 1)
    cache._index.remove("a")
    with pytest.raises(AssertionError):
        cache.check_invariants()


@pytest.mark.parametrize("promote_on_read", [True, False])
@pytest.mark.parametrize("seed", range(5))
def test_random_operations_match_reference_model(seed: int, promote_on_read: bool) -> None:
    rng = random.Random(seed)
    max_size = rng.randint(1, 6)
    cache = LruCache(max_size, promote_on_read=promote_on_read)

    # Reference: keys ordered oldest -> newest, plus their values.
    order: list[int] = []
    values: dict[int, int] = {}

    for step in range(400):
        key = rng.randint(0, 10)
        if rng.random() < 0.6:
            if key in values:
                order.remove(key)
            elif len(order) == max_size:
                evicted = order.pop(0)
                del values[evicted]
            order.append(key)
            values[key] = step
            cache.put(key, step)
        else:
            got = cache.get(key)
            if key in values:
                assert got == values[key]
                if promote_on_read:
                    order.remove(key)
                    order.append(key)
            else:
                assert got is MISS

        assert len(cache) <= max_size
        assert cache.keys() == order
        cache.check_invariants()


def test_capacity_error_message_names_the_field() -> None:
    with pytest.raises(LruCapacityError, match=r"^max_size must be positive, got 0\.$"):
        LruCache(0)
