"""Tests for the expiring cache."""
import threading

import pytest

from weather_cache import CacheKey, ExpiringCache


@pytest.fixture
def cache(clock):
    return ExpiringCache(ttl_seconds=600, clock=clock)


def test_get_within_ttl_returns_value(cache, clock):
    key = CacheKey("current", "Kandy")
    cache.put(key, "sunny")

    clock.advance(599.9)
    assert cache.get(key) == "sunny"


def test_get_after_ttl_is_a_miss(cache, clock):
    key = CacheKey("current", "Kandy")
    cache.put(key, "sunny")

    clock.advance(600.1)
    assert cache.get(key) is None


def test_stale_entry_is_a_miss_before_eviction(cache, clock):
    key = CacheKey("current", "Kandy")
    cache.put(key, "sunny")
    clock.advance(601)

    # Still physically held until someone reads it
    assert cache.stats()["size"] == 1
    assert cache.get(key) is None
    assert cache.stats()["size"] == 0


def test_missing_key_is_a_miss(cache):
    assert cache.get(CacheKey("current", "Galle")) is None


def test_put_replaces_entry_and_restarts_ttl(cache, clock):
    key = CacheKey("comprehensive", "Galle")
    cache.put(key, "old")
    clock.advance(500)
    cache.put(key, "new")
    clock.advance(500)

    assert cache.get(key) == "new"


def test_keys_are_per_kind_and_location(cache):
    cache.put(CacheKey("current", "Galle"), 1)
    cache.put(CacheKey("comprehensive", "Galle"), 2)
    cache.put(CacheKey("current", "Matara"), 3)

    assert cache.get(CacheKey("current", "Galle")) == 1
    assert cache.get(CacheKey("comprehensive", "Galle")) == 2
    stats = cache.stats()
    assert stats["size"] == 3
    assert CacheKey("current", "Matara") in stats["keys"]


def test_clear(cache):
    cache.put(CacheKey("current", "Galle"), 1)
    cache.clear()
    assert cache.stats() == {"size": 0, "keys": []}
    assert cache.get(CacheKey("current", "Galle")) is None


def test_invalid_ttl_rejected():
    with pytest.raises(ValueError):
        ExpiringCache(ttl_seconds=0)


def test_concurrent_writers_never_corrupt_entries(cache):
    key = CacheKey("current", "Colombo")
    values = [("reading", n, n * 2) for n in range(200)]
    seen = []

    def writer(value):
        cache.put(key, value)

    def reader():
        for _ in range(200):
            value = cache.get(key)
            if value is not None:
                seen.append(value)

    threads = [threading.Thread(target=writer, args=(v,)) for v in values]
    threads.append(threading.Thread(target=reader))
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert cache.get(key) in values
    assert all(value in values for value in seen)
