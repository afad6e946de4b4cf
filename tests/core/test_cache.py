"""Tests for nettoplan.core.utils.cache."""

import pytest

from nettoplan.core.exceptions import CacheError
from nettoplan.core.utils.cache import TTLCache


class TestTTLCache:
    def test_store_and_retrieve(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("key", {"hello": "world"})
        assert cache.get("key") == {"hello": "world"}
        assert "key" in cache

    def test_entry_carries_expiry(self, clock):
        cache = TTLCache(default_ttl=60, clock=clock)
        cache.set("key", 1)
        assert cache.get_entry("key") == (1, clock.now + 60)

    def test_expired_data(self, clock):
        cache = TTLCache(default_ttl=60, clock=clock)
        cache.set("key", "data")
        clock.advance(59)
        assert cache.get("key") == "data"
        clock.advance(1)
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_per_entry_ttl(self, clock):
        cache = TTLCache(default_ttl=60, clock=clock)
        cache.set("short", 1, ttl=10)
        cache.set("long", 2)
        clock.advance(30)
        assert cache.get("short") is None
        assert cache.get("long") == 2

    def test_missing_key(self, clock):
        cache = TTLCache(clock=clock)
        assert cache.get("nonexistent") is None
        assert cache.get("nonexistent", "fallback") == "fallback"
        assert cache.get_entry("nonexistent") is None

    def test_get_or_set_computes_once(self, clock):
        cache = TTLCache(clock=clock)
        calls = []

        def factory():
            calls.append(1)
            return None

        assert cache.get_or_set("k", factory) is None
        assert cache.get_or_set("k", factory) is None
        # A cached None is still a hit
        assert len(calls) == 1

    def test_invalidate(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("keep", 1)
        cache.set("remove", 2)
        cache.invalidate("remove")
        cache.invalidate("never-set")
        assert cache.get("keep") == 1
        assert cache.get("remove") is None

    def test_clear(self, clock):
        cache = TTLCache(clock=clock)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear()
        assert len(cache) == 0

    def test_purge_expired(self, clock):
        cache = TTLCache(default_ttl=60, clock=clock)
        cache.set("old", 1, ttl=10)
        cache.set("new", 2)
        clock.advance(20)
        assert cache.purge_expired() == 1
        assert len(cache) == 1

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_non_positive_ttl_rejected(self, clock, ttl):
        cache = TTLCache(clock=clock)
        with pytest.raises(CacheError):
            cache.set("k", 1, ttl=ttl)
        with pytest.raises(CacheError):
            TTLCache(default_ttl=ttl)
