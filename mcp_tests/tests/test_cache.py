import asyncio

import pytest

from core.cache import TTLCache


def test_ttlcache_set_get_and_expire(clock):
    c = TTLCache(ttl_seconds=10.0, clock=clock)

    c.set("k", "v")
    assert c.get("k") == "v"

    # Still fresh exactly at the TTL boundary
    clock.now = 10.0
    assert c.get("k") == "v"

    clock.now = 10.001
    assert c.get("k") is None
    assert c.has("k") is False
    assert len(c) == 0


def test_ttlcache_per_entry_ttl(clock):
    c = TTLCache(ttl_seconds=300.0, clock=clock)

    c.set("short", 1, ttl=1.0)
    c.set("long", 2)

    clock.now = 2.0
    assert c.get("short") is None
    assert c.get("long") == 2


def test_ttlcache_get_distinguishes_cached_none_from_miss(clock):
    c = TTLCache(ttl_seconds=5.0, clock=clock)
    missing = object()

    c.set("k", None)
    assert c.get("k", missing) is None
    assert c.get("other", missing) is missing

    clock.now = 6.0
    assert c.get("k", missing) is missing


def test_ttlcache_has_evicts_stale_entry(clock):
    c = TTLCache(ttl_seconds=5.0, clock=clock)
    c.set("k", "v")
    assert c.has("k") is True

    clock.now = 6.0
    assert c.has("k") is False
    assert c.stats()["keys"] == []


def test_ttlcache_set_overwrites_and_resets_age(clock):
    c = TTLCache(ttl_seconds=5.0, clock=clock)
    c.set("k", "old")

    clock.now = 4.0
    c.set("k", "new")

    clock.now = 8.0
    assert c.get("k") == "new"


def test_ttlcache_clear_by_pattern_keeps_unrelated(clock):
    c = TTLCache(ttl_seconds=100.0, clock=clock)
    c.set("/trips/1", {"id": 1})
    c.set("/trips?status=open", [])
    c.set("/profile", {"name": "Ana"})

    assert c.clear("trips") == 2

    assert c.get("/trips/1") is None
    assert c.get("/trips?status=open") is None
    assert c.get("/profile") == {"name": "Ana"}


def test_ttlcache_clear_all(clock):
    c = TTLCache(ttl_seconds=100.0, clock=clock)
    c.set("a", 1)
    c.set("b", 2)

    assert c.clear() == 2
    assert len(c) == 0


def test_ttlcache_sweep_removes_only_expired(clock):
    c = TTLCache(ttl_seconds=10.0, clock=clock)
    c.set("old", 1)

    clock.now = 8.0
    c.set("fresh", 2)

    clock.now = 11.0
    assert c.sweep() == 1
    assert c.stats() == {"size": 1, "keys": ["fresh"]}


def test_ttlcache_eviction_by_maxsize(clock):
    c = TTLCache(ttl_seconds=100.0, maxsize=2, clock=clock)

    c.set("a", 1)
    c.set("b", 2)
    c.set("c", 3)

    assert c.get("a") is None
    assert c.get("b") == 2
    assert c.get("c") == 3


def test_ttlcache_lru_touch_moves_to_end(clock):
    c = TTLCache(ttl_seconds=100.0, maxsize=2, clock=clock)

    c.set("a", 1)
    c.set("b", 2)

    assert c.get("a") == 1

    c.set("c", 3)

    assert c.get("a") == 1
    assert c.get("b") is None
    assert c.get("c") == 3


@pytest.mark.asyncio
async def test_ttlcache_background_sweeper_evicts_unread_keys(clock):
    c = TTLCache(ttl_seconds=1.0, sweep_interval=0.01, clock=clock)
    c.set("never-read", 1)

    clock.now = 5.0
    c.start_sweeper()
    await asyncio.sleep(0.05)

    assert len(c) == 0
    c.destroy()


@pytest.mark.asyncio
async def test_ttlcache_destroy_stops_sweeper_and_clears(clock):
    c = TTLCache(ttl_seconds=100.0, sweep_interval=0.01, clock=clock)
    c.set("k", "v")
    c.start_sweeper()
    sweeper = c._sweeper

    c.destroy()
    await asyncio.sleep(0.02)

    assert len(c) == 0
    assert sweeper.cancelled() or sweeper.done()
    assert c._sweeper is None
