import threading

import pytest

from config import CFG
from solver.cache import SolutionCache
from solver.computation import Failed, GivenUp


def test_default_capacity_comes_from_config(monkeypatch):
    monkeypatch.setattr(CFG, "CACHE_SIZE", 3)
    assert SolutionCache().max_entries == 3


def test_rejects_zero_capacity():
    with pytest.raises(ValueError):
        SolutionCache(0)


def test_least_recently_used_entry_is_evicted():
    cache = SolutionCache(2)
    cache.put("a", Failed(1))
    cache.put("b", Failed(2))
    assert cache.get("a") == Failed(1)  # "b" becomes least recent
    cache.put("c", Failed(3))

    assert "a" in cache
    assert "b" not in cache
    assert "c" in cache
    assert len(cache) == 2
    assert cache.stats()["evictions"] == 1


def test_put_overwrites_without_eviction():
    cache = SolutionCache(1)
    cache.put("k", GivenUp(10))
    cache.put("k", GivenUp(20))
    assert cache.get("k") == GivenUp(20)
    assert cache.stats()["evictions"] == 0


def test_stats_track_hits_and_misses():
    cache = SolutionCache(4)
    cache.get("missing")
    cache.put("k", Failed(5))
    cache.get("k")
    cache.get("k")
    stats = cache.stats()
    assert stats["hits"] == 2
    assert stats["misses"] == 1
    assert stats["entries"] == 1
    assert stats["hit_rate"] == pytest.approx(2 / 3)

    cache.clear()
    assert cache.stats() == {
        "entries": 0,
        "max_entries": 4,
        "hits": 0,
        "misses": 0,
        "evictions": 0,
        "hit_rate": 0.0,
    }


def test_concurrent_writers_keep_bound():
    cache = SolutionCache(50)

    def _writer(base):
        for i in range(200):
            cache.put((base, i), Failed(i))
            cache.get((base, i // 2))

    threads = [threading.Thread(target=_writer, args=(n,)) for n in range(4)]
    for th in threads:
        th.start()
    for th in threads:
        th.join()
    assert len(cache) == 50
