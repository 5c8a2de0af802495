import pytest

from preview_app.core.services.render_cache import RenderCache


def _compute(key: str) -> str:
    return f"<p>{key}</p>"


def test_inserting_past_capacity_evicts_oldest_entry():
    cache = RenderCache(capacity=3)
    for key in ("a", "b", "c", "d"):
        cache.get_or_compute(key, _compute)

    assert len(cache) == 3
    assert "a" not in cache
    assert cache.keys() == ["b", "c", "d"]


def test_hit_returns_cached_value_without_computing():
    cache = RenderCache(capacity=2)
    calls = []

    def compute(key):
        calls.append(key)
        return key.upper()

    assert cache.get_or_compute("x", compute) == "X"
    assert cache.get_or_compute("x", compute) == "X"
    assert calls == ["x"]
    stats = cache.stats()
    assert (stats.hits, stats.misses, stats.size, stats.capacity) == (1, 1, 1, 2)


def test_access_does_not_refresh_insertion_order():
    cache = RenderCache(capacity=2)
    cache.get_or_compute("first", _compute)
    cache.get_or_compute("second", _compute)
    cache.get_or_compute("first", _compute)
    cache.get_or_compute("third", _compute)

    assert "first" not in cache
    assert cache.keys() == ["second", "third"]


def test_failing_compute_stores_nothing():
    cache = RenderCache(capacity=2)

    def boom(_key):
        raise ValueError("stage blew up")

    with pytest.raises(ValueError):
        cache.get_or_compute("doc", boom)
    assert "doc" not in cache
    assert cache.get_or_compute("doc", _compute) == "<p>doc</p>"


def test_clear_empties_cache():
    cache = RenderCache()
    cache.get_or_compute("a", _compute)
    cache.clear()
    assert len(cache) == 0


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        RenderCache(capacity=0)
