import pytest

from backend.src.services.response_cache import ResponseCache


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_entry_served_until_ttl_then_dropped() -> None:
    clock = _Clock()
    cache = ResponseCache(ttl_seconds=90, clock=clock)
    cache.put("https://api.example/a", {"v": 1})

    clock.now = 89.9
    assert cache.get("https://api.example/a") == {"v": 1}

    clock.now = 90.0
    assert cache.get("https://api.example/a") is None
    assert len(cache) == 0


def test_keys_do_not_collide_across_queries() -> None:
    cache = ResponseCache(clock=_Clock())
    cache.put("https://api.example/commits?per_page=5", ["five"])
    cache.put("https://api.example/commits?per_page=20", ["twenty"])

    assert cache.get("https://api.example/commits?per_page=5") == ["five"]
    assert cache.get("https://api.example/commits?per_page=20") == ["twenty"]


def test_clear_removes_everything() -> None:
    cache = ResponseCache(clock=_Clock())
    cache.put("a", 1)
    cache.put("b", 2)

    cache.clear()

    assert "a" not in cache
    assert len(cache) == 0


def test_rejects_non_positive_ttl() -> None:
    with pytest.raises(ValueError):
        ResponseCache(ttl_seconds=0)


def test_put_sweeps_expired_entries_for_other_keys() -> None:
    clock = _Clock()
    cache = ResponseCache(ttl_seconds=90, clock=clock)
    cache.put("https://api.example/commits?per_page=5", ["five"])
    cache.put("https://api.example/contents/a.md", "a")

    clock.now = 100.0
    cache.put("https://api.example/contents/b.md", "b")

    assert len(cache) == 1
    assert cache.get("https://api.example/contents/b.md") == "b"
