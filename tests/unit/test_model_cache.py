import pytest

from core.cache import ModelCache
from db.models.post import Post


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.unit
def test_set_get_and_invalidate():
    cache = ModelCache()
    cache.set(Post, 1, "post-1")

    assert cache.get(Post, 1) == "post-1"
    assert cache.get("Post", 1) == "post-1"
    assert cache.invalidate(Post, 1) is True
    assert cache.get(Post, 1) is None
    assert cache.invalidate(Post, 1) is False


@pytest.mark.unit
def test_kinds_do_not_collide():
    cache = ModelCache()
    cache.set("Post", 1, "post")
    cache.set("Category", 1, "category")

    cache.invalidate("Post", 1)
    assert cache.get("Category", 1) == "category"


@pytest.mark.unit
def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = ModelCache(default_ttl=10, clock=clock)
    cache.set(Post, 1, "a")
    cache.set(Post, 2, "b", ttl=30)

    clock.now += 10
    assert cache.get(Post, 1) is None
    assert cache.get(Post, 2) == "b"


@pytest.mark.unit
def test_oldest_entry_evicted_when_full():
    cache = ModelCache(max_entries=2)
    cache.set(Post, 1, "a")
    cache.set(Post, 2, "b")
    cache.set(Post, 3, "c")

    assert len(cache) == 2
    assert cache.get(Post, 1) is None
    assert cache.get(Post, 3) == "c"


@pytest.mark.unit
def test_disabled_cache_stores_nothing():
    cache = ModelCache(enabled=False)
    cache.set(Post, 1, "a")
    assert cache.get(Post, 1) is None
    assert len(cache) == 0


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_or_load_reads_through_once():
    cache = ModelCache()
    calls = 0

    async def loader():
        nonlocal calls
        calls += 1
        return {"id": 1}

    first = await cache.get_or_load(Post, 1, loader)
    second = await cache.get_or_load(Post, 1, loader)

    assert first == second == {"id": 1}
    assert calls == 1


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_or_load_does_not_cache_missing():
    cache = ModelCache()

    async def loader():
        return None

    assert await cache.get_or_load(Post, 1, loader) is None
    assert len(cache) == 0
