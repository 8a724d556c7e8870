"""Tests for the read-through DocumentCache."""

from hotel_offers.cache import DocumentCache
from hotel_offers.store import DocumentStore


async def test_reads_through_and_memoizes():
    store = DocumentStore()
    await store.add("requests", {"id": "r1", "city": "Antalya"})
    cache = DocumentCache(store, "requests")

    assert (await cache.get("r1"))["city"] == "Antalya"
    assert (await cache.get("r1"))["city"] == "Antalya"
    assert cache.misses == 1
    assert cache.hits == 1


async def test_invalidated_on_write():
    store = DocumentStore()
    await store.add("requests", {"id": "r1", "city": "Antalya"})
    cache = DocumentCache(store, "requests")
    await cache.get("r1")

    async with store.transaction("requests", "r1") as doc:
        doc["city"] = "Bodrum"

    assert (await cache.get("r1"))["city"] == "Bodrum"
    assert cache.misses == 2


async def test_other_collections_do_not_invalidate():
    store = DocumentStore()
    await store.add("requests", {"id": "r1"})
    await store.add("offers", {"id": "r1"})
    cache = DocumentCache(store, "requests")
    await cache.get("r1")

    async with store.transaction("offers", "r1") as doc:
        doc["x"] = 1
    await cache.get("r1")

    assert cache.hits == 1


async def test_missing_documents_are_not_cached():
    store = DocumentStore()
    cache = DocumentCache(store, "requests")

    assert await cache.get("r1") is None
    await store.add("requests", {"id": "r1"})
    assert await cache.get("r1") == {"id": "r1"}


async def test_get_many_skips_missing_and_duplicates():
    store = DocumentStore()
    await store.add("requests", {"id": "r1"})
    await store.add("requests", {"id": "r2"})
    cache = DocumentCache(store, "requests")

    found = await cache.get_many(["r1", "r2", "r1", "r3"])

    assert set(found) == {"r1", "r2"}
    assert cache.misses == 3


async def test_cached_copies_are_isolated():
    store = DocumentStore()
    await store.add("requests", {"id": "r1", "tags": []})
    cache = DocumentCache(store, "requests")

    first = await cache.get("r1")
    first["tags"].append("x")

    assert (await cache.get("r1"))["tags"] == []
