"""Tests for the embedded document store."""

import asyncio

import pytest

from ezbase.core.store import MemoryDocumentStore, SetField, open_store
from ezbase.core.store.base import match_key
from ezbase.errors import StoreError


@pytest.fixture
def store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


class TestMatchKey:
    """Tests for equality keys used by field queries."""

    def test_bool_never_equals_number(self):
        assert match_key(True) != match_key(1)
        assert match_key(False) != match_key(0)

    def test_int_equals_float_of_same_value(self):
        assert match_key(185) == match_key(185.0)

    def test_nested_values_compare_structurally(self):
        assert match_key({"a": [1, 2]}) == match_key({"a": [1, 2]})
        assert match_key([1, 2]) != match_key([2, 1])

    def test_null_is_distinct_from_string(self):
        assert match_key(None) != match_key("null")

    def test_non_json_value_is_store_error(self):
        with pytest.raises(StoreError):
            match_key({"when": object()})


class TestOpenStore:
    def test_memory_url_opens_embedded_store(self):
        assert isinstance(open_store("memory://"), MemoryDocumentStore)


@pytest.mark.asyncio
class TestEmbeddedCollections:
    async def test_drop_collection_removes_documents_and_indices(self, store):
        users = store.collection("Users")
        await users.insert({"_id": "a", "Color": "Brown"})
        await users.create_index("Color")
        await store.drop_collection("Users")

        assert await store.list_collection_names() == []
        assert await users.find("Color", "Brown") == []

    async def test_returned_documents_are_copies(self, store):
        users = store.collection("Users")
        await users.insert({"_id": "a", "Tags": ["x"]})

        found = await users.find_by_id("a")
        found["Tags"].append("y")

        assert (await users.find_by_id("a"))["Tags"] == ["x"]

    async def test_index_gives_same_results_as_scan(self, store):
        users = store.collection("Users")
        await users.insert({"_id": "a", "Color": "Brown"})
        await users.create_index("Color")
        await users.insert({"_id": "b", "Color": "Brown"})
        await users.insert({"_id": "c", "Color": "Blue"})

        assert [doc["_id"] for doc in await users.find("Color", "Brown")] == ["a", "b"]

        await users.update_matching("_id", "a", SetField(field="Color", value="Blue"))
        assert [doc["_id"] for doc in await users.find("Color", "Blue")] == ["a", "c"]

        await users.drop_index("Color")
        assert [doc["_id"] for doc in await users.find("Color", "Brown")] == ["b"]

    async def test_drop_missing_index_is_noop(self, store):
        users = store.collection("Users")
        await users.drop_index("Color")
        await users.drop_all_indices()

    async def test_latest_breaks_ties_by_insertion(self, store):
        entries = store.collection("requests")
        for doc_id in ("b", "a", "c"):
            await entries.insert({"_id": doc_id, "timestamp": 5})

        assert [doc["_id"] for doc in await entries.latest("timestamp", 10)] == ["c", "a", "b"]


@pytest.mark.asyncio
async def test_operations_are_serialized_by_store_lock(store):
    """A store call waits while another holder owns the lock."""
    users = store.collection("Users")
    await users.insert({"_id": "a"})

    async with store.lock:
        pending = asyncio.create_task(users.find_by_id("a"))
        await asyncio.sleep(0)
        assert not pending.done()

    assert await pending == {"_id": "a"}


@pytest.mark.asyncio
async def test_independent_stores_do_not_block_each_other():
    first = MemoryDocumentStore()
    second = MemoryDocumentStore()
    await second.collection("c").insert({"_id": "a"})

    async with first.lock:
        assert await asyncio.wait_for(second.collection("c").find_by_id("a"), timeout=1) == {"_id": "a"}
