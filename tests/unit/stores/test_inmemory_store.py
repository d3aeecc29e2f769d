"""Tests for InMemoryTableStore."""

import pytest
import pytest_asyncio

from dynamotree.errors import StoreError, TableExistsError
from dynamotree.models import DeleteRequest, ItemKey, PutRequest, Row, TableSchema
from dynamotree.stores import InMemoryTableStore

TABLE = "inmemory-test"


@pytest_asyncio.fixture
async def store() -> InMemoryTableStore:
    """Create a fresh store with one table for each test."""
    store = InMemoryTableStore(page_size=2)
    await store.create_table(TableSchema(table_name=TABLE))
    return store


def row(pk: str, sk: str, **attributes) -> Row:
    return Row(partition_key=pk, sort_key=sk, attributes=attributes)


async def collect(store: InMemoryTableStore, pk: str, **kwargs) -> list[list[str]]:
    return [[r.sort_key for r in page] async for page in store.query(TABLE, pk, **kwargs)]


class TestTables:
    """Tests for table management."""

    @pytest.mark.asyncio
    async def test_create_existing_table(self, store: InMemoryTableStore) -> None:
        with pytest.raises(TableExistsError):
            await store.create_table(TableSchema(table_name=TABLE))

    @pytest.mark.asyncio
    async def test_missing_table(self) -> None:
        store = InMemoryTableStore()
        with pytest.raises(StoreError):
            await store.get_item("nope", ItemKey(partition_key="p", sort_key="s"))

    @pytest.mark.asyncio
    async def test_auto_create(self) -> None:
        store = InMemoryTableStore(auto_create=True)
        await store.put_item("fresh", row("p", "s"))
        assert await store.get_item("fresh", ItemKey(partition_key="p", sort_key="s")) is not None

    def test_invalid_options(self) -> None:
        with pytest.raises(ValueError):
            InMemoryTableStore(page_size=0)
        with pytest.raises(ValueError):
            InMemoryTableStore(max_processed_per_batch=0)


class TestPointOperations:
    """Tests for get/put/delete."""

    @pytest.mark.asyncio
    async def test_put_get_delete(self, store: InMemoryTableStore) -> None:
        key = ItemKey(partition_key="p", sort_key="s")
        await store.put_item(TABLE, row("p", "s", name="Alice"))

        fetched = await store.get_item(TABLE, key)
        assert fetched is not None
        assert fetched.attributes == {"name": "Alice"}

        await store.delete_item(TABLE, key)
        assert await store.get_item(TABLE, key) is None

    @pytest.mark.asyncio
    async def test_delete_missing(self, store: InMemoryTableStore) -> None:
        await store.delete_item(TABLE, ItemKey(partition_key="p", sort_key="s"))


class TestBatchWrite:
    """Tests for batch_write."""

    @pytest.mark.asyncio
    async def test_applies_puts_and_deletes(self, store: InMemoryTableStore) -> None:
        await store.put_item(TABLE, row("p", "old"))
        unprocessed = await store.batch_write(
            TABLE,
            [
                PutRequest(row=row("p", "new")),
                DeleteRequest(item_key=ItemKey(partition_key="p", sort_key="old")),
            ],
        )
        assert unprocessed == []
        assert [r.sort_key for r in store.rows(TABLE)] == ["new"]

    @pytest.mark.asyncio
    async def test_rejects_oversized_batch(self, store: InMemoryTableStore) -> None:
        requests = [PutRequest(row=row("p", str(i))) for i in range(26)]
        with pytest.raises(StoreError):
            await store.batch_write(TABLE, requests)

    @pytest.mark.asyncio
    async def test_throttle_returns_remainder(self) -> None:
        store = InMemoryTableStore(max_processed_per_batch=2)
        await store.create_table(TableSchema(table_name=TABLE))
        requests = [PutRequest(row=row("p", str(i))) for i in range(5)]

        unprocessed = await store.batch_write(TABLE, requests)

        assert unprocessed == requests[2:]
        assert len(store.rows(TABLE)) == 2


class TestQuery:
    """Tests for partition queries."""

    @pytest.mark.asyncio
    async def test_pages_in_byte_order(self, store: InMemoryTableStore) -> None:
        for sk in ["c", "a", "é", "B", "b"]:
            await store.put_item(TABLE, row("p", sk))
        await store.put_item(TABLE, row("other", "a"))

        assert await collect(store, "p") == [["B", "a"], ["b", "c"], ["é"]]

    @pytest.mark.asyncio
    async def test_page_size_override(self, store: InMemoryTableStore) -> None:
        for sk in ["a", "b", "c"]:
            await store.put_item(TABLE, row("p", sk))
        assert await collect(store, "p", page_size=10) == [["a", "b", "c"]]

    @pytest.mark.asyncio
    async def test_empty_partition(self, store: InMemoryTableStore) -> None:
        assert await collect(store, "nothing") == []
