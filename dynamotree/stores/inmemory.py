"""In-memory implementation of TableStore."""

from collections.abc import AsyncGenerator

from dynamotree.errors import StoreError, TableExistsError
from dynamotree.models import (
    DeleteRequest,
    ItemKey,
    PutRequest,
    Row,
    TableSchema,
    WriteRequest,
)
from dynamotree.store import MAX_BATCH_SIZE, TableStore


def _sort_bytes(row: Row) -> bytes:
    return row.sort_key.encode("utf-8")


class InMemoryTableStore(TableStore):
    """In-memory implementation of TableStore for testing and development.

    Rows live in per-table dicts keyed by ItemKey; queries scan and sort by
    the UTF-8 bytes of the sort key. Not suitable for production use.

    Args:
        page_size: Default number of rows per query page
        max_processed_per_batch: If set, each batch_write applies only this
            many requests and reports the rest as unprocessed
        auto_create: Create tables on first write instead of requiring
            create_table
    """

    def __init__(
        self,
        *,
        page_size: int = 100,
        max_processed_per_batch: int | None = None,
        auto_create: bool = False,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if max_processed_per_batch is not None and max_processed_per_batch <= 0:
            raise ValueError("max_processed_per_batch must be positive")
        self._tables: dict[str, dict[ItemKey, Row]] = {}
        self._schemas: dict[str, TableSchema] = {}
        self._page_size = page_size
        self._max_processed = max_processed_per_batch
        self._auto_create = auto_create
        self.batch_calls = 0
        self.pages_served = 0

    def _table(self, table: str) -> dict[ItemKey, Row]:
        if table not in self._tables:
            if not self._auto_create:
                raise StoreError(f"table not found: {table}")
            self._tables[table] = {}
        return self._tables[table]

    def rows(self, table: str) -> list[Row]:
        """Return every row of a table, for inspection in tests."""
        return list(self._table(table).values())

    async def create_table(self, schema: TableSchema) -> None:
        """Create a table. Raises TableExistsError if it is already present."""
        if schema.table_name in self._tables:
            raise TableExistsError(f"table already exists: {schema.table_name}")
        self._tables[schema.table_name] = {}
        self._schemas[schema.table_name] = schema

    async def get_item(self, table: str, key: ItemKey) -> Row | None:
        """Get the row at key, or None."""
        return self._table(table).get(key)

    async def put_item(self, table: str, row: Row) -> None:
        """Write a single row."""
        self._table(table)[row.key] = row

    async def delete_item(self, table: str, key: ItemKey) -> None:
        """Delete the row at key."""
        self._table(table).pop(key, None)

    async def batch_write(
        self, table: str, requests: list[WriteRequest]
    ) -> list[WriteRequest]:
        """Apply a batch, honoring the max_processed_per_batch throttle."""
        if len(requests) > MAX_BATCH_SIZE:
            raise StoreError(
                f"batch of {len(requests)} requests exceeds limit of {MAX_BATCH_SIZE}"
            )
        rows = self._table(table)
        self.batch_calls += 1

        limit = len(requests) if self._max_processed is None else self._max_processed
        for request in requests[:limit]:
            if isinstance(request, PutRequest):
                rows[request.key] = request.row
            elif isinstance(request, DeleteRequest):
                rows.pop(request.key, None)
        return list(requests[limit:])

    async def query(
        self,
        table: str,
        partition_key: str,
        *,
        page_size: int | None = None,
    ) -> AsyncGenerator[list[Row], None]:
        """Iterate pages of one partition in sort-key byte order."""
        size = page_size or self._page_size
        matches = sorted(
            (row for row in self._table(table).values() if row.partition_key == partition_key),
            key=_sort_bytes,
        )
        for start in range(0, len(matches), size):
            self.pages_served += 1
            yield matches[start : start + size]
