"""TableStore abstract interface."""

from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator

from dynamotree.models import ItemKey, Row, TableSchema, WriteRequest

# Largest number of requests a backend accepts in one batch_write call
MAX_BATCH_SIZE = 25


class TableStore(ABC):
    """Abstract interface for a (partition key, sort key) table backend.

    Supports point reads and writes, batched writes that may leave some
    requests unprocessed, and paginated queries over one partition.
    """

    @abstractmethod
    async def create_table(self, schema: TableSchema) -> None:
        """Create a table. Raises TableExistsError if it is already present."""
        pass

    @abstractmethod
    async def get_item(self, table: str, key: ItemKey) -> Row | None:
        """Get the row at key, or None."""
        pass

    @abstractmethod
    async def put_item(self, table: str, row: Row) -> None:
        """Write a single row, replacing any row with the same key."""
        pass

    @abstractmethod
    async def delete_item(self, table: str, key: ItemKey) -> None:
        """Delete the row at key. Deleting a missing row is not an error."""
        pass

    @abstractmethod
    async def batch_write(
        self, table: str, requests: list[WriteRequest]
    ) -> list[WriteRequest]:
        """Apply up to MAX_BATCH_SIZE requests.

        Returns the requests the backend did not apply; callers resubmit them.
        """
        pass

    @abstractmethod
    def query(
        self,
        table: str,
        partition_key: str,
        *,
        page_size: int | None = None,
    ) -> AsyncGenerator[list[Row], None]:
        """Iterate pages of rows in one partition, ascending by sort key.

        Pages are fetched lazily; abandoning the iterator stops fetching.
        """
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
