"""Batch writer: chunked batch_write with resubmission of unprocessed items."""

import asyncio
from collections.abc import Sequence

from dynamotree.errors import UnprocessedItemsError
from dynamotree.models import PutRequest, WriteRequest
from dynamotree.observability.logging import get_logger
from dynamotree.observability.metrics import ROWS_WRITTEN, UNPROCESSED_RETRIES
from dynamotree.store import MAX_BATCH_SIZE, TableStore

logger = get_logger(__name__)


class BatchWriter:
    """Applies a list of write requests in chunks, retrying until done.

    Requests are split into chunks of at most batch_size. Each chunk is
    resubmitted with whatever the store reports as unprocessed until nothing
    is left. Ordering holds only within a chunk.

    A store error aborts immediately. Chunks already applied stay applied,
    so a multi-row write can be left partially committed.
    """

    def __init__(
        self,
        store: TableStore,
        table: str,
        *,
        batch_size: int = MAX_BATCH_SIZE,
        retry_base_delay: float = 0.05,
        retry_max_delay: float = 2.0,
        max_retries: int | None = None,
    ) -> None:
        if not 0 < batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}")
        self._store = store
        self._table = table
        self._batch_size = batch_size
        self._base_delay = retry_base_delay
        self._max_delay = retry_max_delay
        self._max_retries = max_retries

    def chunks(self, requests: Sequence[WriteRequest]) -> list[list[WriteRequest]]:
        size = self._batch_size
        return [list(requests[i : i + size]) for i in range(0, len(requests), size)]

    async def write(self, requests: Sequence[WriteRequest]) -> None:
        """Apply every request. Raises StoreError on backend failure."""
        for chunk in self.chunks(requests):
            await self._write_chunk(chunk)
            puts = sum(1 for r in chunk if isinstance(r, PutRequest))
            ROWS_WRITTEN.labels(table=self._table, kind="put").inc(puts)
            ROWS_WRITTEN.labels(table=self._table, kind="delete").inc(len(chunk) - puts)

    async def _write_chunk(self, chunk: list[WriteRequest]) -> None:
        pending = chunk
        attempt = 0
        while True:
            pending = await self._store.batch_write(self._table, pending)
            if not pending:
                return

            if self._max_retries is not None and attempt >= self._max_retries:
                logger.error(
                    "batch_unprocessed_exhausted",
                    table=self._table,
                    unprocessed=len(pending),
                    attempts=attempt + 1,
                )
                raise UnprocessedItemsError(
                    f"{len(pending)} requests still unprocessed after "
                    f"{attempt} retries",
                    pending,
                )

            UNPROCESSED_RETRIES.labels(table=self._table).inc()
            logger.debug(
                "batch_retry_unprocessed",
                table=self._table,
                unprocessed=len(pending),
                attempt=attempt + 1,
            )
            await self._backoff(attempt)
            attempt += 1

    async def _backoff(self, attempt: int) -> None:
        delay = min(self._base_delay * 2**attempt, self._max_delay)
        if delay > 0:
            await asyncio.sleep(delay)
