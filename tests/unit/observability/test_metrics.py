"""Tests for Prometheus metrics."""

import pytest
from prometheus_client import REGISTRY

from dynamotree.config.models.tree import TreeConfig
from dynamotree.observability.metrics import (
    LINK_HOPS,
    ROWS_WRITTEN,
    TREE_OPERATIONS,
    UNPROCESSED_RETRIES,
)
from dynamotree.stores import InMemoryTableStore
from dynamotree.tree import Tree
from tests.factories import Account


def sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetricsDefined:
    """Metrics exist and accept their labels."""

    def test_counters(self) -> None:
        TREE_OPERATIONS.labels(operation="put", outcome="ok")
        ROWS_WRITTEN.labels(table="t", kind="put")
        UNPROCESSED_RETRIES.labels(table="t")
        LINK_HOPS.observe(0)


class TestTreeMetrics:
    """Tree operations update metrics."""

    @pytest.mark.asyncio
    async def test_put_counts_rows_and_retries(self, alice: Account) -> None:
        table = "metrics-test"
        store = InMemoryTableStore(max_processed_per_batch=2)
        tree = Tree(store, TreeConfig(table_name=table, retry_base_delay=0))
        await tree.create_table()

        rows_before = sample("dynamotree_rows_written_total", {"table": table, "kind": "put"})
        retries_before = sample("dynamotree_unprocessed_retries_total", {"table": table})
        ok_before = sample("dynamotree_operations_total", {"operation": "put", "outcome": "ok"})

        await tree.put(["a", "b"], alice)

        assert sample("dynamotree_rows_written_total", {"table": table, "kind": "put"}) == rows_before + 3
        assert sample("dynamotree_unprocessed_retries_total", {"table": table}) == retries_before + 1
        assert sample("dynamotree_operations_total", {"operation": "put", "outcome": "ok"}) == ok_before + 1

    @pytest.mark.asyncio
    async def test_list_operations_counted(self, alice: Account) -> None:
        tree = Tree(InMemoryTableStore(), TreeConfig(table_name="metrics-list", retry_base_delay=0))
        await tree.create_table()
        await tree.put(["Dir", "a"], alice)

        children_before = sample(
            "dynamotree_operations_total", {"operation": "list_children", "outcome": "ok"}
        )
        list_before = sample("dynamotree_operations_total", {"operation": "list", "outcome": "ok"})

        assert await tree.list_children(["Dir"]) == ["a"]
        await tree.list(["Dir"], lambda name, error: True)

        assert (
            sample("dynamotree_operations_total", {"operation": "list_children", "outcome": "ok"})
            == children_before + 1
        )
        assert (
            sample("dynamotree_operations_total", {"operation": "list", "outcome": "ok"})
            == list_before + 1
        )

    @pytest.mark.asyncio
    async def test_list_query_error_counted(self) -> None:
        tree = Tree(InMemoryTableStore(), TreeConfig(table_name="metrics-missing"))
        labels = {"operation": "list", "outcome": "error"}
        before = sample("dynamotree_operations_total", labels)

        await tree.list(["Dir"], lambda name, error: True)

        assert sample("dynamotree_operations_total", labels) == before + 1
