"""Prometheus metrics for dynamotree.

Tracks tree operations, rows written, batch retries, link hops and
backend call latency.
"""

from prometheus_client import Counter, Histogram, start_http_server

TREE_OPERATIONS = Counter(
    "dynamotree_operations_total",
    "Tree operations by outcome",
    labelnames=["operation", "outcome"],
)

ROWS_WRITTEN = Counter(
    "dynamotree_rows_written_total",
    "Rows submitted through the batch writer",
    labelnames=["table", "kind"],
)

UNPROCESSED_RETRIES = Counter(
    "dynamotree_unprocessed_retries_total",
    "Batch resubmissions caused by unprocessed items",
    labelnames=["table"],
)

LINK_HOPS = Histogram(
    "dynamotree_link_hops",
    "Links followed per get",
    buckets=(0, 1, 2, 3, 5, 8, 16),
)

STORE_LATENCY = Histogram(
    "dynamotree_store_latency_seconds",
    "Backend call latency in seconds",
    labelnames=["backend", "call"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)


def setup_metrics(port: int = 9090) -> None:
    """Expose metrics over HTTP on the given port."""
    start_http_server(port)
