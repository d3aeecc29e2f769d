"""Build stores and trees from settings."""

from dynamotree.config import Settings, get_settings
from dynamotree.config.models.storage import StorageConfig
from dynamotree.observability.logging import get_logger, setup_logging
from dynamotree.observability.metrics import setup_metrics
from dynamotree.store import TableStore
from dynamotree.stores import DynamoDBTableStore, InMemoryTableStore
from dynamotree.tree.tree import Tree

logger = get_logger(__name__)


async def create_store(config: StorageConfig) -> TableStore:
    """Create and connect the configured backend."""
    if config.backend == "inmemory":
        return InMemoryTableStore(
            page_size=config.inmemory.page_size,
            auto_create=config.inmemory.auto_create,
        )
    if config.backend == "dynamodb":
        store = DynamoDBTableStore(config.dynamodb)
        await store.connect()
        return store
    raise ValueError(f"Unknown storage backend: {config.backend}")


async def create_tree(settings: Settings | None = None, *, observability: bool = False) -> Tree:
    """Create a Tree on the configured backend.

    Args:
        settings: Settings to use (loads the cached settings if not provided)
        observability: Also configure logging and start the metrics server
    """
    settings = settings or get_settings()
    if observability:
        log_config = settings.observability.logging
        setup_logging(
            level=log_config.level,
            format=log_config.format,
            redact_paths=log_config.redact_paths,
        )
        if settings.observability.metrics.enabled:
            setup_metrics(settings.observability.metrics.port)

    store = await create_store(settings.storage)
    logger.info(
        "tree_created",
        backend=settings.storage.backend,
        table=settings.tree.table_name,
    )
    return Tree(store, settings.tree)
