"""Configuration model exports.

    from dynamotree.config.models import StorageConfig, TreeConfig
"""

from dynamotree.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from dynamotree.config.models.storage import (
    DynamoDBConfig,
    InMemoryConfig,
    StorageConfig,
)
from dynamotree.config.models.tree import DEFAULT_SPECIAL_CHARACTER, TreeConfig

__all__ = [
    "DEFAULT_SPECIAL_CHARACTER",
    "DynamoDBConfig",
    "InMemoryConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "StorageConfig",
    "TreeConfig",
]
