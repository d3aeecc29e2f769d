"""Table store backends."""

from dynamotree.store import TableStore
from dynamotree.stores.dynamodb import DynamoDBTableStore
from dynamotree.stores.inmemory import InMemoryTableStore

__all__ = [
    "TableStore",
    "DynamoDBTableStore",
    "InMemoryTableStore",
]
