"""dynamotree: hierarchical, filesystem-like storage for DynamoDB.

Objects are addressed by paths (lists of components). Each stored path
becomes one row per level plus one object row, so fetching by full path is
a point read and listing a "directory" is a single partition query.

Usage:
    from dynamotree import InMemoryTableStore, StorableModel, Tree

    class Account(StorableModel):
        name: str

    tree = Tree(InMemoryTableStore())
    await tree.create_table()
    await tree.put(["Accounts", "123456"], Account(name="Alice"))
    account = await tree.get(["Accounts", "123456"], Account)
"""

from dynamotree.config.models.tree import DEFAULT_SPECIAL_CHARACTER, TreeConfig
from dynamotree.errors import (
    CodecError,
    InvalidPathError,
    LinkCycleError,
    NotFoundError,
    NotLinkError,
    ReservedAttributeNameError,
    ReservedCharacterError,
    ReservedCharacterInAttributeError,
    ReservedCharacterInKeyError,
    StoreError,
    TableExistsError,
    TooManyRedirectsError,
    TreeError,
    UnprocessedItemsError,
)
from dynamotree.record import Storable, StorableModel
from dynamotree.store import TableStore
from dynamotree.stores import DynamoDBTableStore, InMemoryTableStore
from dynamotree.tree import Tree

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_SPECIAL_CHARACTER",
    "CodecError",
    "DynamoDBTableStore",
    "InMemoryTableStore",
    "InvalidPathError",
    "LinkCycleError",
    "NotFoundError",
    "NotLinkError",
    "ReservedAttributeNameError",
    "ReservedCharacterError",
    "ReservedCharacterInAttributeError",
    "ReservedCharacterInKeyError",
    "Storable",
    "StorableModel",
    "StoreError",
    "TableExistsError",
    "TableStore",
    "TooManyRedirectsError",
    "Tree",
    "TreeConfig",
    "TreeError",
    "UnprocessedItemsError",
]
