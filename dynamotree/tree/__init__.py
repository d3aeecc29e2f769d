"""Hierarchical tree over a table store."""

from dynamotree.tree.batch import BatchWriter
from dynamotree.tree.codec import PathCodec
from dynamotree.tree.links import LinkResolver
from dynamotree.tree.tree import Tree, Visitor

__all__ = [
    "BatchWriter",
    "LinkResolver",
    "PathCodec",
    "Tree",
    "Visitor",
]
