"""Path codec: maps hierarchical paths onto (partition key, sort key) rows.

With the default delimiter, storing ["Accounts", "123456", "Links", "xyzpdq"]
writes:

    Key=¦                          Child=Accounts
    Key=¦Accounts¦                 Child=123456
    Key=¦Accounts¦123456¦          Child=Links
    Key=¦Accounts¦123456¦Links¦    Child=xyzpdq
    Key=¦Accounts¦123456¦Links¦xyzpdq   Child=¦   plus the object's attributes

Edge rows (partition key ends with the delimiter) make a "directory"
listable with one partition query. The object row (sort key equal to the
delimiter) holds the payload. A link is an object row whose only attribute
is named by the delimiter and holds the target path, e.g. ¦=¦Accounts¦123456.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from dynamotree.errors import (
    InvalidPathError,
    ReservedAttributeNameError,
    ReservedCharacterInAttributeError,
    ReservedCharacterInKeyError,
)
from dynamotree.models import (
    PARTITION_KEY_NAME,
    SORT_KEY_NAME,
    DeleteRequest,
    ItemKey,
    PutRequest,
    Row,
)


class PathCodec:
    """Encodes paths into storage keys for one delimiter."""

    def __init__(
        self,
        special_character: str,
        key_names: Sequence[str] = (PARTITION_KEY_NAME, SORT_KEY_NAME),
    ) -> None:
        if not special_character:
            raise ValueError("special_character must not be empty")
        self.special_character = special_character
        self.key_names = frozenset(key_names)

    def validate_path(self, path: Sequence[str]) -> list[str]:
        """Check a path and return it as a list.

        Raises:
            InvalidPathError: path is empty or has an empty component
            ReservedCharacterInKeyError: a component contains the delimiter
        """
        if isinstance(path, str):
            raise InvalidPathError(f"path must be a sequence of components, got {path!r}")
        components = list(path)
        if not components:
            raise InvalidPathError("path must have at least one component")
        for component in components:
            if not component:
                raise InvalidPathError(f"empty component in path {components!r}")
            if self.special_character in component:
                raise ReservedCharacterInKeyError(component)
        return components

    def validate_attributes(self, attributes: Mapping[str, Any]) -> None:
        """Reject attribute names that start with the delimiter or shadow a key."""
        for name in attributes:
            if name.startswith(self.special_character):
                raise ReservedCharacterInAttributeError(name)
            if name in self.key_names:
                raise ReservedAttributeNameError(name)

    def join(self, path: Sequence[str]) -> str:
        """Delimiter-prefixed, delimiter-joined path (no trailing delimiter)."""
        d = self.special_character
        return d + d.join(path)

    def directory_key(self, prefix: Sequence[str]) -> str:
        """Partition key holding the edge rows of prefix's children."""
        if not prefix:
            return self.special_character
        return self.join(prefix) + self.special_character

    def object_key(self, path: Sequence[str]) -> ItemKey:
        return ItemKey(partition_key=self.join(path), sort_key=self.special_character)

    def parent_key(self, path: Sequence[str]) -> ItemKey:
        """Key of the edge row linking path's parent to its leaf."""
        return ItemKey(partition_key=self.directory_key(path[:-1]), sort_key=path[-1])

    def edge_rows(self, path: Sequence[str]) -> list[PutRequest]:
        """One edge row per level of path, root first."""
        return [
            PutRequest(row=Row(partition_key=self.directory_key(path[:i]), sort_key=path[i]))
            for i in range(len(path))
        ]

    def object_row(self, path: Sequence[str], attributes: Mapping[str, Any]) -> PutRequest:
        key = self.object_key(path)
        return PutRequest(
            row=Row(
                partition_key=key.partition_key,
                sort_key=key.sort_key,
                attributes=dict(attributes),
            )
        )

    def link_value(self, target: Sequence[str]) -> str:
        return self.join(target)

    def parse_link(self, value: str) -> list[str]:
        return value.split(self.special_character)[1:]

    def link_row(self, path: Sequence[str], target: Sequence[str]) -> PutRequest:
        return self.object_row(path, {self.special_character: self.link_value(target)})

    def delete_requests(self, path: Sequence[str]) -> list[DeleteRequest]:
        """The leaf's edge row and its object row; nothing else."""
        return [
            DeleteRequest(item_key=self.parent_key(path)),
            DeleteRequest(item_key=self.object_key(path)),
        ]

    def link_target(self, row: Row) -> list[str] | None:
        """Target path of a link row, or None for an ordinary object."""
        value = row.attributes.get(self.special_character)
        if value is None:
            return None
        return self.parse_link(str(value))
