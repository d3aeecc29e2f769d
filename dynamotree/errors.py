"""Error hierarchy for tree operations and store backends.

Store implementations wrap backend-specific failures in StoreError (or one
of its subclasses) so callers see a consistent taxonomy regardless of backend.
"""

from typing import Any


class TreeError(Exception):
    """Base exception for all dynamotree errors."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


class NotFoundError(TreeError):
    """Raised when no object row exists at the requested path."""

    def __init__(self, path: list[str]) -> None:
        super().__init__(f"not found: {path!r}")
        self.path = list(path)


class NotLinkError(TreeError):
    """Raised when a link target is requested for an ordinary object."""

    def __init__(self, path: list[str]) -> None:
        super().__init__(f"not a link: {path!r}")
        self.path = list(path)


class InvalidPathError(TreeError):
    """Raised for empty paths or empty path components."""

    pass


class ReservedCharacterError(TreeError):
    """Raised when the reserved delimiter shows up where it is not allowed."""

    pass


class ReservedCharacterInKeyError(ReservedCharacterError):
    """Raised when a path component contains the reserved character."""

    def __init__(self, component: str) -> None:
        super().__init__(
            f"a key part contains the reserved character: {component!r}"
        )
        self.component = component


class ReservedCharacterInAttributeError(ReservedCharacterError):
    """Raised when an attribute name starts with the reserved character."""

    def __init__(self, attribute: str) -> None:
        super().__init__(
            f"an attribute name starts with the reserved character: {attribute!r}"
        )
        self.attribute = attribute


class ReservedAttributeNameError(TreeError):
    """Raised when an attribute is named like one of the table's key attributes."""

    def __init__(self, attribute: str) -> None:
        super().__init__(f"attribute name is reserved for the table key: {attribute!r}")
        self.attribute = attribute


class TooManyRedirectsError(TreeError):
    """Raised when a chain of links is longer than the configured hop limit."""

    def __init__(self, path: list[str], hops: int) -> None:
        super().__init__(f"too many link redirects resolving {path!r} ({hops} hops)")
        self.path = list(path)
        self.hops = hops


class LinkCycleError(TooManyRedirectsError):
    """Raised when a chain of links revisits a path it already passed through."""

    def __init__(self, path: list[str], hops: int, repeated: list[str]) -> None:
        super().__init__(path, hops)
        self.message = f"link cycle resolving {path!r}: {repeated!r} visited twice"
        self.args = (self.message,)
        self.repeated = list(repeated)


class CodecError(TreeError):
    """Raised by record codecs when converting to or from attributes fails."""

    pass


class StoreError(TreeError):
    """Opaque failure from the backing store.

    Examples:
        - Network errors or endpoint unavailable
        - Throttling that outlived the retry policy
        - Schema mismatch between the table and the tree
    """

    pass


class TableExistsError(StoreError):
    """Raised by create_table when the table is already present."""

    pass


class UnprocessedItemsError(StoreError):
    """Raised when a batch still has unprocessed requests after bounded retries."""

    def __init__(self, message: str, requests: list[Any]) -> None:
        super().__init__(message)
        self.requests = list(requests)
