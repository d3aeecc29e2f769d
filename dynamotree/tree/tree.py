"""Tree: hierarchical object storage over a (partition key, sort key) table.

Objects are addressed by paths such as ["Accounts", "123456"]. Fetching an
object by its full path is a single point read; listing the immediate
children of a path is a single partition query. Symbolic links let one
object appear at several paths.
"""

import inspect
from collections.abc import AsyncGenerator, Awaitable, Callable, Iterator, Sequence
from contextlib import aclosing, contextmanager
from typing import TypeVar

from dynamotree.config.models.tree import TreeConfig
from dynamotree.errors import NotFoundError, NotLinkError, StoreError, TableExistsError
from dynamotree.models import TableSchema
from dynamotree.observability.logging import get_logger
from dynamotree.observability.metrics import TREE_OPERATIONS
from dynamotree.record import Storable
from dynamotree.store import TableStore
from dynamotree.tree.batch import BatchWriter
from dynamotree.tree.codec import PathCodec
from dynamotree.tree.links import LinkResolver

logger = get_logger(__name__)

T = TypeVar("T", bound=Storable)

# visit(name, error) -> keep going?
Visitor = Callable[[str, Exception | None], bool | Awaitable[bool]]


@contextmanager
def _track(operation: str) -> Iterator[dict[str, str]]:
    # callers may set result["outcome"] for failures they report without raising
    result = {"outcome": "ok"}
    try:
        yield result
    except Exception:
        TREE_OPERATIONS.labels(operation=operation, outcome="error").inc()
        raise
    TREE_OPERATIONS.labels(operation=operation, outcome=result["outcome"]).inc()


class Tree:
    """Hierarchical storage on top of a TableStore.

    Multi-row writes (put, put_link, delete) go through a BatchWriter and
    are not atomic: a store failure part way through leaves the rows that
    were already written in place.
    """

    def __init__(self, store: TableStore, config: TreeConfig | None = None) -> None:
        """Initialize a tree.

        Args:
            store: Backend holding the tree's table
            config: Tree configuration (uses defaults if not provided)
        """
        self._store = store
        self._config = config or TreeConfig()
        self.table_name = self._config.table_name
        self.codec = PathCodec(self._config.special_character)
        self._writer = BatchWriter(
            store,
            self.table_name,
            batch_size=self._config.batch_size,
            retry_base_delay=self._config.retry_base_delay,
            retry_max_delay=self._config.retry_max_delay,
            max_retries=self._config.max_unprocessed_retries,
        )
        self._links = LinkResolver(
            store,
            self.table_name,
            self.codec,
            max_hops=self._config.max_link_hops,
        )

    @property
    def special_character(self) -> str:
        return self.codec.special_character

    @property
    def store(self) -> TableStore:
        return self._store

    async def create_table(self) -> None:
        """Create the backing table. Succeeds if it already exists."""
        schema = TableSchema(
            table_name=self.table_name,
            billing_mode=self._config.billing_mode,
            read_capacity_units=self._config.read_capacity_units,
            write_capacity_units=self._config.write_capacity_units,
        )
        with _track("create_table"):
            try:
                await self._store.create_table(schema)
                logger.info("table_created", table=self.table_name)
            except TableExistsError:
                logger.debug("table_exists", table=self.table_name)

    async def put(self, path: Sequence[str], item: Storable) -> None:
        """Store item at path, creating edge rows for every level.

        Raises:
            ReservedCharacterInKeyError: a path component contains the delimiter
            ReservedCharacterInAttributeError: an attribute name starts with it
            ReservedAttributeNameError: an attribute is named like a key attribute
            StoreError: the backend failed
        Errors raised by item.to_attributes() propagate unchanged.
        """
        with _track("put"):
            components = self.codec.validate_path(path)
            requests = self.codec.edge_rows(components)

            attributes = item.to_attributes()
            self.codec.validate_attributes(attributes)
            requests.append(self.codec.object_row(components, attributes))

            await self._writer.write(requests)
            logger.debug("tree_put", table=self.table_name, path=components, rows=len(requests))

    async def put_link(self, path: Sequence[str], target: Sequence[str]) -> None:
        """Create a symbolic link at path pointing to target.

        The target need not exist yet; get on a dangling link fails with
        NotFoundError.
        """
        with _track("put_link"):
            components = self.codec.validate_path(path)
            target_components = self.codec.validate_path(target)

            requests = self.codec.edge_rows(components)
            requests.append(self.codec.link_row(components, target_components))

            await self._writer.write(requests)
            logger.debug(
                "tree_put_link",
                table=self.table_name,
                path=components,
                target=target_components,
            )

    async def get(self, path: Sequence[str], item_type: type[T]) -> T:
        """Fetch the object at path, following links.

        Raises:
            NotFoundError: nothing is stored at path (or at a link's target)
            TooManyRedirectsError: the link chain is too long or cyclic
        Errors raised by item_type.from_attributes() propagate unchanged.
        """
        with _track("get"):
            components = self.codec.validate_path(path)
            row = await self._links.resolve(components)
            return item_type.from_attributes(dict(row.attributes))

    async def get_link(self, path: Sequence[str]) -> list[str]:
        """Return the immediate target of the link at path.

        Raises:
            NotFoundError: nothing is stored at path
            NotLinkError: path holds an ordinary object
        """
        with _track("get_link"):
            components = self.codec.validate_path(path)
            row = await self._links.read(components)
            if row is None:
                raise NotFoundError(components)
            target = self.codec.link_target(row)
            if target is None:
                raise NotLinkError(components)
            return target

    async def children(self, prefix: Sequence[str] = ()) -> AsyncGenerator[str, None]:
        """Yield the names of prefix's immediate children in sort-key order.

        Pages are fetched as iteration proceeds. Raises StoreError if the
        query fails.
        """
        components = self.codec.validate_path(prefix) if prefix else []
        pages = self._store.query(
            self.table_name,
            self.codec.directory_key(components),
            page_size=self._config.query_page_size,
        )
        async with aclosing(pages):
            async for page in pages:
                for row in page:
                    yield row.sort_key

    async def list_children(self, prefix: Sequence[str] = ()) -> list[str]:
        """Return all immediate children of prefix."""
        with _track("list_children"):
            return [name async for name in self.children(prefix)]

    async def list(self, prefix: Sequence[str], visit: Visitor) -> None:
        """Call visit(name, None) for each immediate child of prefix.

        Iteration stops as soon as visit returns False. If the query fails,
        visit("", error) is called once and iteration stops. visit may be a
        plain function or a coroutine function.
        """
        with _track("list") as result:
            async with aclosing(self.children(prefix)) as names:
                while True:
                    try:
                        name = await anext(names)
                    except StopAsyncIteration:
                        return
                    except StoreError as e:
                        result["outcome"] = "error"
                        logger.error(
                            "tree_list_error",
                            table=self.table_name,
                            prefix=list(prefix),
                            error=str(e),
                        )
                        await _call(visit, "", e)
                        return
                    if not await _call(visit, name, None):
                        return

    async def delete(self, path: Sequence[str]) -> None:
        """Remove the object at path and its entry in the parent listing.

        Edge rows created for ancestors are left alone, and children of path
        are not removed: they stay reachable by full path but are no longer
        listed under it.
        """
        with _track("delete"):
            components = self.codec.validate_path(path)
            await self._writer.write(self.codec.delete_requests(components))
            logger.debug("tree_delete", table=self.table_name, path=components)


async def _call(visit: Visitor, name: str, error: Exception | None) -> bool:
    result = visit(name, error)
    if inspect.isawaitable(result):
        result = await result
    return bool(result)
