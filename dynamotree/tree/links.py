"""Link resolution for tree reads."""

from collections.abc import Sequence

from dynamotree.errors import LinkCycleError, NotFoundError, TooManyRedirectsError
from dynamotree.models import Row
from dynamotree.observability.logging import get_logger
from dynamotree.observability.metrics import LINK_HOPS
from dynamotree.store import TableStore
from dynamotree.tree.codec import PathCodec

logger = get_logger(__name__)


class LinkResolver:
    """Follows link rows until an ordinary object row is reached.

    Resolution is an explicit loop bounded by max_hops. A chain that comes
    back to a path it already visited fails with LinkCycleError; a chain
    longer than max_hops fails with TooManyRedirectsError. A link whose
    target is missing fails with NotFoundError.
    """

    def __init__(
        self,
        store: TableStore,
        table: str,
        codec: PathCodec,
        *,
        max_hops: int = 16,
    ) -> None:
        self._store = store
        self._table = table
        self._codec = codec
        self._max_hops = max_hops

    async def read(self, path: Sequence[str]) -> Row | None:
        """Point-read the object row at path, without following links."""
        return await self._store.get_item(self._table, self._codec.object_key(path))

    async def resolve(self, path: Sequence[str]) -> Row:
        """Return the object row path ultimately refers to."""
        current = list(path)
        seen = {tuple(current)}
        hops = 0

        while True:
            row = await self.read(current)
            if row is None:
                if hops:
                    logger.debug("link_target_missing", path=list(path), target=current)
                raise NotFoundError(current)

            target = self._codec.link_target(row)
            if target is None:
                LINK_HOPS.observe(hops)
                return row

            if tuple(target) in seen:
                logger.warning("link_cycle", path=list(path), repeated=target)
                raise LinkCycleError(list(path), hops + 1, target)
            if hops >= self._max_hops:
                logger.warning("link_too_many_redirects", path=list(path), hops=hops)
                raise TooManyRedirectsError(list(path), hops)

            seen.add(tuple(target))
            current = target
            hops += 1
