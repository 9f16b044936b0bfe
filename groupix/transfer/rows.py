"""
Row Copier - copies the newest table rows from one project to another.

Rows are treated as opaque documents: only the ordering column and the
identity field are interpreted. The identity field is source-assigned and is
never sent to the target, which assigns its own.

Re-running the copier inserts the rows again; unlike storage objects there
is no upsert key for rows.

Usage:
    >>> config = RowCopyConfig.from_env(EnvManager.load())
    >>> result = await copy_memories(config)
    >>> print(f"Copied {result.inserted} rows")
"""

from dataclasses import dataclass

from groupix.backend import BackendClient, Row, create_clients
from groupix.core.config import RowCopyConfig
from groupix.core.logger import get_logger

logger = get_logger(__name__)


def strip_identity(row: Row, identity_field: str = "id") -> Row:
    """
    Copy a row without its identity field.

    Every other field is kept verbatim and in order, nested values included.
    The input row is not modified.
    """
    return {key: value for key, value in row.items() if key != identity_field}


@dataclass
class RowCopyResult:
    """
    Outcome of a row copy.

    Attributes:
        fetched: Rows read from the source
        inserted: Rows written to the target
    """

    fetched: int = 0
    inserted: int = 0


class RowCopier:
    """
    Copies the latest rows of a table between two backends.

    Any query or insert error aborts the run. The insert is a single batched
    call, so the target either receives the whole payload or nothing.
    """

    def __init__(self, source: BackendClient, target: BackendClient, config: RowCopyConfig):
        self.source = source
        self.target = target
        self.config = config

    async def fetch(self) -> list[Row]:
        """Fetch the newest rows from the source."""
        logger.info(f"Fetching latest {self.config.limit} {self.config.table} from {self.source.name}...")
        rows = await self.source.select_rows(
            self.config.table,
            order_by=self.config.order_by,
            descending=True,
            limit=self.config.limit,
        )
        logger.info(f"Found {len(rows)} {self.config.table}.")
        return rows

    async def run(self) -> RowCopyResult:
        """
        Copy rows from source to target.

        Returns:
            RowCopyResult with the number of rows fetched and inserted

        Raises:
            BackendError: If the query or the insert fails
        """
        rows = await self.fetch()
        if not rows:
            logger.info("Nothing to copy.")
            return RowCopyResult()

        payload = [strip_identity(row, self.config.identity_field) for row in rows]
        await self.target.insert_rows(self.config.table, payload)

        logger.info(f"Done. {len(payload)} {self.config.table} copied to {self.target.name}.")
        return RowCopyResult(fetched=len(rows), inserted=len(payload))


async def copy_memories(config: RowCopyConfig, backend: str = "supabase", **options) -> RowCopyResult:
    """
    Convenience function building the client pair and running a RowCopier.

    Args:
        config: Row copy configuration
        backend: Backend type passed to the client factory
        **options: Backend-specific client options

    Returns:
        RowCopyResult
    """
    async with create_clients(config.source, config.target, backend, **options) as clients:
        return await RowCopier(clients.source, clients.target, config).run()
