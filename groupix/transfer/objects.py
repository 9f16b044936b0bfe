"""
Object Copier - copies storage objects between two projects.

Enumerates a bucket on the source page by page, then copies every object to
the same path on the target under a bounded worker pool. Uploads use upsert,
so re-running the copier overwrites instead of duplicating.

A failing object is logged and counted; it never aborts the objects around
it. Completed copies are not rolled back when others fail.

Usage:
    >>> config = ObjectCopyConfig.from_env(EnvManager.load())
    >>> result = await copy_storage(config)
    >>> if not result.success:
    ...     print(f"{result.failed} objects failed")
"""

import time
from collections.abc import Callable
from typing import Any

from groupix.backend import BackendClient, DownloadedObject, create_clients
from groupix.core.config import MAX_PAGE_SIZE, ObjectCopyConfig
from groupix.core.exceptions import BackendError, TransferError
from groupix.core.logger import get_logger
from groupix.transfer.progress import TransferProgress, TransferResult
from groupix.transfer.scheduler import BoundedScheduler

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def is_placeholder(entry: dict[str, Any]) -> bool:
    """Folder markers come back with neither metadata nor id."""
    return entry.get("metadata") is None and entry.get("id") is None


async def list_all_paths(
    client: BackendClient,
    bucket: str,
    max_items: int,
    page_size: int = MAX_PAGE_SIZE,
) -> list[str]:
    """
    Enumerate object paths of a bucket in ascending name order.

    Stops when max_items paths were collected, or when a page comes back
    empty or shorter than requested. The offset advances by the number of
    entries the page returned, not by the number of paths kept.

    Args:
        client: Backend to list
        bucket: Bucket name
        max_items: Maximum number of paths to return
        page_size: Entries requested per page (capped at 1000)

    Returns:
        Object paths, placeholders and unnamed entries excluded
    """
    page_size = min(page_size, MAX_PAGE_SIZE)
    paths: list[str] = []
    offset = 0

    while len(paths) < max_items:
        requested = min(page_size, max_items - len(paths))
        page = await client.list_objects(
            bucket,
            prefix="",
            limit=requested,
            offset=offset,
            sort_by="name",
            ascending=True,
        )
        if not page:
            break

        for entry in page:
            name = entry.get("name")
            if not name or not isinstance(name, str):
                continue
            if is_placeholder(entry):
                continue
            paths.append(name)
            if len(paths) >= max_items:
                break

        offset += len(page)
        if len(page) < requested:
            break

    return paths


def resolve_content_type(obj: DownloadedObject) -> str:
    """Declared type, then the transport header, then a generic binary type."""
    if obj.content_type:
        return obj.content_type
    for key, value in obj.headers.items():
        if key.lower() == "content-type" and value:
            return value
    return DEFAULT_CONTENT_TYPE


class ObjectCopier:
    """
    Copies objects of one bucket from source to target.

    Example:
        >>> copier = ObjectCopier(source, target, config)
        >>> result = await copier.run()
        >>> print(f"Success: {result.transferred}, Failed: {result.failed}")
    """

    def __init__(
        self,
        source: BackendClient,
        target: BackendClient,
        config: ObjectCopyConfig,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the copier.

        Args:
            source: Backend objects are downloaded from
            target: Backend objects are uploaded to
            config: Bucket, limit, concurrency and logging cadence
            clock: Monotonic clock for elapsed time and throughput
        """
        self.source = source
        self.target = target
        self.config = config
        self._clock = clock
        self._progress = TransferProgress(clock=clock)
        self._errors: list[tuple[str, str]] = []

    @property
    def progress(self) -> TransferProgress:
        """Get current transfer progress."""
        return self._progress

    async def enumerate(self) -> list[str]:
        """
        List the object paths to copy.

        Raises:
            TransferError: If the source listing fails
        """
        logger.info(f'Listing up to {self.config.limit} files from bucket "{self.config.bucket}"...')
        try:
            paths = await list_all_paths(
                self.source,
                self.config.bucket,
                self.config.limit,
                page_size=self.config.page_size,
            )
        except BackendError as e:
            msg = f"Could not list bucket {self.config.bucket!r}: {e.message}"
            raise TransferError(msg, bucket=self.config.bucket) from e
        logger.info(f"Found {len(paths)} files.")
        return paths

    async def copy_one(self, path: str) -> None:
        """Download one object from the source and upsert it on the target."""
        obj = await self.source.download_object(self.config.bucket, path)
        await self.target.upload_object(
            self.config.bucket,
            path,
            obj.content,
            content_type=resolve_content_type(obj),
            upsert=True,
        )

    def _on_success(self, path: str, _result: Any) -> None:
        self._progress.record_success()
        done = self._progress.transferred
        if done % self.config.log_every == 0:
            logger.info(
                f"Progress: {done}/{self._progress.total} "
                f"({self._progress.files_per_second:.2f} files/s)"
            )

    def _on_failure(self, path: str, error: Exception) -> None:
        self._progress.record_failure()
        message = getattr(error, "message", None) or str(error) or error.__class__.__name__
        self._errors.append((path, message))
        logger.error(f"Failed: {path} {message}")

    async def run(self) -> TransferResult:
        """
        Enumerate and copy every object.

        Returns:
            TransferResult; check `success` or `failed` for partial failure

        Raises:
            TransferError: If enumeration fails
        """
        paths = await self.enumerate()

        self._errors = []
        self._progress = TransferProgress(total=len(paths), clock=self._clock)

        scheduler = BoundedScheduler(self.config.concurrency)
        await scheduler.run(
            paths,
            self.copy_one,
            on_success=self._on_success,
            on_failure=self._on_failure,
        )

        result = TransferResult.from_progress(self._progress, self._errors)
        logger.info(
            f"Done. Success: {result.transferred}, Failed: {result.failed}. "
            f"Avg rate: {result.files_per_second:.2f} files/s"
        )
        return result


async def copy_storage(config: ObjectCopyConfig, backend: str = "supabase", **options) -> TransferResult:
    """
    Convenience function building the client pair and running an ObjectCopier.

    Args:
        config: Object copy configuration
        backend: Backend type passed to the client factory
        **options: Backend-specific client options

    Returns:
        TransferResult with statistics
    """
    async with create_clients(config.source, config.target, backend, **options) as clients:
        return await ObjectCopier(clients.source, clients.target, config).run()
