"""
Backend Client Interface

Defines the contract both copy jobs rely on: row queries and batched
inserts on a table, plus paginated listing, download and upload of
objects in a storage bucket.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

Row = dict[str, Any]


@dataclass(frozen=True)
class DownloadedObject:
    """
    Content of a downloaded storage object.

    Attributes:
        content: Raw bytes
        content_type: Type declared by the backend for this object, if any
        headers: Transport headers of the download response
    """

    content: bytes
    content_type: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)


class BackendClient(ABC):
    """Abstract interface for one backend project"""

    name: str = "backend"

    @abstractmethod
    async def select_rows(
        self,
        table: str,
        *,
        order_by: str,
        descending: bool = True,
        limit: int,
    ) -> list[Row]:
        """
        Fetch rows ordered by a column.

        Args:
            table: Table name
            order_by: Column to sort by
            descending: Newest first when True
            limit: Maximum number of rows

        Raises:
            BackendError: If the query fails
        """

    @abstractmethod
    async def insert_rows(self, table: str, rows: list[Row]) -> None:
        """
        Insert rows in a single batched call.

        The batch is all-or-nothing at the backend.

        Raises:
            BackendError: If the insert fails
        """

    @abstractmethod
    async def list_objects(
        self,
        bucket: str,
        *,
        prefix: str = "",
        limit: int,
        offset: int = 0,
        sort_by: str = "name",
        ascending: bool = True,
    ) -> list[dict[str, Any]]:
        """
        List one page of objects in a bucket.

        Returns:
            Listing entries (name, id, metadata, ...). Folder placeholders
            are returned with id and metadata set to None.

        Raises:
            BackendError: If the listing fails
        """

    @abstractmethod
    async def download_object(self, bucket: str, path: str) -> DownloadedObject:
        """
        Download the full content of an object.

        Raises:
            BackendError: If the object cannot be downloaded
        """

    @abstractmethod
    async def upload_object(
        self,
        bucket: str,
        path: str,
        content: bytes,
        *,
        content_type: str,
        upsert: bool = False,
    ) -> None:
        """
        Upload content under a path.

        Args:
            upsert: Overwrite an existing object instead of failing

        Raises:
            BackendError: If the upload fails
        """

    async def aclose(self) -> None:  # noqa: B027
        """Release network resources held by the client."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
