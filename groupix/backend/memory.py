"""
In-memory backend implementation

Provides a dictionary-backed stand-in for a backend project, used for
testing and local dry runs. Not suitable for real copies as state is lost
when the process exits.
"""

import asyncio
import copy
from collections.abc import Callable
from typing import Any

from groupix.backend.base import BackendClient, DownloadedObject, Row
from groupix.core.exceptions import BackendError

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class InMemoryBackend(BackendClient):
    """
    In-memory implementation of the backend client

    Tables are lists of rows, buckets map object paths to (content,
    content type). Identity values are assigned on insert the way a real
    table would.

    Failure injection:
        fail_on: called with (operation, path) for download/upload; return
            True to make that call raise BackendError
    """

    def __init__(
        self,
        name: str = "memory",
        fail_on: Callable[[str, str], bool] | None = None,
    ):
        self.name = name
        self.fail_on = fail_on
        self.tables: dict[str, list[Row]] = {}
        self.buckets: dict[str, dict[str, tuple[bytes, str | None]]] = {}
        self.calls: list[tuple[str, Any]] = []
        self._next_id = 1
        self._lock = asyncio.Lock()

    # Seeding helpers for tests

    def add_rows(self, table: str, rows: list[Row]) -> None:
        """Store rows as-is, keeping any identity values they carry."""
        self.tables.setdefault(table, []).extend(copy.deepcopy(rows))

    def put_object(
        self, bucket: str, path: str, content: bytes, content_type: str | None = None
    ) -> None:
        self.buckets.setdefault(bucket, {})[path] = (content, content_type)

    def object_paths(self, bucket: str) -> list[str]:
        return sorted(self.buckets.get(bucket, {}))

    def _maybe_fail(self, operation: str, path: str) -> None:
        if self.fail_on is not None and self.fail_on(operation, path):
            msg = f"{self.name}: {operation} failed for {path}"
            raise BackendError(msg, status_code=500, backend=self.name)

    # Tables

    async def select_rows(
        self,
        table: str,
        *,
        order_by: str,
        descending: bool = True,
        limit: int,
    ) -> list[Row]:
        self.calls.append(("select_rows", table))
        async with self._lock:
            rows = sorted(
                self.tables.get(table, []),
                key=lambda row: row.get(order_by) or "",
                reverse=descending,
            )
            return copy.deepcopy(rows[:limit])

    async def insert_rows(self, table: str, rows: list[Row]) -> None:
        self.calls.append(("insert_rows", table))
        async with self._lock:
            stored = []
            for row in rows:
                if "id" in row:
                    msg = f"{self.name}: cannot insert explicit value for identity column 'id'"
                    raise BackendError(msg, status_code=400, backend=self.name)
                stored.append({"id": self._next_id, **copy.deepcopy(row)})
                self._next_id += 1
            self.tables.setdefault(table, []).extend(stored)

    # Storage

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
        self.calls.append(("list_objects", (bucket, limit, offset)))
        if bucket not in self.buckets:
            msg = f"{self.name}: bucket {bucket!r} not found"
            raise BackendError(msg, status_code=404, backend=self.name)

        entries: dict[str, dict[str, Any]] = {}
        for path, (content, content_type) in self.buckets[bucket].items():
            if not path.startswith(prefix):
                continue
            head, sep, _ = path[len(prefix):].partition("/")
            if sep:
                entries.setdefault(head, {"name": head, "id": None, "metadata": None})
            else:
                entries[head] = {
                    "name": head,
                    "id": f"{bucket}/{path}",
                    "metadata": {
                        "size": len(content),
                        "mimetype": content_type or DEFAULT_CONTENT_TYPE,
                    },
                }

        ordered = sorted(entries.values(), key=lambda e: e.get(sort_by) or "", reverse=not ascending)
        return ordered[offset : offset + limit]

    async def download_object(self, bucket: str, path: str) -> DownloadedObject:
        self.calls.append(("download_object", path))
        self._maybe_fail("download", path)
        try:
            content, content_type = self.buckets[bucket][path]
        except KeyError:
            msg = f"{self.name}: object {path!r} not found"
            raise BackendError(msg, status_code=404, backend=self.name) from None
        return DownloadedObject(content=content, content_type=content_type)

    async def upload_object(
        self,
        bucket: str,
        path: str,
        content: bytes,
        *,
        content_type: str,
        upsert: bool = False,
    ) -> None:
        self.calls.append(("upload_object", path))
        self._maybe_fail("upload", path)
        objects = self.buckets.setdefault(bucket, {})
        if path in objects and not upsert:
            msg = f"{self.name}: the resource already exists: {path}"
            raise BackendError(msg, status_code=409, backend=self.name)
        objects[path] = (bytes(content), content_type)
