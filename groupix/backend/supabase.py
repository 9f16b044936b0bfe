"""
Supabase Backend Client

Talks to a hosted Supabase project over its REST endpoints:
- PostgREST (`/rest/v1`) for table rows
- Storage API (`/storage/v1`) for bucket objects

Requires: pip install httpx
"""

from typing import Any
from urllib.parse import quote

import httpx

from groupix.backend.base import BackendClient, DownloadedObject, Row
from groupix.core.exceptions import BackendError
from groupix.core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(60.0, connect=10.0)


class SupabaseClient(BackendClient):
    """
    Supabase implementation of the backend client

    The underlying httpx client is created lazily, so building a handle never
    touches the network and never validates the URL. A malformed URL shows
    up as a BackendError on the first call.

    Example:
        >>> client = SupabaseClient("https://abcd.supabase.co", service_key)
        >>> async with client:
        ...     rows = await client.select_rows("memories", order_by="created_at", limit=10)
    """

    def __init__(
        self,
        url: str,
        service_key: str,
        name: str = "supabase",
        persist_session: bool = False,
        timeout: httpx.Timeout | float | None = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = (url or "").rstrip("/")
        self.name = name
        self.persist_session = persist_session
        self._service_key = service_key
        self._timeout = timeout
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    def __repr__(self) -> str:
        return f"SupabaseClient(name={self.name!r}, url={self.url!r})"

    def _get_http(self) -> httpx.AsyncClient:
        """Get the HTTP client, creating it if necessary"""
        if self._http is None:
            self._http = httpx.AsyncClient(
                headers={
                    "apikey": self._service_key,
                    "Authorization": f"Bearer {self._service_key}",
                },
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._http

    def _rest_url(self, table: str) -> str:
        return f"{self.url}/rest/v1/{quote(table, safe='')}"

    def _object_url(self, bucket: str, path: str) -> str:
        return f"{self.url}/storage/v1/object/{quote(bucket, safe='')}/{quote(path, safe='/')}"

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request and turn failures into BackendError."""
        http = self._get_http()
        try:
            response = await http.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            msg = f"{self.name}: {method} request failed: {e}"
            raise BackendError(msg, url=url, backend=self.name) from e
        finally:
            if not self.persist_session:
                http.cookies.clear()

        if response.is_error:
            raise BackendError(
                f"{self.name}: {self._error_message(response)}",
                status_code=response.status_code,
                url=url,
                backend=self.name,
            )
        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the backend-reported message from an error response."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("message", "error_description", "error", "msg"):
                if body.get(key):
                    return str(body[key])
        text = response.text.strip()
        return text or response.reason_phrase or f"HTTP {response.status_code}"

    # ==========================================================================
    # Tables
    # ==========================================================================

    async def select_rows(
        self,
        table: str,
        *,
        order_by: str,
        descending: bool = True,
        limit: int,
    ) -> list[Row]:
        direction = "desc" if descending else "asc"
        response = await self._request(
            "GET",
            self._rest_url(table),
            params={"select": "*", "order": f"{order_by}.{direction}", "limit": str(limit)},
        )
        data = response.json()
        return data if isinstance(data, list) else []

    async def insert_rows(self, table: str, rows: list[Row]) -> None:
        await self._request(
            "POST",
            self._rest_url(table),
            json=rows,
            headers={"Prefer": "return=minimal"},
        )
        logger.debug(f"{self.name}: inserted {len(rows)} rows into {table}")

    # ==========================================================================
    # Storage
    # ==========================================================================

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
        response = await self._request(
            "POST",
            f"{self.url}/storage/v1/object/list/{quote(bucket, safe='')}",
            json={
                "prefix": prefix,
                "limit": limit,
                "offset": offset,
                "sortBy": {"column": sort_by, "order": "asc" if ascending else "desc"},
            },
        )
        data = response.json()
        return data if isinstance(data, list) else []

    async def download_object(self, bucket: str, path: str) -> DownloadedObject:
        response = await self._request("GET", self._object_url(bucket, path))
        return DownloadedObject(
            content=response.content,
            content_type=response.headers.get("content-type"),
            headers=dict(response.headers),
        )

    async def upload_object(
        self,
        bucket: str,
        path: str,
        content: bytes,
        *,
        content_type: str,
        upsert: bool = False,
    ) -> None:
        await self._request(
            "POST",
            self._object_url(bucket, path),
            content=content,
            headers={
                "content-type": content_type,
                "x-upsert": "true" if upsert else "false",
            },
        )

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None
