"""
Groupix Backend Module.

Clients for the hosted backend projects copies are read from and written to.

Usage:
    >>> from groupix.backend import create_clients
    >>>
    >>> async with create_clients(config.source, config.target) as clients:
    ...     rows = await clients.source.select_rows("memories", order_by="created_at", limit=10)
"""

from .base import BackendClient, DownloadedObject, Row
from .factory import ClientPair, create_client, create_clients, get_available_backends
from .memory import InMemoryBackend
from .supabase import SupabaseClient

__all__ = [
    "BackendClient",
    "ClientPair",
    "DownloadedObject",
    "InMemoryBackend",
    "Row",
    "SupabaseClient",
    "create_client",
    "create_clients",
    "get_available_backends",
]
