"""
Backend Client Factory - builds the source and target handles for a job

Each job run gets two fresh, independent handles. Nothing is cached across
runs and no network call happens until the first query or upload.
"""

from dataclasses import dataclass
from typing import Any

from groupix.backend.base import BackendClient
from groupix.backend.memory import InMemoryBackend
from groupix.backend.supabase import SupabaseClient
from groupix.core.config import BackendConfig


def _create_supabase_client(config: BackendConfig, options: dict[str, Any]) -> BackendClient:
    """Create a Supabase client with session persistence disabled."""
    return SupabaseClient(
        url=config.url,
        service_key=config.service_key,
        name=config.name,
        persist_session=False,
        **options,
    )


def _create_memory_client(config: BackendConfig, options: dict[str, Any]) -> BackendClient:
    return InMemoryBackend(name=config.name, **options)


# Backend registry mapping backend names to factory functions
_BACKEND_REGISTRY = {
    "supabase": _create_supabase_client,
    "memory": _create_memory_client,
}


def create_client(config: BackendConfig, backend: str = "supabase", **options: Any) -> BackendClient:
    """
    Create one backend handle.

    Args:
        config: Project URL and service key
        backend: Backend type - "supabase" or "memory"
        **options: Backend-specific options (e.g. transport for supabase)

    Returns:
        A BackendClient bound to the project

    Raises:
        ValueError: If an unknown backend is specified

    Example:
        >>> client = create_client(BackendConfig("prod", url, key))
    """
    backend_key = backend.lower().strip()
    factory = _BACKEND_REGISTRY.get(backend_key)
    if factory is None:
        available = ", ".join(sorted(_BACKEND_REGISTRY))
        msg = f"Unknown backend: '{backend}'. Available backends: {available}"
        raise ValueError(msg)
    return factory(config, options)


@dataclass(frozen=True)
class ClientPair:
    """
    Source and target handles for one job run.

    Usable as an async context manager that closes both handles.
    """

    source: BackendClient
    target: BackendClient

    async def aclose(self) -> None:
        try:
            await self.source.aclose()
        finally:
            await self.target.aclose()

    async def __aenter__(self) -> "ClientPair":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def create_clients(
    source: BackendConfig,
    target: BackendConfig,
    backend: str = "supabase",
    **options: Any,
) -> ClientPair:
    """Create independent source and target handles."""
    return ClientPair(
        source=create_client(source, backend, **options),
        target=create_client(target, backend, **options),
    )


def get_available_backends() -> list[str]:
    """Get the list of registered backend names."""
    return sorted(_BACKEND_REGISTRY)
