"""
Tests for the backend client factory.
"""

from unittest.mock import AsyncMock

import pytest

from groupix.backend import (
    ClientPair,
    InMemoryBackend,
    SupabaseClient,
    create_client,
    create_clients,
    get_available_backends,
)


class TestCreateClient:
    def test_supabase_default(self, source_config):
        client = create_client(source_config)

        assert isinstance(client, SupabaseClient)
        assert client.url == "https://prod-ref.supabase.co"
        assert client.name == "prod"
        assert client.persist_session is False

    def test_memory_backend(self, source_config):
        client = create_client(source_config, "memory")
        assert isinstance(client, InMemoryBackend)
        assert client.name == "prod"

    def test_case_insensitive(self, source_config):
        assert isinstance(create_client(source_config, "  Supabase "), SupabaseClient)

    def test_unknown_backend(self, source_config):
        with pytest.raises(ValueError, match="Unknown backend: 'firebase'"):
            create_client(source_config, "firebase")

    def test_available_backends(self):
        assert get_available_backends() == ["memory", "supabase"]


class TestCreateClients:
    def test_independent_handles(self, source_config, target_config):
        pair = create_clients(source_config, target_config)

        assert pair.source is not pair.target
        assert pair.source.url == "https://prod-ref.supabase.co"
        assert pair.target.url == "https://dev-ref.supabase.co"

    @pytest.mark.asyncio
    async def test_context_manager_closes_both(self):
        source = InMemoryBackend("prod")
        target = InMemoryBackend("dev")
        source.aclose = AsyncMock()
        target.aclose = AsyncMock()

        async with ClientPair(source, target) as pair:
            assert pair.source is source

        source.aclose.assert_awaited_once()
        target.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_target_closed_when_source_close_fails(self):
        source = InMemoryBackend("prod")
        target = InMemoryBackend("dev")
        source.aclose = AsyncMock(side_effect=RuntimeError("boom"))
        target.aclose = AsyncMock()

        with pytest.raises(RuntimeError):
            await ClientPair(source, target).aclose()

        target.aclose.assert_awaited_once()
