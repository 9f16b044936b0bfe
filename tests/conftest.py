"""
Pytest configuration and shared fixtures for the copy tool tests
"""

import pytest

from groupix.backend import InMemoryBackend
from groupix.core.config import BackendConfig, ObjectCopyConfig, RowCopyConfig

BUCKET = "trip-media"


@pytest.fixture
def source_config():
    return BackendConfig(name="prod", url="https://prod-ref.supabase.co", service_key="prod-key")


@pytest.fixture
def target_config():
    return BackendConfig(name="dev", url="https://dev-ref.supabase.co", service_key="dev-key")


@pytest.fixture
def row_config(source_config, target_config):
    return RowCopyConfig(source=source_config, target=target_config)


@pytest.fixture
def object_config(source_config, target_config):
    return ObjectCopyConfig(
        source=source_config,
        target=target_config,
        bucket=BUCKET,
        concurrency=3,
        log_every=5,
    )


@pytest.fixture
def source():
    """In-memory source project."""
    return InMemoryBackend(name="prod")


@pytest.fixture
def target():
    """In-memory target project."""
    return InMemoryBackend(name="dev")


@pytest.fixture
def clean_env(monkeypatch):
    """
    Remove every copy-related variable from the process environment.

    Tests that build an EnvManager from os.environ start from a known state.
    """
    for key in (
        "PROD_SUPABASE_URL",
        "PROD_SUPABASE_SERVICE_KEY",
        "DEV_SUPABASE_URL",
        "DEV_SUPABASE_SERVICE_KEY",
        "SUPABASE_BUCKET",
        "MEMORIES_LIMIT",
        "COPY_LIMIT",
        "COPY_CONCURRENCY",
        "COPY_LOG_EVERY",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
