"""Test job configuration assembly and validation."""

import dataclasses

import pytest

from groupix.core.config import (
    BackendConfig,
    ObjectCopyConfig,
    RowCopyConfig,
)
from groupix.core.env import EnvManager
from groupix.core.exceptions import ConfigurationError, MissingConfigError

BACKEND_VALUES = {
    "PROD_SUPABASE_URL": "https://prod-ref.supabase.co",
    "PROD_SUPABASE_SERVICE_KEY": "prod-key",
    "DEV_SUPABASE_URL": "https://dev-ref.supabase.co",
    "DEV_SUPABASE_SERVICE_KEY": "dev-key",
}


class TestBackendConfig:
    """Tests for BackendConfig."""

    def test_repr_masks_service_key(self):
        config = BackendConfig(name="prod", url="https://x.supabase.co", service_key="secret")
        assert "secret" not in repr(config)
        assert "***" in repr(config)

    def test_is_immutable(self):
        config = BackendConfig(name="prod", url="https://x.supabase.co", service_key="secret")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.url = "https://other.supabase.co"  # type: ignore[misc]


class TestRowCopyConfig:
    """Tests for RowCopyConfig."""

    def test_from_env_defaults(self):
        config = RowCopyConfig.from_env(EnvManager(BACKEND_VALUES))

        assert config.source == BackendConfig("prod", "https://prod-ref.supabase.co", "prod-key")
        assert config.target == BackendConfig("dev", "https://dev-ref.supabase.co", "dev-key")
        assert config.table == "memories"
        assert config.limit == 500
        assert config.order_by == "created_at"
        assert config.identity_field == "id"

    def test_from_env_limit(self):
        config = RowCopyConfig.from_env(EnvManager({**BACKEND_VALUES, "MEMORIES_LIMIT": "20"}))
        assert config.limit == 20

    def test_missing_keys(self):
        values = dict(BACKEND_VALUES)
        del values["DEV_SUPABASE_SERVICE_KEY"]

        with pytest.raises(MissingConfigError) as exc_info:
            RowCopyConfig.from_env(EnvManager(values))

        assert exc_info.value.missing == ["DEV_SUPABASE_SERVICE_KEY"]

    def test_bucket_not_required(self):
        RowCopyConfig.from_env(EnvManager(BACKEND_VALUES))

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ConfigurationError, match="MEMORIES_LIMIT"):
            RowCopyConfig.from_env(EnvManager({**BACKEND_VALUES, "MEMORIES_LIMIT": "0"}))


class TestObjectCopyConfig:
    """Tests for ObjectCopyConfig."""

    def test_from_env_defaults(self):
        config = ObjectCopyConfig.from_env(EnvManager({**BACKEND_VALUES, "SUPABASE_BUCKET": "trip-media"}))

        assert config.bucket == "trip-media"
        assert config.limit == 1000
        assert config.concurrency == 3
        assert config.log_every == 25
        assert config.page_size == 1000

    def test_from_env_tunables(self):
        env = EnvManager(
            {
                **BACKEND_VALUES,
                "SUPABASE_BUCKET": "trip-media",
                "COPY_LIMIT": "50",
                "COPY_CONCURRENCY": "8",
                "COPY_LOG_EVERY": "10",
            }
        )
        config = ObjectCopyConfig.from_env(env)

        assert (config.limit, config.concurrency, config.log_every) == (50, 8, 10)

    def test_bucket_required(self):
        with pytest.raises(MissingConfigError) as exc_info:
            ObjectCopyConfig.from_env(EnvManager(BACKEND_VALUES))
        assert exc_info.value.missing == ["SUPABASE_BUCKET"]

    def test_reports_all_missing_keys(self):
        with pytest.raises(MissingConfigError) as exc_info:
            ObjectCopyConfig.from_env(EnvManager({}))
        assert exc_info.value.missing == [
            "PROD_SUPABASE_URL",
            "PROD_SUPABASE_SERVICE_KEY",
            "DEV_SUPABASE_URL",
            "DEV_SUPABASE_SERVICE_KEY",
            "SUPABASE_BUCKET",
        ]

    @pytest.mark.parametrize("key", ["COPY_LIMIT", "COPY_CONCURRENCY", "COPY_LOG_EVERY"])
    def test_rejects_non_positive_tunables(self, key):
        env = EnvManager({**BACKEND_VALUES, "SUPABASE_BUCKET": "b", key: "-1"})
        with pytest.raises(ConfigurationError, match=key):
            ObjectCopyConfig.from_env(env)

    def test_page_size_capped(self, source_config, target_config):
        config = ObjectCopyConfig(
            source=source_config, target=target_config, bucket="b", page_size=5000
        )
        assert config.page_size == 1000

    def test_replace_overrides(self, object_config):
        updated = dataclasses.replace(object_config, concurrency=10)
        assert updated.concurrency == 10
        assert object_config.concurrency == 3
