"""
Configuration for the copy jobs.

Each job gets one explicit, immutable configuration object assembled from
an EnvManager. Core logic only sees these objects and never looks up
environment variables itself.

Example:
    >>> from groupix.core.env import EnvManager
    >>> from groupix.core.config import ObjectCopyConfig
    >>>
    >>> env = EnvManager.load()
    >>> config = ObjectCopyConfig.from_env(env)
    >>> config.concurrency
    3
"""

from __future__ import annotations

from dataclasses import dataclass, field

from groupix.core.env import EnvManager
from groupix.core.exceptions import ConfigurationError

SOURCE_URL_KEY = "PROD_SUPABASE_URL"
SOURCE_SERVICE_KEY = "PROD_SUPABASE_SERVICE_KEY"
TARGET_URL_KEY = "DEV_SUPABASE_URL"
TARGET_SERVICE_KEY = "DEV_SUPABASE_SERVICE_KEY"
BUCKET_KEY = "SUPABASE_BUCKET"

BACKEND_KEYS = (SOURCE_URL_KEY, SOURCE_SERVICE_KEY, TARGET_URL_KEY, TARGET_SERVICE_KEY)

DEFAULT_TABLE = "memories"
DEFAULT_MEMORIES_LIMIT = 500
DEFAULT_COPY_LIMIT = 1000
DEFAULT_CONCURRENCY = 3
DEFAULT_LOG_EVERY = 25

# Storage listing refuses pages larger than this
MAX_PAGE_SIZE = 1000


def _check_positive(name: str, value: int) -> None:
    if value < 1:
        msg = f"{name} must be a positive integer, got {value}"
        raise ConfigurationError(msg, key=name)


@dataclass(frozen=True)
class BackendConfig:
    """
    Connection settings for one backend project.

    Attributes:
        name: Label used in logs ("prod", "dev")
        url: Project URL, e.g. https://abcd.supabase.co
        service_key: Service role key (already sanitized)
    """

    name: str
    url: str
    service_key: str = field(repr=False)

    def __repr__(self) -> str:
        return f"BackendConfig(name={self.name!r}, url={self.url!r}, service_key='***')"


def _backends_from_env(env: EnvManager) -> tuple[BackendConfig, BackendConfig]:
    source = BackendConfig(
        name="prod",
        url=env.get(SOURCE_URL_KEY, ""),
        service_key=env.get(SOURCE_SERVICE_KEY, ""),
    )
    target = BackendConfig(
        name="dev",
        url=env.get(TARGET_URL_KEY, ""),
        service_key=env.get(TARGET_SERVICE_KEY, ""),
    )
    return source, target


@dataclass(frozen=True)
class RowCopyConfig:
    """
    Configuration for copying table rows.

    Attributes:
        source: Project rows are read from
        target: Project rows are inserted into
        table: Table name
        limit: Maximum number of rows, newest first
        order_by: Timestamp column defining "newest"
        identity_field: Source-assigned key dropped before insert
    """

    source: BackendConfig
    target: BackendConfig
    table: str = DEFAULT_TABLE
    limit: int = DEFAULT_MEMORIES_LIMIT
    order_by: str = "created_at"
    identity_field: str = "id"

    def __post_init__(self) -> None:
        _check_positive("MEMORIES_LIMIT", self.limit)

    @classmethod
    def from_env(cls, env: EnvManager) -> RowCopyConfig:
        """
        Build the configuration from environment values.

        Raises:
            MissingConfigError: If a backend URL or service key is missing
            ConfigurationError: If MEMORIES_LIMIT is invalid
        """
        env.require(*BACKEND_KEYS)
        source, target = _backends_from_env(env)
        return cls(
            source=source,
            target=target,
            limit=env.get_int("MEMORIES_LIMIT", DEFAULT_MEMORIES_LIMIT),
        )


@dataclass(frozen=True)
class ObjectCopyConfig:
    """
    Configuration for copying storage objects.

    Attributes:
        source: Project objects are downloaded from
        target: Project objects are uploaded to
        bucket: Bucket name, identical on both sides
        limit: Maximum number of objects to enumerate
        concurrency: Maximum number of transfers in flight
        log_every: Emit a progress line every N successful transfers
        page_size: Listing page size (capped at 1000)
    """

    source: BackendConfig
    target: BackendConfig
    bucket: str
    limit: int = DEFAULT_COPY_LIMIT
    concurrency: int = DEFAULT_CONCURRENCY
    log_every: int = DEFAULT_LOG_EVERY
    page_size: int = MAX_PAGE_SIZE

    def __post_init__(self) -> None:
        _check_positive("COPY_LIMIT", self.limit)
        _check_positive("COPY_CONCURRENCY", self.concurrency)
        _check_positive("COPY_LOG_EVERY", self.log_every)
        _check_positive("page_size", self.page_size)
        if self.page_size > MAX_PAGE_SIZE:
            object.__setattr__(self, "page_size", MAX_PAGE_SIZE)

    @classmethod
    def from_env(cls, env: EnvManager) -> ObjectCopyConfig:
        """
        Build the configuration from environment values.

        Raises:
            MissingConfigError: If a backend key or SUPABASE_BUCKET is missing
            ConfigurationError: If a tunable is invalid
        """
        env.require(*BACKEND_KEYS, BUCKET_KEY)
        source, target = _backends_from_env(env)
        return cls(
            source=source,
            target=target,
            bucket=env.get(BUCKET_KEY, ""),
            limit=env.get_int("COPY_LIMIT", DEFAULT_COPY_LIMIT),
            concurrency=env.get_int("COPY_CONCURRENCY", DEFAULT_CONCURRENCY),
            log_every=env.get_int("COPY_LOG_EVERY", DEFAULT_LOG_EVERY),
        )
