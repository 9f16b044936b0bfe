# ============================================
# FILE: groupix/__init__.py
# ============================================

"""
Groupix Copy Tools - Production to development data migration

Copies the shared-media data behind the Groupix app from one hosted backend
project (production) into another (development):
- copy-memories: latest rows of the `memories` table
- copy-storage: objects of a storage bucket, transferred with bounded concurrency

Usage:
    >>> from groupix import ObjectCopyConfig, EnvManager, copy_storage
    >>>
    >>> env = EnvManager.load()  # reads scripts/.env.copy if present
    >>> config = ObjectCopyConfig.from_env(env)
    >>> result = await copy_storage(config)
    >>> print(result.transferred, result.failed)
"""

from groupix.core.config import BackendConfig, ObjectCopyConfig, RowCopyConfig
from groupix.core.env import EnvManager, load_env_file, sanitize_service_key
from groupix.core.exceptions import (
    BackendError,
    ConfigurationError,
    GroupixError,
    MissingConfigError,
    TransferError,
)
from groupix.transfer.objects import ObjectCopier, copy_storage
from groupix.transfer.progress import TransferProgress, TransferResult
from groupix.transfer.rows import RowCopier, RowCopyResult, copy_memories

__version__ = "0.1.0"

__all__ = [
    "BackendConfig",
    "BackendError",
    "ConfigurationError",
    "EnvManager",
    "GroupixError",
    "MissingConfigError",
    "ObjectCopier",
    "ObjectCopyConfig",
    "RowCopier",
    "RowCopyConfig",
    "RowCopyResult",
    "TransferError",
    "TransferProgress",
    "TransferResult",
    "copy_memories",
    "copy_storage",
    "load_env_file",
    "sanitize_service_key",
]
