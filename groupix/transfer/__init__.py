"""
Groupix Transfer Module.

The two copy jobs and the machinery they share.

Usage:
    >>> from groupix.transfer import ObjectCopier, RowCopier
    >>>
    >>> result = await ObjectCopier(source, target, config).run()
"""

from .objects import ObjectCopier, copy_storage, list_all_paths, resolve_content_type
from .progress import TransferProgress, TransferResult, files_per_second
from .rows import RowCopier, RowCopyResult, copy_memories, strip_identity
from .scheduler import BoundedScheduler

__all__ = [
    "BoundedScheduler",
    "ObjectCopier",
    "RowCopier",
    "RowCopyResult",
    "TransferProgress",
    "TransferResult",
    "copy_memories",
    "copy_storage",
    "files_per_second",
    "list_all_paths",
    "resolve_content_type",
    "strip_identity",
]
