"""
Progress accounting for object transfers.

Counters live for one run only and are touched exclusively from the event
loop driving the transfer, so no locking is involved.
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


def files_per_second(completed: int, elapsed_seconds: float) -> float:
    """
    Throughput over whole elapsed seconds, never dividing by less than one.

    Example:
        >>> files_per_second(10, 0.4)
        10.0
        >>> files_per_second(50, 10.9)
        5.0
    """
    return completed / max(1, math.floor(elapsed_seconds))


@dataclass
class TransferProgress:
    """
    Progress information for an ongoing transfer.

    Attributes:
        total: Number of objects enumerated for transfer
        transferred: Successfully transferred
        failed: Failed to transfer
        started_at: Monotonic clock reading when the transfer started
        clock: Monotonic clock used for elapsed time
    """

    total: int = 0
    transferred: int = 0
    failed: int = 0
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    started_at: float = field(default=-1.0)

    def __post_init__(self) -> None:
        if self.started_at < 0:
            self.started_at = self.clock()

    @property
    def completed(self) -> int:
        """Objects finished either way."""
        return self.transferred + self.failed

    @property
    def is_complete(self) -> bool:
        """Check if every enumerated object has finished."""
        return self.completed >= self.total

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return self.clock() - self.started_at

    @property
    def files_per_second(self) -> float:
        """Transfer rate in successfully copied files per second."""
        return files_per_second(self.transferred, self.elapsed_seconds)

    def record_success(self) -> None:
        self.transferred += 1

    def record_failure(self) -> None:
        self.failed += 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "transferred": self.transferred,
            "failed": self.failed,
            "elapsed_seconds": round(self.elapsed_seconds, 2),
            "files_per_second": round(self.files_per_second, 2),
            "is_complete": self.is_complete,
        }


@dataclass
class TransferResult:
    """
    Result of a completed transfer.

    Attributes:
        total: Number of objects enumerated
        transferred: Number of objects copied
        failed: Number of objects that failed
        errors: (path, message) for every failed object
        duration_seconds: Total transfer duration
        files_per_second: Average rate over the whole run
    """

    total: int = 0
    transferred: int = 0
    failed: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    duration_seconds: float = 0.0
    files_per_second: float = 0.0

    @property
    def success(self) -> bool:
        """Check if the transfer had no failures."""
        return self.failed == 0

    @classmethod
    def from_progress(
        cls, progress: TransferProgress, errors: list[tuple[str, str]] | None = None
    ) -> "TransferResult":
        return cls(
            total=progress.total,
            transferred=progress.transferred,
            failed=progress.failed,
            errors=list(errors or []),
            duration_seconds=progress.elapsed_seconds,
            files_per_second=progress.files_per_second,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "transferred": self.transferred,
            "failed": self.failed,
            "success": self.success,
            "duration_seconds": round(self.duration_seconds, 2),
            "files_per_second": round(self.files_per_second, 2),
            "errors": [f"{path}: {message}" for path, message in self.errors[:10]],
        }
