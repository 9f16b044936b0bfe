"""
Unified error hierarchy for the copy tools.

All errors raised by Groupix inherit from GroupixError, so the command
line can turn any of them into a non-zero exit status.
"""

import re
from typing import Any


class GroupixError(Exception):
    """
    Base exception for all Groupix operations.

    Carries a human readable message plus optional structured details.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ConfigurationError(GroupixError):
    """
    Invalid configuration value.

    Raised when:
    - A tunable is not a positive integer
    - A limit or concurrency level is out of range
    """

    def __init__(self, message: str = "Invalid configuration", key: str | None = None, **details):
        super().__init__(message, details={"key": key, **details} if key else details)
        self.key = key


class MissingConfigError(ConfigurationError):
    """Required configuration keys are missing or empty."""

    def __init__(self, missing: list[str] | tuple[str, ...]):
        self.missing = list(missing)
        super().__init__(f"Missing env var: {', '.join(self.missing)}")
        self.details = {"missing": self.missing}

    def __str__(self) -> str:
        return self.message


class BackendError(GroupixError):
    """
    A backend call failed.

    Raised when:
    - The backend answers with a non-2xx status
    - The request cannot be sent (bad URL, DNS, connection reset)
    """

    def __init__(
        self,
        message: str = "Backend request failed",
        status_code: int | None = None,
        url: str | None = None,
        **details,
    ):
        super().__init__(
            message,
            details={"status_code": status_code, "url": self._mask_url(url), **details},
        )
        self.status_code = status_code
        self.url = url

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message

    @staticmethod
    def _mask_url(url: str | None) -> str | None:
        """Mask credentials embedded in a URL."""
        if not url:
            return None
        return re.sub(r"://([^:/@]+):([^@]+)@", r"://\1:***@", url)


class TransferError(GroupixError):
    """
    Failed to prepare or run a transfer.

    Raised when the object listing cannot be enumerated. Individual object
    failures are counted, not raised.
    """

    def __init__(
        self,
        message: str = "Transfer failed",
        bucket: str | None = None,
        **details,
    ):
        super().__init__(message, details={"bucket": bucket, **details})
        self.bucket = bucket

    def __str__(self) -> str:
        return self.message
