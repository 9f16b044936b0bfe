"""
Environment variable management with .env file support.

The copy jobs read their credentials from a plain KEY=VALUE file
(`scripts/.env.copy` by default) layered over the process environment.
Values of service keys are sanitized before they are trusted, and the
merged result is exposed through an EnvManager instead of being written
back into os.environ.
"""

from __future__ import annotations

import io
import os
import re
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values

from groupix.core.exceptions import ConfigurationError, MissingConfigError
from groupix.core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ENV_FILE = Path("scripts") / ".env.copy"

SERVICE_KEY_SUFFIX = "SERVICE_KEY"

_SERVICE_KEY_DISALLOWED = re.compile(r"[^A-Za-z0-9._=\-]")


def sanitize_service_key(value: str) -> str:
    """
    Strip every character outside [A-Za-z0-9._=-] from a service key.

    Pasted keys often pick up quotes, whitespace or zero-width characters
    that would otherwise end up in an Authorization header.

    Example:
        >>> sanitize_service_key(' "abc.def-ghi=" ')
        'abc.def-ghi='
    """
    return _SERVICE_KEY_DISALLOWED.sub("", value)


def _parse_line(line: str) -> tuple[str, str] | None:
    """
    Split one KEY=VALUE line on its first '='.

    A value wrapped in matching quotes is unquoted by python-dotenv, one
    line at a time, so a stray quote never reaches into the lines below it.
    Anything else is kept verbatim after trimming, '#' included.
    """
    key, sep, value = line.partition("=")
    if not sep:
        return None
    key = key.strip()
    value = value.strip()
    if not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        parsed = dotenv_values(stream=io.StringIO(f"{key}={value}"), interpolate=False)
        if parsed.get(key) is not None:
            value = parsed[key]
    return key, value


def load_env_file(path: str | Path = DEFAULT_ENV_FILE) -> dict[str, str]:
    """
    Parse a KEY=VALUE file line by line.

    Blank lines and lines starting with '#' are ignored, each remaining line
    is split on its first '=' and both sides are trimmed. Lines without an
    '=' contribute nothing. Values of keys ending in SERVICE_KEY are
    sanitized.

    Args:
        path: File to read, relative paths resolve against the working directory

    Returns:
        Parsed values, or an empty dict if the file does not exist
    """
    env_path = Path(path)
    if not env_path.is_file():
        logger.debug(f"No env file at {env_path}, using process environment only")
        return {}

    values: dict[str, str] = {}
    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        entry = _parse_line(stripped)
        if entry is None:
            continue
        key, value = entry
        if key.endswith(SERVICE_KEY_SUFFIX):
            value = sanitize_service_key(value)
        values[key] = value

    logger.debug(f"Loaded {len(values)} keys from {env_path}")
    return values


class EnvManager:
    """
    Read-only view over the merged configuration values.

    Example:
        >>> env = EnvManager.load()  # scripts/.env.copy over os.environ
        >>> env.require("PROD_SUPABASE_URL")
        >>> limit = env.get_int("COPY_LIMIT", 1000)
    """

    def __init__(self, values: Mapping[str, str] | None = None):
        """
        Initialize the environment manager.

        Args:
            values: Configuration values (defaults to a snapshot of os.environ)
        """
        self._values: dict[str, str] = dict(os.environ if values is None else values)

    @classmethod
    def load(
        cls,
        env_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> EnvManager:
        """
        Merge an env file over the process environment.

        Args:
            env_file: Path to the env file (defaults to scripts/.env.copy)
            environ: Base values (defaults to os.environ)

        Returns:
            EnvManager with file values taking precedence
        """
        merged = dict(os.environ if environ is None else environ)
        merged.update(load_env_file(env_file if env_file is not None else DEFAULT_ENV_FILE))
        return cls(merged)

    def __contains__(self, key: str) -> bool:
        return bool(self._values.get(key))

    def get(self, key: str, default: str | None = None) -> str | None:
        """Get a value, treating empty strings as unset."""
        value = self._values.get(key)
        if value is None or value == "":
            return default
        return value

    def get_int(self, key: str, default: int) -> int:
        """
        Get a value as an integer.

        Raises:
            ConfigurationError: If the value is set but not an integer
        """
        raw = self.get(key)
        if raw is None:
            return default
        try:
            return int(raw.strip())
        except ValueError:
            msg = f"{key} must be an integer, got {raw!r}"
            raise ConfigurationError(msg, key=key) from None

    def require(self, *keys: str) -> None:
        """
        Check that every key is present and non-empty.

        Raises:
            MissingConfigError: Listing every missing key, in the order given
        """
        missing = [key for key in keys if key not in self]
        if missing:
            raise MissingConfigError(missing)
