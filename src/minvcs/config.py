"""Runtime configuration model for minvcs.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from .errors import ConfigError
from .logging_config import LOG_FORMATS
from .model.snapshot import is_utf8_text

DEFAULT_AUTHOR = "anonymous"
# zlib level 1 favours speed; objects are small and written once.
DEFAULT_COMPRESSION_LEVEL = 1
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "console"


@dataclass(frozen=True)
class MinvcsConfig:
    """Validated runtime configuration.

    Attributes:
        author: Author recorded on snapshots when none is given.
        compression_level: zlib level used for stored objects.
        log_level: Minimum structlog level name.
        log_format: "console" or "json".
    """

    author: str = DEFAULT_AUTHOR
    compression_level: int = DEFAULT_COMPRESSION_LEVEL
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT

    @classmethod
    def from_env(cls) -> "MinvcsConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ConfigError: If environment values are invalid.
        """
        author = os.getenv("MINVCS_AUTHOR", DEFAULT_AUTHOR)
        if "\n" in author:
            raise ConfigError("MINVCS_AUTHOR", author, "must be a single line")
        if not is_utf8_text(author):
            raise ConfigError("MINVCS_AUTHOR", author, "not encodable as UTF-8")
        compression_level = _parse_compression_level(
            os.getenv("MINVCS_COMPRESSION_LEVEL", str(DEFAULT_COMPRESSION_LEVEL))
        )
        log_level = os.getenv("MINVCS_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        log_format = os.getenv("MINVCS_LOG_FORMAT", DEFAULT_LOG_FORMAT).lower()
        if log_format not in LOG_FORMATS:
            raise ConfigError("MINVCS_LOG_FORMAT", log_format, f"expected one of {', '.join(LOG_FORMATS)}")
        return cls(
            author=author,
            compression_level=compression_level,
            log_level=log_level,
            log_format=log_format,
        )


def _parse_compression_level(raw_value: str) -> int:
    """Parse and validate a zlib compression level.

    Args:
        raw_value: Raw environment value.

    Returns:
        Integer level between 0 and 9.

    Raises:
        ConfigError: If the value is not an integer in range.
    """
    try:
        level = int(raw_value)
    except ValueError as error:
        raise ConfigError("MINVCS_COMPRESSION_LEVEL", raw_value, "not an integer") from error
    if not 0 <= level <= 9:
        raise ConfigError("MINVCS_COMPRESSION_LEVEL", raw_value, "must be between 0 and 9")
    return level
