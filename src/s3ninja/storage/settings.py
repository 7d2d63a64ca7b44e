"""Environment-driven settings for s3ninja storage.

Values are read on every call so tests and long-running processes pick up
changes without a restart.

Environment Variables:
    S3NINJA_HASH_CHUNK_SIZE: Read size in bytes used when hashing content
        (default: 8192)
    S3NINJA_DISPLAY_DATETIME_FORMAT: strftime pattern for human-readable
        timestamps (default: "%Y-%m-%d %H:%M:%S")
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

S3NINJA_HASH_CHUNK_SIZE_ENV = "S3NINJA_HASH_CHUNK_SIZE"
S3NINJA_DISPLAY_DATETIME_FORMAT_ENV = "S3NINJA_DISPLAY_DATETIME_FORMAT"

DEFAULT_HASH_CHUNK_SIZE = 8192
DEFAULT_DISPLAY_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _get_env_str(key: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default).strip()


def get_hash_chunk_size() -> int:
    """Return the chunk size used to stream content into the hasher.

    Invalid or non-positive values fall back to the default with a warning;
    hashing is a display concern and must not fail on bad configuration.
    """
    raw = _get_env_str(S3NINJA_HASH_CHUNK_SIZE_ENV)
    if not raw:
        return DEFAULT_HASH_CHUNK_SIZE
    try:
        value = int(raw)
    except ValueError:
        logger.warning(
            "Ignoring invalid %s=%r, using %d",
            S3NINJA_HASH_CHUNK_SIZE_ENV,
            raw,
            DEFAULT_HASH_CHUNK_SIZE,
        )
        return DEFAULT_HASH_CHUNK_SIZE
    if value <= 0:
        logger.warning(
            "Ignoring non-positive %s=%d, using %d",
            S3NINJA_HASH_CHUNK_SIZE_ENV,
            value,
            DEFAULT_HASH_CHUNK_SIZE,
        )
        return DEFAULT_HASH_CHUNK_SIZE
    return value


def get_display_datetime_format() -> str:
    """Return the strftime pattern for human-readable timestamps."""
    return _get_env_str(S3NINJA_DISPLAY_DATETIME_FORMAT_ENV) or DEFAULT_DISPLAY_DATETIME_FORMAT
