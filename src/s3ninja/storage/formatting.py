"""Display formatting for object listings.

Turns byte counts and modification instants into the strings shown next to
an object: a human size, a local-time timestamp and a strict ISO-8601 one.
"""

from __future__ import annotations

from datetime import UTC, datetime

from s3ninja.storage.settings import get_display_datetime_format

_SIZE_UNITS = ("KB", "MB", "GB", "TB", "PB")
_SIZE_STEP = 1024


def format_size(num_bytes: int) -> str:
    """Format a byte count for display.

    Args:
        num_bytes: Size in bytes. Negative values are treated as zero.

    Returns:
        "0 bytes", "1 byte" and "<n> bytes" below one kilobyte, otherwise a
        one-decimal value with a binary unit such as "1.5 KB".
    """
    num_bytes = max(num_bytes, 0)
    if num_bytes == 1:
        return "1 byte"
    if num_bytes < _SIZE_STEP:
        return f"{num_bytes} bytes"

    value = float(num_bytes)
    unit = _SIZE_UNITS[0]
    for unit in _SIZE_UNITS:
        value /= _SIZE_STEP
        if value < _SIZE_STEP:
            break
    return f"{value:.1f} {unit}"


def from_timestamp(seconds: float) -> datetime:
    """Convert a POSIX timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(seconds, UTC)


def to_user_string(moment: datetime) -> str:
    """Render an instant in local time using the configured display format."""
    return moment.astimezone().strftime(get_display_datetime_format())


def to_iso8601(moment: datetime) -> str:
    """Render an instant as ISO-8601 in UTC with millisecond precision.

    Example: "1970-01-01T00:00:00.000Z".
    """
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
