"""Tests for display formatting and environment settings."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from s3ninja.storage.formatting import format_size, from_timestamp, to_iso8601, to_user_string
from s3ninja.storage.settings import (
    DEFAULT_DISPLAY_DATETIME_FORMAT,
    DEFAULT_HASH_CHUNK_SIZE,
    S3NINJA_DISPLAY_DATETIME_FORMAT_ENV,
    S3NINJA_HASH_CHUNK_SIZE_ENV,
    get_display_datetime_format,
    get_hash_chunk_size,
)


class TestFormatSize:
    """Tests for format_size()."""

    @pytest.mark.parametrize(
        ("num_bytes", "expected"),
        [
            (0, "0 bytes"),
            (1, "1 byte"),
            (2, "2 bytes"),
            (1023, "1023 bytes"),
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (1024**2, "1.0 MB"),
            (5 * 1024**3, "5.0 GB"),
            (3 * 1024**4, "3.0 TB"),
            (2 * 1024**5, "2.0 PB"),
        ],
    )
    def test_format_size(self, num_bytes: int, expected: str) -> None:
        assert format_size(num_bytes) == expected

    def test_negative_size_is_zero(self) -> None:
        """Negative counts never come from the filesystem; render them as zero."""
        assert format_size(-1) == "0 bytes"


class TestTimestamps:
    """Tests for timestamp conversion and rendering."""

    def test_from_timestamp_is_utc(self) -> None:
        moment = from_timestamp(0)

        assert moment == datetime(1970, 1, 1, tzinfo=UTC)
        assert moment.utcoffset() == timedelta(0)

    def test_iso8601_epoch(self) -> None:
        assert to_iso8601(datetime(1970, 1, 1, tzinfo=UTC)) == "1970-01-01T00:00:00.000Z"

    def test_iso8601_truncates_to_milliseconds(self) -> None:
        moment = datetime(2024, 2, 29, 12, 30, 45, 123456, tzinfo=UTC)

        assert to_iso8601(moment) == "2024-02-29T12:30:45.123Z"

    def test_iso8601_converts_offset_to_utc(self) -> None:
        moment = datetime(2024, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=1)))

        assert to_iso8601(moment) == "2024-01-01T00:00:00.000Z"

    def test_user_string_default_format(self) -> None:
        moment = datetime(2024, 6, 1, 8, 0, tzinfo=UTC)

        expected = moment.astimezone().strftime(DEFAULT_DISPLAY_DATETIME_FORMAT)
        assert to_user_string(moment) == expected

    def test_user_string_configured_format(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(S3NINJA_DISPLAY_DATETIME_FORMAT_ENV, "%d.%m.%Y")
        moment = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)

        assert to_user_string(moment) == moment.astimezone().strftime("%d.%m.%Y")
        assert to_user_string(moment).endswith(".06.2024")


class TestSettings:
    """Tests for environment-driven storage settings."""

    def test_chunk_size_default(self) -> None:
        assert get_hash_chunk_size() == DEFAULT_HASH_CHUNK_SIZE == 8192

    def test_chunk_size_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(S3NINJA_HASH_CHUNK_SIZE_ENV, " 65536 ")

        assert get_hash_chunk_size() == 65536

    @pytest.mark.parametrize("raw", ["abc", "0", "-5", "1.5"])
    def test_invalid_chunk_size_falls_back(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, raw: str
    ) -> None:
        """Invalid values are logged and replaced by the default."""
        monkeypatch.setenv(S3NINJA_HASH_CHUNK_SIZE_ENV, raw)

        with caplog.at_level("WARNING", logger="s3ninja.storage.settings"):
            assert get_hash_chunk_size() == DEFAULT_HASH_CHUNK_SIZE

        assert S3NINJA_HASH_CHUNK_SIZE_ENV in caplog.text

    def test_display_format_default(self) -> None:
        assert get_display_datetime_format() == "%Y-%m-%d %H:%M:%S"

    def test_blank_display_format_uses_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(S3NINJA_DISPLAY_DATETIME_FORMAT_ENV, "   ")

        assert get_display_datetime_format() == DEFAULT_DISPLAY_DATETIME_FORMAT
