"""Tests for selecting request headers stored as object properties."""

from __future__ import annotations

from pathlib import Path

from s3ninja.storage import StoredObject
from s3ninja.storage.headers import (
    CONTENT_MD5,
    CONTENT_TYPE,
    select_stored_headers,
    user_metadata,
)


class TestSelectStoredHeaders:
    """Tests for select_stored_headers()."""

    def test_keeps_content_headers_and_user_metadata(self) -> None:
        headers = {
            "Content-Type": "image/png",
            "Content-MD5": "1B2M2Y8AsgTpgAmY7PhCfg==",
            "x-amz-meta-owner": "alice",
            "Authorization": "AWS key:signature",
            "Content-Length": "123",
            "Host": "localhost",
        }

        assert select_stored_headers(headers) == {
            CONTENT_TYPE: "image/png",
            CONTENT_MD5: "1B2M2Y8AsgTpgAmY7PhCfg==",
            "x-amz-meta-owner": "alice",
        }

    def test_matching_is_case_insensitive(self) -> None:
        """Header names arrive in any case; stored names are canonical."""
        headers = {"content-type": "text/html", "CONTENT-MD5": "abc", "X-Amz-Meta-Tag": "v"}

        assert select_stored_headers(headers) == {
            "Content-Type": "text/html",
            "Content-MD5": "abc",
            "x-amz-meta-tag": "v",
        }

    def test_empty_headers(self) -> None:
        assert select_stored_headers({}) == {}

    def test_selected_headers_roundtrip_through_sidecar(self, bucket_dir: Path) -> None:
        """An upload's headers can be stored and read back as properties."""
        obj = StoredObject(bucket_dir / "upload.bin")
        obj.file.write_bytes(b"\x00\x01")

        obj.store_properties(
            select_stored_headers({"Content-Type": "application/octet-stream", "X-Foo": "bar"})
        )

        assert obj.load_properties() == {"Content-Type": "application/octet-stream"}


class TestUserMetadata:
    """Tests for user_metadata()."""

    def test_filters_user_metadata(self) -> None:
        props = {"Content-Type": "text/plain", "x-amz-meta-a": "1", "X-Amz-Meta-B": "2"}

        assert user_metadata(props) == {"x-amz-meta-a": "1", "X-Amz-Meta-B": "2"}
