"""Stored object model.

A stored object is a content file plus a metadata sidecar living next to it:

    {bucket_dir}/
        report.txt                      # content
        __ninja_report.txt.properties   # metadata (properties text)

The sidecar path is derived from the content path and never stored on its
own. Nothing is cached: every accessor looks at the filesystem when called.

Error policy:
    - Display accessors (size, timestamps, content_hash, exists, describe)
      never raise; a missing or unreadable file yields ""/0/epoch/False.
    - load_properties/store_properties raise ObjectStorageError subclasses.
    - delete() is best-effort and silent.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from s3ninja.storage import formatting, properties_format
from s3ninja.storage.errors import (
    MetadataNotFoundError,
    PropertiesFormatError,
    StorageBackendError,
)
from s3ninja.storage.settings import get_hash_chunk_size
from s3ninja.storage.tracing import traced_object_operation

logger = logging.getLogger(__name__)

PROPERTIES_PREFIX = "__ninja_"
PROPERTIES_SUFFIX = ".properties"


def properties_file_for(file: Path) -> Path:
    """Return the metadata sidecar path for a content path."""
    return file.parent / f"{PROPERTIES_PREFIX}{file.name}{PROPERTIES_SUFFIX}"


@dataclass(frozen=True)
class ObjectSummary:
    """Point-in-time description of a stored object for listings.

    Attributes:
        name: Object name (last path segment).
        size_bytes: Content length in bytes.
        size: Human-readable content length.
        last_modified: Human-readable modification time (local time).
        last_modified_iso8601: Modification time as ISO-8601 UTC.
        md5: MD5 hex digest of the content, "" if unreadable.
        exists: Whether the content file was present.
    """

    name: str
    size_bytes: int
    size: str
    last_modified: str
    last_modified_iso8601: str
    md5: str
    exists: bool

    def to_dict(self) -> dict[str, str | int | bool]:
        """Convert summary to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "size_bytes": self.size_bytes,
            "size": self.size,
            "last_modified": self.last_modified,
            "last_modified_iso8601": self.last_modified_iso8601,
            "md5": self.md5,
            "exists": self.exists,
        }


@dataclass(frozen=True)
class StoredObject:
    """A stored object backed by a content file and a properties sidecar.

    Attributes:
        file: Path of the content file. A str is converted to Path.
    """

    file: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "file", Path(self.file))

    @property
    def name(self) -> str:
        """Return the object name (last segment of the content path)."""
        return self.file.name

    @property
    def properties_file(self) -> Path:
        """Return the path of the metadata sidecar.

        Pure derivation; the file may or may not exist.
        """
        return properties_file_for(self.file)

    @property
    def size_bytes(self) -> int:
        """Return the content length in bytes, 0 if the file is missing."""
        try:
            return self.file.stat().st_size
        except OSError:
            return 0

    @property
    def size(self) -> str:
        """Return the content length formatted for display."""
        return formatting.format_size(self.size_bytes)

    @property
    def last_modified_at(self) -> datetime:
        """Return the content modification time (UTC), epoch if missing."""
        try:
            mtime = self.file.stat().st_mtime
        except OSError:
            mtime = 0.0
        return formatting.from_timestamp(mtime)

    @property
    def last_modified(self) -> str:
        """Return the modification time formatted for display."""
        return formatting.to_user_string(self.last_modified_at)

    @property
    def last_modified_iso8601(self) -> str:
        """Return the modification time as an ISO-8601 UTC timestamp."""
        return formatting.to_iso8601(self.last_modified_at)

    def exists(self) -> bool:
        """Return True if the content file exists. The sidecar is not consulted."""
        return self.file.is_file()

    def has_properties(self) -> bool:
        """Return True if the metadata sidecar exists."""
        return self.properties_file.is_file()

    @traced_object_operation("content_hash")
    def content_hash(self) -> str:
        """Return the MD5 hex digest of the content.

        The file is streamed in chunks of S3NINJA_HASH_CHUNK_SIZE bytes.

        Returns:
            Lowercase hex digest, or "" if the content cannot be read.
        """
        chunk_size = get_hash_chunk_size()
        hasher = hashlib.md5(usedforsecurity=False)
        try:
            with self.file.open("rb") as f:
                for chunk in iter(lambda: f.read(chunk_size), b""):
                    hasher.update(chunk)
        except OSError as e:
            logger.debug("Cannot hash object %s: %s", self.name, e)
            return ""
        return hasher.hexdigest()

    @traced_object_operation("delete")
    def delete(self) -> None:
        """Delete the content file and the metadata sidecar.

        Each removal is attempted independently. Missing files and removal
        failures are ignored, so deleting twice is harmless.
        """
        for path in (self.file, self.properties_file):
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.debug("Failed to delete %s of object %s: %s", path.name, self.name, e)

        logger.debug("Deleted object: name=%s", self.name)

    @traced_object_operation("load_properties")
    def load_properties(self) -> dict[str, str]:
        """Load all properties stored along with the object.

        These are the Content-Type, Content-MD5 and any x-amz-meta-* header
        recorded at upload time.

        Returns:
            Mapping of property names to values.

        Raises:
            MetadataNotFoundError: If the sidecar does not exist.
            StorageBackendError: If the sidecar cannot be read.
            PropertiesFormatError: If the sidecar contains a malformed escape.
        """
        encoding = properties_format.PROPERTIES_ENCODING
        try:
            with self.properties_file.open("r", encoding=encoding) as f:
                return properties_format.load(f)
        except FileNotFoundError as e:
            raise MetadataNotFoundError(key=self.name) from e
        except PropertiesFormatError as e:
            e.key = self.name
            raise
        except OSError as e:
            raise StorageBackendError(
                message=f"Failed to read object metadata: {e.strerror or e}",
                key=self.name,
                cause=e,
            ) from e

    @traced_object_operation("store_properties")
    def store_properties(self, properties: Mapping[str, str]) -> None:
        """Replace the stored properties of the object.

        The sidecar is rewritten in full; keys not present in ``properties``
        are gone afterwards.

        Args:
            properties: Property names and values to store.

        Raises:
            PropertiesFormatError: If a key or value is not a string.
            StorageBackendError: If the sidecar cannot be written.
        """
        try:
            text = properties_format.dumps(properties)
        except PropertiesFormatError as e:
            e.key = self.name
            raise

        try:
            with self.properties_file.open(
                "w", encoding=properties_format.PROPERTIES_ENCODING, newline="\n"
            ) as f:
                f.write(text)
        except OSError as e:
            raise StorageBackendError(
                message=f"Failed to write object metadata: {e.strerror or e}",
                key=self.name,
                cause=e,
            ) from e

        logger.debug("Stored %d properties for object %s", len(properties), self.name)

    def describe(self) -> ObjectSummary:
        """Return a listing snapshot of the object. Never raises for I/O errors."""
        return ObjectSummary(
            name=self.name,
            size_bytes=self.size_bytes,
            size=self.size,
            last_modified=self.last_modified,
            last_modified_iso8601=self.last_modified_iso8601,
            md5=self.content_hash(),
            exists=self.exists(),
        )
