"""s3ninja Object Storage.

A stored object is a content file on the local filesystem plus a
``__ninja_<name>.properties`` sidecar holding its metadata (Content-Type,
Content-MD5 and x-amz-meta-* headers).

Environment Variables:
    S3NINJA_HASH_CHUNK_SIZE: Read size used when hashing content (default: 8192)
    S3NINJA_DISPLAY_DATETIME_FORMAT: strftime pattern for display timestamps
"""

from s3ninja.storage.errors import (
    MetadataNotFoundError,
    ObjectStorageError,
    PropertiesFormatError,
    StorageBackendError,
)
from s3ninja.storage.headers import CONTENT_MD5, CONTENT_TYPE, select_stored_headers
from s3ninja.storage.models import ObjectSummary, StoredObject

__all__ = [
    "CONTENT_MD5",
    "CONTENT_TYPE",
    "StoredObject",
    "ObjectSummary",
    "select_stored_headers",
    "ObjectStorageError",
    "MetadataNotFoundError",
    "StorageBackendError",
    "PropertiesFormatError",
]
