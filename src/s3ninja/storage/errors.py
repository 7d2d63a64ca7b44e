"""s3ninja storage error types.

Metadata operations on a stored object raise these typed exceptions.
Display accessors (hash, size, timestamps) never raise; see models.py.
"""

from __future__ import annotations


class ObjectStorageError(Exception):
    """Base exception for stored object operations.

    Attributes:
        message: Human-readable error message.
        key: Name of the object involved (never an absolute path).
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key

    def __str__(self) -> str:
        parts = [self.message]
        if self.key:
            parts.append(f"key={self.key}")
        return " ".join(parts)


class MetadataNotFoundError(ObjectStorageError):
    """Raised when the metadata sidecar of an object does not exist.

    A freshly written object has no sidecar until its properties are
    stored, so callers usually treat this as "no properties yet".
    """

    def __init__(
        self,
        message: str = "Object metadata not found",
        *,
        key: str | None = None,
    ) -> None:
        super().__init__(message, key=key)


class StorageBackendError(ObjectStorageError):
    """Raised when the filesystem cannot complete a metadata operation.

    Covers permission problems, a sidecar path that is a directory, full
    disks and other I/O failures that are not a plain missing file.
    """

    def __init__(
        self,
        message: str = "Storage backend error",
        *,
        key: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, key=key)
        self.cause = cause


class PropertiesFormatError(ObjectStorageError):
    """Raised for properties text that cannot be parsed or written.

    Attributes:
        line_number: 1-based line of the offending entry, when known.
    """

    def __init__(
        self,
        message: str = "Invalid properties data",
        *,
        key: str | None = None,
        line_number: int | None = None,
    ) -> None:
        super().__init__(message, key=key)
        self.line_number = line_number

    def __str__(self) -> str:
        text = super().__str__()
        if self.line_number is not None:
            text = f"{text} line={self.line_number}"
        return text
