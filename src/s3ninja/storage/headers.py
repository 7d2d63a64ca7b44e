"""Well-known metadata keys stored alongside an object.

An upload keeps the declared Content-Type, Content-MD5 and any
``x-amz-meta-*`` user header; everything else in the request is dropped.
"""

from __future__ import annotations

from collections.abc import Mapping

CONTENT_TYPE = "Content-Type"
CONTENT_MD5 = "Content-MD5"
USER_METADATA_PREFIX = "x-amz-meta-"

_CANONICAL_HEADERS = {
    CONTENT_TYPE.lower(): CONTENT_TYPE,
    CONTENT_MD5.lower(): CONTENT_MD5,
}


def select_stored_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Pick the request headers that become object properties.

    Header names are matched case-insensitively. Content-Type and
    Content-MD5 are stored under their canonical spelling, user metadata
    headers under their lowercased name.

    Args:
        headers: Request headers.

    Returns:
        Mapping suitable for StoredObject.store_properties().
    """
    selected: dict[str, str] = {}
    for name, value in headers.items():
        lowered = name.lower()
        if lowered in _CANONICAL_HEADERS:
            selected[_CANONICAL_HEADERS[lowered]] = value
        elif lowered.startswith(USER_METADATA_PREFIX):
            selected[lowered] = value
    return selected


def user_metadata(properties: Mapping[str, str]) -> dict[str, str]:
    """Return only the x-amz-meta-* entries of stored properties."""
    return {
        name: value
        for name, value in properties.items()
        if name.lower().startswith(USER_METADATA_PREFIX)
    }
