"""Span decorator for stored object operations.

Security:
    - Never export absolute filesystem paths in span attributes
    - Object names are exported only as SHA256 digests
    - Property values are never exported, only their count
"""

from __future__ import annotations

import functools
import hashlib
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar, cast

from s3ninja.observability.tracing import get_tracer, is_tracing_enabled

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

BACKEND_NAME = "filesystem"


def traced_object_operation(operation: str) -> Callable[[F], F]:
    """Decorator to trace StoredObject methods with OpenTelemetry.

    Args:
        operation: Operation name (e.g., "content_hash", "load_properties").

    Returns:
        Decorated method that emits a span named
        "s3ninja.stored_object.<operation>" when tracing is enabled.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            if not is_tracing_enabled():
                return func(self, *args, **kwargs)

            tracer = get_tracer()
            with tracer.start_as_current_span(f"s3ninja.stored_object.{operation}") as span:
                name = str(getattr(self, "name", ""))
                name_sha256 = hashlib.sha256(name.encode("utf-8")).hexdigest()
                span.set_attribute("s3ninja.object_name_sha256", name_sha256)
                span.set_attribute("storage.backend", BACKEND_NAME)

                if operation == "store_properties" and args and isinstance(args[0], Mapping):
                    span.set_attribute("s3ninja.property_count", len(args[0]))

                try:
                    result = func(self, *args, **kwargs)
                except Exception as e:
                    span.set_attribute("error", True)
                    span.set_attribute("error.type", type(e).__name__)
                    raise

                _add_result_attributes(span, result, operation)
                return result

        return cast(F, wrapper)

    return decorator


def _add_result_attributes(span: Any, result: Any, operation: str) -> None:
    """Add result-based attributes to span safely."""
    try:
        if operation == "content_hash" and isinstance(result, str):
            span.set_attribute("s3ninja.object_md5", result)
            span.set_attribute("s3ninja.hash_available", bool(result))
        elif operation == "load_properties" and isinstance(result, Mapping):
            span.set_attribute("s3ninja.property_count", len(result))
    except Exception as e:
        logger.debug("Failed to add result attributes to span: %s", e)
