"""OpenTelemetry setup for stored object spans.

StoredObject methods that touch the disk (hashing, deleting, loading and
storing properties) are wrapped by s3ninja.storage.tracing, which asks this
module whether tracing is on and which tracer to use. Tracing stays off until
S3NINJA_OTEL_ENABLED is set; configure_tracing() then installs a global
TracerProvider once per process.

Environment Variables:
    S3NINJA_OTEL_ENABLED: "1"/"true"/"yes" turns span emission on
    S3NINJA_REQUIRE_OTEL: raise TracingConfigError if the provider cannot be set up
    S3NINJA_OTEL_SERVICE_NAME: service.name resource attribute (default: "s3ninja")
    S3NINJA_OTEL_EXPORTER: "otlp" or "console" (default: "otlp")
    S3NINJA_OTEL_EXPORTER_OTLP_ENDPOINT: collector endpoint (optional)
    S3NINJA_OTEL_EXPORTER_OTLP_PROTOCOL: "grpc" or "http" (default: "grpc")
    S3NINJA_OTEL_RESOURCE_ATTRS: extra resource attributes, "k=v,k2=v2"
    S3NINJA_OTEL_TEST_CAPTURE: keep finished spans in memory for tests
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import SpanProcessor
    from opentelemetry.trace import Tracer

logger = logging.getLogger(__name__)

TRACER_NAME = "s3ninja.stored_object"

_ENABLED_ENV = "S3NINJA_OTEL_ENABLED"
_REQUIRE_ENV = "S3NINJA_REQUIRE_OTEL"
_TEST_CAPTURE_ENV = "S3NINJA_OTEL_TEST_CAPTURE"

_provider: TracerProvider | None = None
_configured = False
_memory_exporter: Any = None


class TracingConfigError(Exception):
    """Raised when S3NINJA_REQUIRE_OTEL=1 and the tracer provider cannot be set up."""


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes")


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def is_tracing_enabled() -> bool:
    """Return True if stored object operations should emit spans."""
    return _env_flag(_ENABLED_ENV)


def _parse_resource_attrs(attrs_str: str) -> dict[str, str]:
    """Parse "k=v,k2=v2" into a dict, skipping entries without "="."""
    result: dict[str, str] = {}
    for pair in attrs_str.split(","):
        name, sep, value = pair.partition("=")
        if sep:
            result[name.strip()] = value.strip()
    return result


def _build_processor(exporter_type: str) -> SpanProcessor:
    """Create the span processor for the configured exporter."""
    from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor

    if exporter_type == "console":
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter

        return SimpleSpanProcessor(ConsoleSpanExporter())

    endpoint = _env("S3NINJA_OTEL_EXPORTER_OTLP_ENDPOINT")
    kwargs: dict[str, Any] = {"endpoint": endpoint} if endpoint else {}
    if _env("S3NINJA_OTEL_EXPORTER_OTLP_PROTOCOL", "grpc") == "http":
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    else:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # type: ignore[assignment]
            OTLPSpanExporter,
        )
    return BatchSpanProcessor(OTLPSpanExporter(**kwargs))


def configure_tracing() -> bool:
    """Install the global tracer provider if tracing is enabled.

    Safe to call repeatedly; OpenTelemetry accepts only one global provider,
    so later calls reuse the first one.

    Returns:
        True if spans will be exported, False if tracing is off or setup failed.

    Raises:
        TracingConfigError: If setup fails and S3NINJA_REQUIRE_OTEL=1.
    """
    global _provider, _configured, _memory_exporter

    if not is_tracing_enabled():
        _configured = True
        logger.debug("Stored object tracing disabled (%s not set)", _ENABLED_ENV)
        return False

    test_capture = _env_flag(_TEST_CAPTURE_ENV)
    if test_capture and _memory_exporter is not None:
        return True
    if _configured and _provider is not None:
        return True
    _configured = True

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider

        service_name = _env("S3NINJA_OTEL_SERVICE_NAME", "s3ninja")
        attributes = {"service.name": service_name}
        attributes.update(_parse_resource_attrs(_env("S3NINJA_OTEL_RESOURCE_ATTRS")))
        provider = TracerProvider(resource=Resource.create(attributes))

        if test_capture:
            from opentelemetry.sdk.trace.export import SimpleSpanProcessor
            from opentelemetry.sdk.trace.export.in_memory_span_exporter import (
                InMemorySpanExporter,
            )

            _memory_exporter = InMemorySpanExporter()
            provider.add_span_processor(SimpleSpanProcessor(_memory_exporter))
            exporter_type = "in-memory"
        else:
            exporter_type = _env("S3NINJA_OTEL_EXPORTER", "otlp")
            provider.add_span_processor(_build_processor(exporter_type))

        trace.set_tracer_provider(provider)
        _provider = provider
    except Exception as e:
        logger.error("Failed to configure stored object tracing: %s", e)
        if _env_flag(_REQUIRE_ENV):
            raise TracingConfigError(
                f"OpenTelemetry tracing required but configuration failed: {e}"
            ) from e
        return False

    logger.info("Stored object tracing on: service=%s exporter=%s", service_name, exporter_type)
    return True


def get_tracer() -> Tracer:
    """Return the tracer used for stored object spans."""
    from opentelemetry import trace

    return trace.get_tracer(TRACER_NAME)


def get_test_spans() -> list[Any]:
    """Return spans captured while S3NINJA_OTEL_TEST_CAPTURE=1, else []."""
    if _memory_exporter is None:
        return []
    return list(_memory_exporter.get_finished_spans())


def clear_test_spans() -> None:
    """Drop spans captured by the in-memory exporter."""
    if _memory_exporter is not None:
        _memory_exporter.clear()


def reset_tracing() -> None:
    """Forget configuration state between tests.

    The global provider and its in-memory exporter survive, since
    OpenTelemetry cannot replace a provider once set; only captured spans
    are dropped.
    """
    global _configured

    clear_test_spans()
    _configured = False
