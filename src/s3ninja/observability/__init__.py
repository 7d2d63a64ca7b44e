"""s3ninja Observability module.

OpenTelemetry provider setup for stored object spans.
"""

from s3ninja.observability.tracing import configure_tracing, is_tracing_enabled

__all__ = ["configure_tracing", "is_tracing_enabled"]
