"""Observability helpers."""

from hookdash.observability.otel import (
    initialize,
    shutdown,
    start_span,
    record_log_read,
    record_query,
)

__all__ = [
    "initialize",
    "shutdown",
    "start_span",
    "record_log_read",
    "record_query",
]
