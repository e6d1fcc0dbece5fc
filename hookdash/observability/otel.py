"""OpenTelemetry + Prometheus fallback wiring for hookdash."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI

from hookdash import config

logger = logging.getLogger("hookdash.observability")


_initialized = False
_enabled = False
_tracer: Any | None = None
_trace_provider: Any | None = None
_meter_provider: Any | None = None
_fastapi_instrumentor: Any | None = None

_log_read_counter: Any | None = None
_malformed_line_counter: Any | None = None
_query_counter: Any | None = None
_query_latency_hist: Any | None = None

_prom_enabled = False
_prom_log_read_counter: Any | None = None
_prom_malformed_line_counter: Any | None = None
_prom_query_counter: Any | None = None
_prom_query_latency_hist: Any | None = None


def _normalize_otlp_endpoint(base_endpoint: str, signal_path: str) -> str:
    endpoint = (base_endpoint or "").strip()
    if not endpoint:
        return ""
    if endpoint.endswith(signal_path):
        return endpoint
    if endpoint.endswith("/"):
        endpoint = endpoint[:-1]
    if endpoint.endswith("/v1"):
        return f"{endpoint}{signal_path[3:]}"
    return f"{endpoint}{signal_path}"


def _prom_labels(**extra: str) -> dict[str, str]:
    return {key: (value or "").strip() or "unknown" for key, value in extra.items()}


def initialize(app: FastAPI | None = None) -> None:
    global _initialized, _enabled, _tracer, _trace_provider, _meter_provider, _fastapi_instrumentor
    global _log_read_counter, _malformed_line_counter, _query_counter, _query_latency_hist
    global _prom_enabled
    global _prom_log_read_counter, _prom_malformed_line_counter, _prom_query_counter, _prom_query_latency_hist

    if _initialized:
        if _enabled and app and _fastapi_instrumentor:
            _fastapi_instrumentor.instrument_app(app)
        return

    _initialized = True

    if not config.OTEL_ENABLED:
        logger.info("OpenTelemetry disabled (HOOKDASH_OTEL_ENABLED=false)")
        return

    try:
        from opentelemetry import metrics, trace
        from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
        from opentelemetry.sdk.metrics import MeterProvider
        from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
    except ImportError as exc:
        logger.warning("OpenTelemetry dependencies unavailable: %s", exc)
        return

    traces_endpoint = _normalize_otlp_endpoint(config.OTEL_ENDPOINT, "/v1/traces")
    metrics_endpoint = _normalize_otlp_endpoint(config.OTEL_ENDPOINT, "/v1/metrics")
    service_name = config.OTEL_SERVICE_NAME or "hookdash"

    resource = Resource.create(
        {
            "service.name": service_name,
            "service.namespace": "hookdash",
        }
    )

    trace_provider = TracerProvider(resource=resource)
    trace_exporter = OTLPSpanExporter(endpoint=traces_endpoint or None)
    trace_provider.add_span_processor(BatchSpanProcessor(trace_exporter))
    trace.set_tracer_provider(trace_provider)
    tracer = trace.get_tracer("hookdash")

    metric_reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=metrics_endpoint or None)
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])
    metrics.set_meter_provider(meter_provider)
    meter = metrics.get_meter("hookdash")

    _log_read_counter = meter.create_counter(
        "hookdash_log_events_read_total",
        unit="1",
        description="Event records loaded from hook log files",
    )
    _malformed_line_counter = meter.create_counter(
        "hookdash_log_malformed_lines_total",
        unit="1",
        description="Log lines dropped because they could not be parsed",
    )
    _query_counter = meter.create_counter(
        "hookdash_queries_total",
        unit="1",
        description="Query layer invocations",
    )
    _query_latency_hist = meter.create_histogram(
        "hookdash_query_latency_ms",
        unit="ms",
        description="Latency of query layer operations including the log read",
    )

    _trace_provider = trace_provider
    _meter_provider = meter_provider
    _tracer = tracer
    _fastapi_instrumentor = FastAPIInstrumentor()
    _enabled = True

    if app:
        _fastapi_instrumentor.instrument_app(app)

    if config.PROM_PORT > 0:
        try:
            from prometheus_client import Counter, Histogram, start_http_server

            start_http_server(config.PROM_PORT)
            _prom_enabled = True
            _prom_log_read_counter = Counter(
                "hookdash_log_events_read_total",
                "Event records loaded from hook log files",
                ["file"],
            )
            _prom_malformed_line_counter = Counter(
                "hookdash_log_malformed_lines_total",
                "Log lines dropped because they could not be parsed",
                ["file"],
            )
            _prom_query_counter = Counter(
                "hookdash_queries_total",
                "Query layer invocations",
                ["operation"],
            )
            _prom_query_latency_hist = Histogram(
                "hookdash_query_latency_ms",
                "Latency of query layer operations including the log read",
                ["operation"],
            )
            logger.info("Prometheus fallback metrics server listening on port %s", config.PROM_PORT)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Prometheus fallback not started: %s", exc)
            _prom_enabled = False

    logger.info(
        "OpenTelemetry initialized (service=%s endpoint=%s)",
        service_name,
        config.OTEL_ENDPOINT,
    )


def shutdown(app: FastAPI | None = None) -> None:
    global _enabled
    if not _initialized:
        return
    try:
        if app and _fastapi_instrumentor:
            _fastapi_instrumentor.uninstrument_app(app)
    except Exception as exc:  # noqa: BLE001
        logger.debug("FastAPI uninstrument failed: %s", exc)
    try:
        if _meter_provider is not None:
            _meter_provider.shutdown()
    except Exception as exc:  # noqa: BLE001
        logger.debug("Meter provider shutdown failed: %s", exc)
    try:
        if _trace_provider is not None:
            _trace_provider.shutdown()
    except Exception as exc:  # noqa: BLE001
        logger.debug("Trace provider shutdown failed: %s", exc)
    _enabled = False


@contextmanager
def start_span(name: str, attributes: dict[str, Any] | None = None):
    if not _enabled or _tracer is None:
        yield None
        return
    with _tracer.start_as_current_span(name) as span:
        if attributes:
            for key, value in attributes.items():
                if value is not None:
                    span.set_attribute(key, value)
        yield span


def record_log_read(filename: str, events: int, dropped: int = 0) -> None:
    safe_events = max(0, int(events))
    safe_dropped = max(0, int(dropped))
    labels = {"file": filename or "unknown"}
    if _enabled and _log_read_counter is not None and safe_events:
        _log_read_counter.add(safe_events, labels)
    if _enabled and _malformed_line_counter is not None and safe_dropped:
        _malformed_line_counter.add(safe_dropped, labels)
    if _prom_enabled and _prom_log_read_counter is not None and safe_events:
        _prom_log_read_counter.labels(**_prom_labels(file=filename)).inc(safe_events)
    if _prom_enabled and _prom_malformed_line_counter is not None and safe_dropped:
        _prom_malformed_line_counter.labels(**_prom_labels(file=filename)).inc(safe_dropped)


def record_query(operation: str, duration_ms: float) -> None:
    labels = {"operation": operation or "unknown"}
    elapsed = max(0.0, float(duration_ms))
    if _enabled and _query_counter is not None:
        _query_counter.add(1, labels)
    if _enabled and _query_latency_hist is not None:
        _query_latency_hist.record(elapsed, labels)
    if _prom_enabled and _prom_query_counter is not None:
        _prom_query_counter.labels(**_prom_labels(operation=operation)).inc()
    if _prom_enabled and _prom_query_latency_hist is not None:
        _prom_query_latency_hist.labels(**_prom_labels(operation=operation)).observe(elapsed)
