"""OpenTelemetry helpers for the stagecheck service."""
from __future__ import annotations

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from ..config import StagecheckSettings, get_settings

INSTRUMENTATION_NAME = "stagecheck"


def configure_telemetry(settings: StagecheckSettings | None = None) -> None:
    """Configure tracing and metrics; OTLP exporters are attached only when an endpoint is set."""
    settings = settings or get_settings()
    observability = settings.observability
    resource = Resource(attributes={SERVICE_NAME: observability.otel_service_name})

    tracer_provider = TracerProvider(resource=resource)
    metric_readers = []
    if observability.otel_exporter_otlp_endpoint:
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=observability.otel_exporter_otlp_endpoint))
        )
        metric_readers.append(
            PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=observability.otel_exporter_otlp_endpoint))
        )

    trace.set_tracer_provider(tracer_provider)
    # Registered without readers too, so violation counters are recorded by the SDK.
    metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=metric_readers))


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(INSTRUMENTATION_NAME)


def get_meter() -> metrics.Meter:
    return metrics.get_meter(INSTRUMENTATION_NAME)


__all__ = ["configure_telemetry", "get_meter", "get_tracer"]
