from opentelemetry import metrics, trace
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import settings


def setup_tracing(app_name: str) -> None:
    """Configure OpenTelemetry tracing with a console exporter."""
    resource = Resource.create({"service.name": app_name})
    provider = TracerProvider(resource=resource)

    processor = BatchSpanProcessor(ConsoleSpanExporter())
    provider.add_span_processor(processor)

    trace.set_tracer_provider(provider)


def setup_metrics(app_name: str) -> None:
    """Configure OpenTelemetry metrics with a console reader."""

    resource = Resource.create({"service.name": app_name})

    # Providers flush on interpreter exit, so a short-lived CLI still exports
    console_reader = PeriodicExportingMetricReader(ConsoleMetricExporter())

    provider = MeterProvider(resource=resource, metric_readers=[console_reader])

    metrics.set_meter_provider(provider)


def setup_telemetry() -> bool:
    """Install console tracing and metrics if TELEMETRY_CONSOLE is enabled.

    Without it the OpenTelemetry API stays on its no-op providers.
    """
    if not settings.TELEMETRY_CONSOLE:
        return False
    setup_tracing(settings.APP_NAME)
    setup_metrics(settings.APP_NAME)
    return True
