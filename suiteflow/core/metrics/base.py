from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.metrics import Meter, NoOpMeterProvider
from opentelemetry.sdk.metrics import MeterProvider as SdkMeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from suiteflow.settings import Settings

EXPORT_INTERVAL_MILLIS = 10000


class BaseMetrics:
    def __init__(self, settings: Settings, meter_name: str | None = None):
        """Initialize base metrics with its own meter.

        Args:
            settings: Application settings; decides between OTLP export and a no-op meter.
            meter_name: Optional name for the meter. Defaults to class name.
        """
        meter_name = meter_name or self.__class__.__name__
        self._meter = self._create_meter(settings, meter_name)
        self._create_instruments()

    def _create_meter(self, settings: Settings, meter_name: str) -> Meter:
        # No exporter threads or network in tests or without an OTLP endpoint
        if settings.TESTING or not settings.ENABLE_TRACING or not settings.OTEL_EXPORTER_OTLP_ENDPOINT:
            return NoOpMeterProvider().get_meter(meter_name)

        resource = Resource.create(
            {
                "service.name": settings.SERVICE_NAME,
                "service.version": settings.SERVICE_VERSION,
                "meter.name": meter_name,
            }
        )
        reader = PeriodicExportingMetricReader(
            exporter=OTLPMetricExporter(endpoint=settings.OTEL_EXPORTER_OTLP_ENDPOINT),
            export_interval_millis=EXPORT_INTERVAL_MILLIS,
        )
        meter_provider = SdkMeterProvider(resource=resource, metric_readers=[reader])
        return meter_provider.get_meter(meter_name)

    def _create_instruments(self) -> None:
        """Create metric instruments. Override in subclasses."""
        pass
