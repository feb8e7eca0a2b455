"""OpenTelemetry metrics for e2e-metrics.

Metrics are recorded through a ``MetricsSink`` handed to the loader and the
engine, never through module globals, so tests can pass a recording sink and
production code passes ``OTelMetricsSink``.

Export only activates when:
- OTEL_EXPORTER_OTLP_ENDPOINT env var is set, OR
- telemetry.enabled=true in e2e-metrics config

Until ``init_telemetry`` installs a provider, the OpenTelemetry API meter is a
no-op and every recorded value is dropped.

Usage:
    from e2emetrics.core.telemetry import OTelMetricsSink, init_telemetry

    init_telemetry(config.telemetry)
    sink = OTelMetricsSink()
    sink.increment_counter(SYNC_CALL_COUNT, {"name": "x", "type": "sync", "status": "passed"})

    # Cleanup at shutdown
    shutdown_telemetry()
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Literal, Protocol

from opentelemetry import metrics as otel_metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

from e2emetrics.config.constants import METRICS_NAMESPACE

if TYPE_CHECKING:
    from e2emetrics.config.models import TelemetryConfig

logger = logging.getLogger(__name__)

_meter_provider: MeterProvider | None = None
_initialized: bool = False

# =============================================================================
# Metric catalogue
# =============================================================================

SYNC_CALL_COUNT = "controller_sync_call_count"
PLANNED_TEST_COUNT = "planned_test_count"
ACTUAL_TEST_COUNT = "actual_test_count"
MANIFEST_LOAD_DURATION = "manifest_load_duration_seconds"


@dataclass(frozen=True, slots=True)
class MetricSpec:
    """Instrument kind and help text for one metric."""

    kind: Literal["counter", "gauge", "histogram"]
    description: str
    unit: str = ""


METRICS: dict[str, MetricSpec] = {
    SYNC_CALL_COUNT: MetricSpec(
        "counter", "The number of sync() calls received by the controller."
    ),
    PLANNED_TEST_COUNT: MetricSpec("gauge", "Total number of planned test cases."),
    ACTUAL_TEST_COUNT: MetricSpec("gauge", "Total number of actual test cases."),
    MANIFEST_LOAD_DURATION: MetricSpec(
        "histogram", "Time taken in seconds to load the test case manifests.", "s"
    ),
}


class ControllerType(StrEnum):
    SYNC = "sync"


class ControllerStatus(StrEnum):
    PASSED = "passed"
    FAILED = "failed"


class MetricsSink(Protocol):
    """Capability set the loader and engine record observability data through.

    Only increments and sets are exposed; nothing reads values back, so
    concurrent reconciles never race on a read-modify-write.
    """

    def increment_counter(self, name: str, labels: Mapping[str, str]) -> None: ...

    def set_gauge(self, name: str, labels: Mapping[str, str], value: float) -> None: ...

    def observe(self, name: str, labels: Mapping[str, str], value: float) -> None: ...


class OTelMetricsSink:
    """MetricsSink backed by an OpenTelemetry meter.

    Instruments are created on first use and cached; creation is guarded by a
    lock because reconciles may run concurrently.
    """

    def __init__(self, meter: Any = None) -> None:
        self._meter = meter if meter is not None else get_meter()
        self._instruments: dict[str, Any] = {}
        self._lock = threading.Lock()

    def _instrument(self, name: str, kind: str) -> Any:
        instrument = self._instruments.get(name)
        if instrument is not None:
            return instrument
        spec = METRICS.get(name, MetricSpec(kind, ""))  # type: ignore[arg-type]
        if spec.kind != kind:
            raise ValueError(f"Metric {name!r} is a {spec.kind}, not a {kind}")
        with self._lock:
            instrument = self._instruments.get(name)
            if instrument is None:
                create = {
                    "counter": self._meter.create_counter,
                    "gauge": self._meter.create_gauge,
                    "histogram": self._meter.create_histogram,
                }[kind]
                instrument = create(
                    f"{METRICS_NAMESPACE}_{name}",
                    unit=spec.unit,
                    description=spec.description,
                )
                self._instruments[name] = instrument
        return instrument

    def increment_counter(self, name: str, labels: Mapping[str, str]) -> None:
        self._instrument(name, "counter").add(1, attributes=dict(labels))

    def set_gauge(self, name: str, labels: Mapping[str, str], value: float) -> None:
        self._instrument(name, "gauge").set(value, attributes=dict(labels))

    def observe(self, name: str, labels: Mapping[str, str], value: float) -> None:
        self._instrument(name, "histogram").record(value, attributes=dict(labels))


def record_sync_call(
    sink: MetricsSink,
    *,
    name: str,
    status: ControllerStatus,
    type: ControllerType = ControllerType.SYNC,
) -> None:
    """Increment the sync call counter once."""
    sink.increment_counter(
        SYNC_CALL_COUNT,
        {"name": name, "type": str(type), "status": str(status)},
    )


# =============================================================================
# Provider lifecycle
# =============================================================================


def _is_telemetry_enabled(config: TelemetryConfig | None) -> bool:
    """Check if telemetry should be enabled based on env vars and config.

    Telemetry is enabled if:
    1. OTEL_EXPORTER_OTLP_ENDPOINT env var is set, OR
    2. config.telemetry.enabled is True
    """
    if os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT"):
        return True
    return bool(config is not None and config.enabled)


def _get_otlp_endpoint(config: TelemetryConfig | None) -> str | None:
    """Get OTLP endpoint from env var or config."""
    endpoint = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
    if endpoint:
        return endpoint
    if config is not None and config.otlp_endpoint:
        return config.otlp_endpoint
    return None


def _get_service_name(config: TelemetryConfig | None) -> str:
    """Get service name from env var or config."""
    service_name = os.environ.get("OTEL_SERVICE_NAME")
    if service_name:
        return service_name
    if config is not None:
        return config.service_name
    return "e2e-metrics"


def _get_version() -> str:
    """Get e2e-metrics version for resource attributes."""
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("e2e-metrics")
    except PackageNotFoundError:
        return "unknown"


def _is_insecure_endpoint(endpoint: str) -> bool:
    return endpoint.startswith("http://")


def init_telemetry(config: TelemetryConfig | None = None) -> bool:
    """Install an OpenTelemetry MeterProvider exporting over OTLP.

    Args:
        config: TelemetryConfig from e2e-metrics config. If None, only env vars are checked.

    Returns:
        True if a provider was installed, False if disabled.

    This function is idempotent - calling it multiple times has no effect after
    the first call.
    """
    global _meter_provider, _initialized

    if _initialized:
        logger.debug("Telemetry already initialized")
        return _meter_provider is not None

    _initialized = True

    if not _is_telemetry_enabled(config):
        logger.debug(
            "Telemetry not enabled (set OTEL_EXPORTER_OTLP_ENDPOINT or telemetry.enabled=true)"
        )
        return False

    endpoint = _get_otlp_endpoint(config)
    if not endpoint:
        logger.warning("Telemetry enabled but no OTLP endpoint configured - telemetry disabled")
        return False

    from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

    resource = Resource.create(
        {
            "service.name": _get_service_name(config),
            "service.version": _get_version(),
        }
    )
    exporter = OTLPMetricExporter(endpoint=endpoint, insecure=_is_insecure_endpoint(endpoint))
    interval = config.export_interval_ms if config is not None else 60000
    reader = PeriodicExportingMetricReader(exporter, export_interval_millis=interval)
    _meter_provider = MeterProvider(resource=resource, metric_readers=[reader])
    otel_metrics.set_meter_provider(_meter_provider)

    logger.info(f"Telemetry initialized: endpoint={endpoint}")
    return True


def shutdown_telemetry() -> None:
    """Flush pending metrics and shut the provider down.

    Call this during application shutdown to ensure all metrics
    are exported before the process exits.
    """
    global _meter_provider, _initialized

    if not _initialized:
        return

    if _meter_provider is not None:
        try:
            _meter_provider.shutdown()
            logger.debug("Meter provider shut down")
        except Exception as e:
            logger.warning(f"Error shutting down meter provider: {e}")

    _meter_provider = None
    _initialized = False


def get_meter() -> Any:
    """Get the e2e-metrics meter from the global provider.

    Returns a no-op meter until ``init_telemetry`` installs a provider.
    """
    return otel_metrics.get_meter("e2emetrics")


def is_telemetry_enabled() -> bool:
    """Check if an exporting provider is currently installed."""
    return _meter_provider is not None
