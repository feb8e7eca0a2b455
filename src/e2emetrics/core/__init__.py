"""Core module exports."""

from e2emetrics.core.errors import (
    ConfigError,
    DirectoryReadError,
    E2EMetricsError,
    ErrorCode,
    FileParseError,
    InternalError,
    ManifestError,
    NoManifestsFoundError,
    SyncError,
)
from e2emetrics.core.logging import (
    clear_reconcile_id,
    configure_logging,
    get_reconcile_id,
    manifest_context,
    set_reconcile_id,
)
from e2emetrics.core.telemetry import MetricsSink, OTelMetricsSink

__all__ = [
    # Errors
    "ConfigError",
    "DirectoryReadError",
    "E2EMetricsError",
    "ErrorCode",
    "FileParseError",
    "InternalError",
    "ManifestError",
    "NoManifestsFoundError",
    "SyncError",
    # Logging
    "clear_reconcile_id",
    "configure_logging",
    "get_reconcile_id",
    "manifest_context",
    "set_reconcile_id",
    # Telemetry
    "MetricsSink",
    "OTelMetricsSink",
]
