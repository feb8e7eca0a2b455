"""Config module exports."""

from e2emetrics.config.loader import load_config
from e2emetrics.config.models import (
    CoverageConfig,
    E2EMetricsConfig,
    LoggingConfig,
    ManifestConfig,
    TelemetryConfig,
    WatchConfig,
)

__all__ = [
    "load_config",
    "E2EMetricsConfig",
    "CoverageConfig",
    "LoggingConfig",
    "ManifestConfig",
    "TelemetryConfig",
    "WatchConfig",
]
