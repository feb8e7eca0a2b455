"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (E2EMETRICS__SECTION__KEY)
3. YAML config file passed to load_config()
4. Built-in defaults (this file)

Environment Variable Format:
    E2EMETRICS__<SECTION>__<KEY>=<VALUE>

Examples:
    E2EMETRICS__LOGGING__LEVEL=DEBUG
    E2EMETRICS__MANIFESTS__PATH=/etc/config/e2e-metrics/
    E2EMETRICS__COVERAGE__NAMESPACE=e2e
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from e2emetrics.config.constants import (
    DEFAULT_ACTUAL_FILE_NAME,
    DEFAULT_CONTROLLER_NAME,
    DEFAULT_DESIRED_FILE_NAME,
    DEFAULT_MANIFEST_PATH,
    MANIFEST_SUFFIXES,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        E2EMETRICS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every registered test case id.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ManifestConfig(BaseModel):
    """Manifest directory configuration.

    Env vars:
        E2EMETRICS__MANIFESTS__PATH: Directory holding both manifests
        E2EMETRICS__MANIFESTS__DESIRED_FILE_NAME: Planning manifest file name
        E2EMETRICS__MANIFESTS__ACTUAL_FILE_NAME: CI manifest file name
    """

    path: str = Field(
        default=DEFAULT_MANIFEST_PATH,
        description="Directory holding the desired and actual manifests.",
    )
    desired_file_name: str = Field(
        default=DEFAULT_DESIRED_FILE_NAME,
        description="File that declares all the desired test cases.",
    )
    actual_file_name: str = Field(
        default=DEFAULT_ACTUAL_FILE_NAME,
        description="File that declares the implemented test cases.",
    )
    test_impl_type: str = Field(
        default="litmus",
        description="Value of the testimpltype label on the test count gauges.",
    )

    @field_validator("desired_file_name", "actual_file_name")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        if "/" in v:
            raise ValueError(f"Manifest file name must not contain a path separator: {v}")
        if not v.endswith(MANIFEST_SUFFIXES):
            raise ValueError(f"Manifest file name must end in .yml or .yaml: {v}")
        return v


class CoverageConfig(BaseModel):
    """PipelineCoverage identity, supplied by the host.

    Env vars:
        E2EMETRICS__COVERAGE__NAME: Record name
        E2EMETRICS__COVERAGE__NAMESPACE: Record namespace, also the watched namespace
        E2EMETRICS__COVERAGE__PIPELINE_ID: CI pipeline id
        E2EMETRICS__COVERAGE__RUN_ID: CI run id
    """

    name: str = Field(default="", description="Name of the PipelineCoverage record.")
    namespace: str = Field(
        default="",
        description="Namespace of the record. Sync requests for other namespaces are skipped.",
    )
    pipeline_id: str = Field(default="", description="Pipeline id recorded under spec.")
    run_id: str = Field(default="", description="Run id recorded under result.")
    controller_name: str = Field(
        default=DEFAULT_CONTROLLER_NAME,
        description="Value of the name label on the sync call counter.",
    )


class TelemetryConfig(BaseModel):
    """OpenTelemetry configuration.

    Env vars:
        E2EMETRICS__TELEMETRY__ENABLED: Enable/disable telemetry
        E2EMETRICS__TELEMETRY__OTLP_ENDPOINT: OTLP collector endpoint
        E2EMETRICS__TELEMETRY__SERVICE_NAME: Service name for metrics

    Note: Also respects standard OTEL_* env vars when enabled.
    """

    enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry. Set to true and configure endpoint to activate.",
    )
    otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP collector endpoint (e.g., http://localhost:4317). "
        "Required when enabled=true.",
    )
    service_name: str = Field(
        default="e2e-metrics",
        description="Service name for metrics.",
    )
    export_interval_ms: int = Field(
        default=60000,
        description="Interval between metric exports.",
    )

    @field_validator("export_interval_ms")
    @classmethod
    def validate_export_interval(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Export interval must be positive, got {v}")
        return v


class WatchConfig(BaseModel):
    """Manifest watcher configuration for `e2emetrics watch`.

    Env vars:
        E2EMETRICS__WATCH__DEBOUNCE_MS: Quiet period before re-reconciling
        E2EMETRICS__WATCH__FORCE_POLLING: Poll instead of inotify (ConfigMap mounts)
    """

    debounce_ms: int = Field(
        default=1600,
        description="Changes within this window are batched into one reconcile.",
    )
    force_polling: bool = Field(
        default=False,
        description="Poll for changes. Needed where symlink-swapped mounts hide inotify events.",
    )


class E2EMetricsConfig(BaseModel):
    """Root configuration for e2e-metrics.

    All settings can be configured via:
    1. Environment variables: E2EMETRICS__SECTION__KEY
    2. A YAML config file
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    manifests: ManifestConfig = Field(default_factory=ManifestConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
