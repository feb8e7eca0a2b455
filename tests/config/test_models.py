"""Tests for config/models.py module.

Covers:
- LogOutputConfig model
- ManifestConfig model
- TelemetryConfig model
- E2EMetricsConfig root model
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from e2emetrics.config.models import (
    CoverageConfig,
    E2EMetricsConfig,
    LogOutputConfig,
    ManifestConfig,
    TelemetryConfig,
    WatchConfig,
)


class TestLogOutputConfig:
    def test_defaults(self) -> None:
        config = LogOutputConfig()
        assert config.format == "console"
        assert config.destination == "stderr"
        assert config.level is None

    def test_absolute_path_destination(self) -> None:
        config = LogOutputConfig(destination="/var/log/e2emetrics.log")
        assert config.destination == "/var/log/e2emetrics.log"

    def test_relative_path_fails(self) -> None:
        with pytest.raises(ValidationError, match="absolute path"):
            LogOutputConfig(destination="logs/e2emetrics.log")


class TestManifestConfig:
    def test_defaults(self) -> None:
        config = ManifestConfig()
        assert config.path == "/etc/config/e2e-metrics/"
        assert config.desired_file_name == ".master-plan.yml"
        assert config.actual_file_name == ".gitlab-ci.yml"
        assert config.test_impl_type == "litmus"

    @pytest.mark.parametrize("name", ["plan.json", "dir/plan.yml", "plan"])
    def test_invalid_file_names_fail(self, name: str) -> None:
        with pytest.raises(ValidationError):
            ManifestConfig(desired_file_name=name)

    def test_yaml_suffix_allowed(self) -> None:
        assert ManifestConfig(actual_file_name="ci.yaml").actual_file_name == "ci.yaml"


class TestTelemetryConfig:
    def test_defaults(self) -> None:
        config = TelemetryConfig()
        assert config.enabled is False
        assert config.otlp_endpoint is None
        assert config.service_name == "e2e-metrics"

    def test_non_positive_interval_fails(self) -> None:
        with pytest.raises(ValidationError):
            TelemetryConfig(export_interval_ms=0)


class TestE2EMetricsConfig:
    def test_all_sections_default(self) -> None:
        config = E2EMetricsConfig()
        assert config.logging.level == "INFO"
        assert config.manifests == ManifestConfig()
        assert config.coverage == CoverageConfig()
        assert config.coverage.controller_name == "pipeline-coverage-controller"
        assert config.telemetry == TelemetryConfig()
        assert config.watch == WatchConfig()

    def test_nested_dict_input(self) -> None:
        config = E2EMetricsConfig.model_validate(
            {"manifests": {"path": "/m/"}, "coverage": {"namespace": "e2e"}}
        )
        assert config.manifests.path == "/m/"
        assert config.coverage.namespace == "e2e"
