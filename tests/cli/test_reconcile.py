"""Tests for the e2emetrics CLI commands."""

import json
import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner

from e2emetrics.cli.main import cli


@pytest.fixture(autouse=True)
def no_exporter():
    """Keep the commands from exporting metrics to a real collector."""
    env = {
        k: v
        for k, v in os.environ.items()
        if not k.startswith("OTEL_") and not k.upper().startswith("E2EMETRICS")
    }
    with patch.dict(os.environ, env, clear=True):
        yield
    # Handlers still point at the runner's closed streams
    logging.getLogger().handlers.clear()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestReconcileCommand:
    def test_yaml_record(self, runner: CliRunner, testdata_dir: Path) -> None:
        result = runner.invoke(cli, ["reconcile", "--path", str(testdata_dir)])

        assert result.exit_code == 0, result.output
        record = yaml.safe_load(result.stdout)
        assert record["apiVersion"] == "e2e-metrics.mayadata.io/v1alpha1"
        assert record["kind"] == "PipelineCoverage"
        assert record["spec"]["test"]["count"] == 3
        assert record["result"]["phase"] == "Passed"
        assert record["result"]["validTestCount"] == 2
        assert record["result"]["invalidTestCount"] == 0
        assert record["result"]["coverage"] == "67%"
        assert record["result"]["deprecated"] == (
            "2 deprecations: tcid-dir-health-check-v2: tcid-DIR-HEALTH-CHECK"
        )

    def test_json_record_carries_identity(self, runner: CliRunner, testdata_dir: Path) -> None:
        env = {
            "E2EMETRICS__COVERAGE__NAME": "director",
            "E2EMETRICS__COVERAGE__NAMESPACE": "e2e",
            "E2EMETRICS__COVERAGE__RUN_ID": "101",
        }
        result = runner.invoke(
            cli, ["reconcile", "--path", str(testdata_dir), "-o", "json"], env=env
        )

        assert result.exit_code == 0, result.output
        record = json.loads(result.stdout)
        assert record["metadata"] == {"name": "director", "namespace": "e2e"}
        assert record["result"]["runid"] == "101"

    def test_missing_directory_is_failed_record(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["reconcile", "--path", str(tmp_path / "missing")])

        assert result.exit_code == 0
        record = yaml.safe_load(result.stdout)
        assert record["result"]["phase"] == "Failed"
        assert "MANIFEST_DIRECTORY_UNREADABLE" in record["result"]["reason"]
        assert record["result"]["coverage"] == "0%"

    def test_fail_on_error_exits_nonzero(self, runner: CliRunner, tmp_path: Path) -> None:
        empty = tmp_path / "empty"
        empty.mkdir()
        result = runner.invoke(cli, ["reconcile", "--path", str(empty), "--fail-on-error"])

        assert result.exit_code == 1
        assert "No config(s) found" in result.stdout

    def test_fail_on_error_passes_on_success(
        self, runner: CliRunner, testdata_dir: Path
    ) -> None:
        result = runner.invoke(
            cli, ["reconcile", "--path", str(testdata_dir), "--fail-on-error"]
        )
        assert result.exit_code == 0

    def test_config_file(self, runner: CliRunner, testdata_dir: Path, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            f"manifests:\n  path: {testdata_dir}\ncoverage:\n  pipeline_id: '7'\n"
        )
        result = runner.invoke(cli, ["reconcile", "--config", str(config_file)])

        assert result.exit_code == 0, result.output
        assert yaml.safe_load(result.stdout)["spec"]["pipeline"]["id"] == "7"

    def test_invalid_config_is_usage_error(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "config.yaml"
        config_file.write_text("manifests:\n  desired_file_name: plan.json\n")
        result = runner.invoke(cli, ["reconcile", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "CONFIG_INVALID_VALUE" in result.output


class TestWatchCommand:
    def test_missing_directory_fails(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["watch", "--path", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Manifest directory does not exist" in result.output

    def test_prints_record_per_change(self, runner: CliRunner, testdata_dir: Path) -> None:
        with patch("e2emetrics.cli.watch.watch", return_value=iter([{("modified", "x")}])):
            result = runner.invoke(cli, ["watch", "--path", str(testdata_dir)])

        assert result.exit_code == 0, result.output
        decoder = json.JSONDecoder()
        text = result.stdout.strip()
        first, end = decoder.raw_decode(text)
        second, _ = decoder.raw_decode(text[end:].lstrip())
        assert first == second
        assert first["result"]["coverage"] == "67%"


class TestVersion:
    def test_version_option(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "e2emetrics" in result.output
