"""CLI utilities."""

import json
from pathlib import Path
from typing import Any

import click
import yaml

from e2emetrics.config.loader import load_config
from e2emetrics.config.models import E2EMetricsConfig
from e2emetrics.core.errors import ConfigError
from e2emetrics.core.logging import configure_logging
from e2emetrics.core.telemetry import init_telemetry


def load_cli_config(
    config_path: Path | None,
    manifest_dir: Path | None = None,
    *,
    verbose: bool = False,
) -> E2EMetricsConfig:
    """Load config for a command and set up logging and telemetry from it.

    Args:
        config_path: Optional YAML config file
        manifest_dir: Overrides manifests.path when given
        verbose: Force DEBUG logging

    Raises:
        click.ClickException: If the config cannot be loaded
    """
    overrides: dict[str, Any] = {}
    if manifest_dir is not None:
        overrides["manifests"] = {"path": str(manifest_dir)}
    try:
        config = load_config(config_path, **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)
    init_telemetry(config.telemetry)
    return config


def render_record(record: dict[str, Any], fmt: str) -> str:
    """Render a PipelineCoverage record as YAML or JSON."""
    if fmt == "json":
        return json.dumps(record, indent=2)
    return yaml.safe_dump(record, default_flow_style=False, sort_keys=False).rstrip("\n")
