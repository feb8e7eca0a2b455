"""e2emetrics reconcile command - compute coverage once."""

from pathlib import Path

import click

from e2emetrics.cli.utils import load_cli_config, render_record
from e2emetrics.core.telemetry import OTelMetricsSink, shutdown_telemetry
from e2emetrics.coverage.engine import CoverageEngine
from e2emetrics.coverage.record import CoverageIdentity, build_pipeline_coverage


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file",
)
@click.option(
    "--path",
    "manifest_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Manifest directory (overrides manifests.path)",
)
@click.option(
    "-o",
    "--output",
    "fmt",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    show_default=True,
    help="Record format",
)
@click.option("--fail-on-error", is_flag=True, help="Exit 1 when the phase is Failed")
@click.pass_context
def reconcile_command(
    ctx: click.Context,
    config_path: Path | None,
    manifest_dir: Path | None,
    fmt: str,
    fail_on_error: bool,
) -> None:
    """Compute pipeline coverage once and print the PipelineCoverage record."""
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    config = load_cli_config(config_path, manifest_dir, verbose=verbose)

    try:
        result = CoverageEngine(config, OTelMetricsSink()).reconcile()
    finally:
        shutdown_telemetry()

    record = build_pipeline_coverage(result.outcome, CoverageIdentity.from_config(config.coverage))
    click.echo(render_record(record, fmt))

    if fail_on_error and not result.ok:
        ctx.exit(1)
