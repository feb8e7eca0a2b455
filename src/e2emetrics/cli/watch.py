"""e2emetrics watch command - recompute coverage whenever the manifests change."""

from pathlib import Path

import click
import structlog
from watchfiles import watch

from e2emetrics.cli.utils import load_cli_config, render_record
from e2emetrics.core.telemetry import OTelMetricsSink, shutdown_telemetry
from e2emetrics.coverage.engine import CoverageEngine
from e2emetrics.coverage.record import CoverageIdentity, build_pipeline_coverage

logger = structlog.get_logger()


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
    default="json",
    show_default=True,
    help="Record format",
)
@click.pass_context
def watch_command(
    ctx: click.Context,
    config_path: Path | None,
    manifest_dir: Path | None,
    fmt: str,
) -> None:
    """Reconcile now, then again on every change to the manifest directory.

    Each record is printed as it is computed. Stop with Ctrl-C.
    """
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    config = load_cli_config(config_path, manifest_dir, verbose=verbose)
    watch_dir = Path(config.manifests.path)
    if not watch_dir.is_dir():
        raise click.ClickException(f"Manifest directory does not exist: {watch_dir}")

    engine = CoverageEngine(config, OTelMetricsSink())
    identity = CoverageIdentity.from_config(config.coverage)

    def run_once() -> None:
        result = engine.reconcile()
        click.echo(render_record(build_pipeline_coverage(result.outcome, identity), fmt))

    logger.info("manifest_watcher_started", path=str(watch_dir))
    try:
        run_once()
        for changes in watch(
            watch_dir,
            debounce=config.watch.debounce_ms,
            force_polling=config.watch.force_polling,
            raise_interrupt=False,
        ):
            logger.info("changes_detected", count=len(changes))
            run_once()
    finally:
        shutdown_telemetry()
        logger.info("manifest_watcher_stopped")
