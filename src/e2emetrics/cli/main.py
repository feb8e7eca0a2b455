"""e2e-metrics CLI - e2emetrics command."""

import click

from e2emetrics import __version__
from e2emetrics.cli.reconcile import reconcile_command
from e2emetrics.cli.watch import watch_command
from e2emetrics.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="e2emetrics")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """e2e-metrics - test coverage of a CI pipeline against its master plan."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(reconcile_command, name="reconcile")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
