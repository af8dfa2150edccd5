"""Command line interface for refinery."""

import click

from refinery.cli.check import check
from refinery.cli.demo import demo
from refinery.version import PACKAGE_NAME, PACKAGE_VERSION


@click.group(invoke_without_command=True)
@click.version_option(PACKAGE_VERSION, package_name=PACKAGE_NAME, prog_name="refinery")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """refinery: composable schema validation"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(check)
cli.add_command(demo)

__all__ = ["cli"]
