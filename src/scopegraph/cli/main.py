"""scopegraph CLI - scopegraph command."""

import click

from scopegraph import __version__
from scopegraph.cli.analyze import analyze_command
from scopegraph.cli.scopes import scopes_command
from scopegraph.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="scopegraph")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """scopegraph - Scope extraction and relationship graphs for source trees."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(analyze_command, name="analyze")
cli.add_command(scopes_command, name="scopes")


if __name__ == "__main__":
    cli()
