"""scopegraph scopes command - list the scopes of one file."""

import json
from pathlib import Path

import click
from rich.table import Table

from scopegraph.cli.utils import load_cli_config
from scopegraph.core.errors import ScopeGraphError
from scopegraph.core.progress import get_console, status
from scopegraph.ops import analyze_file


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def scopes_command(ctx: click.Context, file: Path, as_json: bool) -> None:
    """Extract and list the scopes of FILE.

    Config is loaded from the current directory.
    """
    config = load_cli_config(ctx, Path.cwd())
    try:
        analysis = analyze_file(file, include_module_scopes=config.extraction.include_module_scopes)
    except ScopeGraphError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        click.echo(json.dumps(analysis.to_dict(), indent=2))
        return

    table = Table(title=f"{analysis.file_path} ({analysis.language})", show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Lines", justify="right")
    table.add_column("Parent")
    table.add_column("Signature", overflow="fold")
    for scope in analysis.scopes:
        table.add_row(
            "  " * scope.depth + scope.name,
            scope.type,
            f"{scope.start_line}-{scope.end_line}",
            scope.parent or "",
            scope.signature or "",
        )
    get_console().print(table)

    if not analysis.ast_valid:
        status(f"{len(analysis.ast_issues)} syntax issue(s) recovered", style="warning")
