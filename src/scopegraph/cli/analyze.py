"""scopegraph analyze command - extract and resolve a project."""

import json
from pathlib import Path

import click
from rich.table import Table

from scopegraph.cli.utils import load_cli_config
from scopegraph.core.errors import ScopeGraphError
from scopegraph.core.progress import get_console, pluralize, spinner, status
from scopegraph.ops import ProjectAnalysis, analyze_project


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--no-inverse", is_flag=True, help="Skip mirrored inverse edges")
@click.option("--no-contains", is_flag=True, help="Skip CONTAINS edges")
@click.option("--unresolved", "show_unresolved", is_flag=True, help="List unresolved references")
@click.pass_context
def analyze_command(
    ctx: click.Context,
    path: Path,
    as_json: bool,
    no_inverse: bool,
    no_contains: bool,
    show_unresolved: bool,
) -> None:
    """Extract scopes and resolve relationships for a project.

    PATH is the project root (default: current directory).
    """
    root = path.resolve()
    config = load_cli_config(ctx, root)
    try:
        if no_inverse or no_contains:
            config.resolution = config.resolution.model_copy(
                update={
                    "include_inverse": config.resolution.include_inverse and not no_inverse,
                    "include_contains": config.resolution.include_contains and not no_contains,
                }
            )
        if as_json:
            project = analyze_project(root, config=config)
        else:
            with spinner(f"Analyzing {root.name or root}"):
                project = analyze_project(root, config=config)
    except ScopeGraphError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        data = project.resolution.to_dict()
        data["errors"] = project.errors
        data["skipped"] = project.skipped
        click.echo(json.dumps(data, indent=2))
        return

    _print_summary(project, show_unresolved)


def _print_summary(project: ProjectAnalysis, show_unresolved: bool) -> None:
    console = get_console()
    stats = project.resolution.stats

    status(
        f"{pluralize(stats.files_analyzed, 'file')}, {pluralize(stats.total_scopes, 'scope')}, "
        f"{pluralize(stats.total_relationships, 'relationship')} in {stats.resolution_time_ms:.0f}ms",
        style="success",
    )

    table = Table(title="Relationships", show_header=True, header_style="bold")
    table.add_column("Type")
    table.add_column("Count", justify="right")
    for rel_type, count in stats.by_type.items():
        table.add_row(rel_type, str(count))
    console.print(table)

    if stats.unresolved_count:
        status(f"{pluralize(stats.unresolved_count, 'unresolved reference')}", style="warning")
    if show_unresolved and project.resolution.unresolved_references:
        unresolved = Table(show_header=True, header_style="bold")
        unresolved.add_column("File")
        unresolved.add_column("Scope")
        unresolved.add_column("Identifier")
        unresolved.add_column("Line", justify="right")
        unresolved.add_column("Reason")
        for ref in project.resolution.unresolved_references:
            unresolved.add_row(ref.from_file, ref.from_scope, ref.identifier, str(ref.line), ref.reason)
        console.print(unresolved)

    for rel_path in project.skipped:
        status(f"Skipped {rel_path} (size limit)", style="warning")
    for rel_path, message in project.errors.items():
        status(f"{rel_path}: {message}", style="error")
