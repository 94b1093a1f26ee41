"""covmcp summary / file commands - read the current coverage report."""

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from covmcp.cli.utils import build_facade, domain_errors, echo_json

_lcov_option = click.option(
    "--lcov-path",
    "lcov_path",
    default=None,
    help="Coverage report to read (default: coverage/lcov.info or the configured path)",
)
_root_option = click.option(
    "--root",
    "root",
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root holding .covmcp/ (default: current directory)",
)


@click.command()
@_lcov_option
@_root_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def summary_command(lcov_path: str | None, root: Path | None, as_json: bool) -> None:
    """Show overall line and branch coverage of the project."""
    facade = build_facade(root)
    with domain_errors():
        summary = facade.get_overall_summary(lcov_path)

    if as_json:
        echo_json(summary.to_dict())
        return

    console = Console()
    console.print(f"Lines:    [bold]{summary.lines_coverage_percentage:.1f}%[/bold]")
    console.print(f"Branches: [bold]{summary.branches_coverage_percentage:.1f}%[/bold]")


@click.command()
@click.argument("file_paths", nargs=-1, required=True)
@_lcov_option
@_root_option
@click.option("--uncovered", is_flag=True, help="Also list unexecuted line numbers")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def file_command(
    file_paths: tuple[str, ...],
    lcov_path: str | None,
    root: Path | None,
    uncovered: bool,
    as_json: bool,
) -> None:
    """Show coverage for one or more files.

    FILE_PATHS must match the paths recorded in the report. Files missing from
    the report show 0%.
    """
    facade = build_facade(root)
    with domain_errors():
        if uncovered:
            summaries, details = facade.get_files_detail(lcov_path, file_paths)
        else:
            summaries, details = facade.get_files_summary(lcov_path, file_paths), []

    if as_json:
        payload: dict[str, object] = {"files": [s.to_dict() for s in summaries]}
        if uncovered:
            payload["uncovered"] = details
        echo_json(payload)
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Lines", justify="right")
    table.add_column("Branches", justify="right")
    if uncovered:
        table.add_column("Uncovered lines")

    for i, s in enumerate(summaries):
        row = [
            s.path,
            f"{s.lines_coverage_percentage:.1f}%",
            f"{s.branches_coverage_percentage:.1f}%",
        ]
        if uncovered:
            row.append(", ".join(str(n) for n in details[i]["uncoveredLines"]) or "-")
        table.add_row(*row)

    Console().print(table)
