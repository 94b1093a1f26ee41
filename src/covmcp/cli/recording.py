"""covmcp record / diff / status / clear commands - baseline workflow."""

from contextlib import nullcontext
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from covmcp.cli.report import _lcov_option, _root_option
from covmcp.cli.utils import build_facade, domain_errors, echo_json, format_impact
from covmcp.core.progress import pluralize, spinner, status
from covmcp.coverage.aggregate import summarize


@click.command()
@_lcov_option
@_root_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def record_command(lcov_path: str | None, root: Path | None, as_json: bool) -> None:
    """Record the current report as the baseline, replacing any previous one."""
    facade = build_facade(root)
    with nullcontext() if as_json else spinner("Recording baseline"), domain_errors():
        snapshot = facade.start_recording(lcov_path)
    baseline = summarize(snapshot.records)

    if as_json:
        echo_json(
            {
                "message": "Recording started",
                "recordedAt": snapshot.created_at.isoformat(),
                "source": snapshot.source,
                "files": len(snapshot.records),
                "baselineCoverage": baseline.to_dict(),
            }
        )
        return

    status(
        f"Recording started ({pluralize(len(snapshot.records), 'file')} from {snapshot.source})",
        style="success",
    )
    status(
        f"Baseline: lines {baseline.lines_coverage_percentage:.1f}%, "
        f"branches {baseline.branches_coverage_percentage:.1f}%",
        indent=2,
    )


@click.command()
@_lcov_option
@_root_option
@click.option("--files", "per_file", is_flag=True, help="Show per-file line coverage changes")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def diff_command(lcov_path: str | None, root: Path | None, per_file: bool, as_json: bool) -> None:
    """Show coverage change since the recorded baseline."""
    facade = build_facade(root)
    with domain_errors():
        file_diff = None
        if per_file:
            delta, file_diff = facade.get_full_diff_since_start(lcov_path)
        else:
            delta = facade.get_diff_since_start(lcov_path)

    if as_json:
        payload = delta.to_dict()
        if file_diff is not None:
            payload = {**payload, **file_diff.to_dict()}
        echo_json(payload)
        return

    console = Console()
    console.print(f"Lines:    {format_impact(delta.lines_percentage_impact)} pp")
    console.print(f"Branches: {format_impact(delta.branches_percentage_impact)} pp")

    if file_diff is None:
        return

    if file_diff.changes:
        table = Table(show_header=True, header_style="bold")
        table.add_column("File")
        table.add_column("Before", justify="right")
        table.add_column("After", justify="right")
        table.add_column("Change", justify="right")
        for c in file_diff.changes:
            table.add_row(c.path, f"{c.before:.1f}%", f"{c.after:.1f}%", format_impact(c.change))
        console.print(table)
    for path in file_diff.new_files:
        console.print(f"[green]+[/green] {path}")
    for path in file_diff.removed_files:
        console.print(f"[red]-[/red] {path}")


@click.command()
@_root_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def status_command(root: Path | None, as_json: bool) -> None:
    """Show whether a baseline is recorded."""
    facade = build_facade(root)
    with domain_errors():
        info = facade.recording_status()

    if as_json:
        echo_json(info)
        return

    if not info["recording"]:
        click.echo("No baseline recorded. Run 'covmcp record' first.")
        return
    click.echo(f"Baseline: {pluralize(info['files'], 'file')} from {info['source']}")
    click.echo(f"Recorded: {info['createdAt']}")


@click.command()
@_root_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def clear_command(root: Path | None, as_json: bool) -> None:
    """Delete the recorded baseline."""
    facade = build_facade(root)
    with domain_errors():
        cleared = facade.clear_recording()

    if as_json:
        echo_json({"cleared": cleared})
        return

    if cleared:
        status("Baseline cleared", style="success")
    else:
        status("Nothing to clear - no baseline recorded", style="warning")
