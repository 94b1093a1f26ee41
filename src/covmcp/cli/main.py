"""covmcp CLI - coverage reports for humans and MCP clients."""

import click

from covmcp.cli.recording import clear_command, diff_command, record_command, status_command
from covmcp.cli.report import file_command, summary_command
from covmcp.cli.serve import serve_command
from covmcp.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="covmcp")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """covmcp - LCOV coverage summaries and baseline diffs for AI coding agents."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    # Command output is the result; logs only surface problems unless -v
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(serve_command, name="serve")
cli.add_command(summary_command, name="summary")
cli.add_command(file_command, name="file")
cli.add_command(record_command, name="record")
cli.add_command(diff_command, name="diff")
cli.add_command(status_command, name="status")
cli.add_command(clear_command, name="clear")


if __name__ == "__main__":
    cli()
