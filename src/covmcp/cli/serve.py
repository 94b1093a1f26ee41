"""covmcp serve command - run the MCP server."""

from pathlib import Path
from typing import Any

import click

from covmcp.cli.utils import domain_errors
from covmcp.config import load_config


@click.command()
@click.argument(
    "path",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="Override server.transport (default: stdio)",
)
@click.option("--host", default=None, help="Override server.host for http transport")
@click.option("--port", "-p", type=int, default=None, help="Override server.port (http only)")
def serve_command(path: Path, transport: str | None, host: str | None, port: int | None) -> None:
    """Run the coverage MCP server.

    PATH is the project root (default: current directory). Relative report
    paths passed by clients resolve against it.
    """
    from covmcp.mcp.server import run_server

    project_root = path.resolve()

    server_overrides: dict[str, Any] = {}
    if transport is not None:
        server_overrides["transport"] = transport
    if host is not None:
        server_overrides["host"] = host
    if port is not None:
        server_overrides["port"] = port

    with domain_errors():
        if server_overrides:
            config = load_config(project_root, server=server_overrides)
        else:
            config = load_config(project_root)

    run_server(project_root, config)
