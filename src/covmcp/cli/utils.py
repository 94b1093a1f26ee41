"""CLI utilities."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click

from covmcp.config import load_config
from covmcp.core.errors import CovMcpError
from covmcp.coverage import CoverageFacade


def build_facade(project_root: Path | None = None) -> CoverageFacade:
    """Load config for project_root (default: cwd) and bind a facade to it."""
    root = (project_root or Path.cwd()).resolve()
    with domain_errors():
        config = load_config(root)
    return CoverageFacade.from_config(config, root)


@contextmanager
def domain_errors() -> Iterator[None]:
    """Report CovMcpError as a ClickException (exit code 1)."""
    try:
        yield
    except CovMcpError as e:
        raise click.ClickException(e.message) from e


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2))


def format_impact(value: float) -> str:
    """Signed percentage points with color: +1.25 green, -0.50 red."""
    if value > 0:
        return f"[green]+{value:.2f}[/green]"
    if value < 0:
        return f"[red]{value:.2f}[/red]"
    return f"{value:.2f}"
