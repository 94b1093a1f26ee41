"""Application context for MCP handlers.

Single object passed to all tool handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from covmcp.config.models import CovMcpConfig
    from covmcp.coverage.facade import CoverageFacade


@dataclass
class AppContext:
    """Context object passed to all MCP tool handlers."""

    project_root: Path
    config: CovMcpConfig
    coverage: CoverageFacade

    @classmethod
    def create(cls, project_root: Path, config: CovMcpConfig | None = None) -> AppContext:
        """Build the context, loading config from project_root when not given."""
        from covmcp.config.loader import load_config
        from covmcp.coverage.facade import CoverageFacade

        config = config or load_config(project_root)
        return cls(
            project_root=project_root,
            config=config,
            coverage=CoverageFacade.from_config(config, project_root),
        )
