"""Shared fixtures for MCP tests."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest

import covmcp.mcp.tools  # noqa: F401  (registers tools)
from covmcp.mcp.context import AppContext
from covmcp.mcp.registry import ToolRegistry, registry
from covmcp.mcp.server import make_tool_handler


@pytest.fixture
def clean_registry(monkeypatch: pytest.MonkeyPatch) -> ToolRegistry:
    """Empty registry swapped in for the one the server wires from."""
    empty = ToolRegistry()
    monkeypatch.setattr("covmcp.mcp.registry.registry", empty)
    return empty


@pytest.fixture
def app_context(tmp_path: Path) -> AppContext:
    """Context rooted at tmp_path with default config."""
    return AppContext.create(tmp_path)


@pytest.fixture
def call_tool(app_context: AppContext) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Invoke a registered tool through its wired handler, returning the envelope."""

    async def _call(name: str, **kwargs: Any) -> dict[str, Any]:
        spec = registry.get(name)
        assert spec is not None, f"tool not registered: {name}"
        return await make_tool_handler(spec, app_context)(**kwargs)

    return _call
