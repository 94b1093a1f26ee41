"""MCP server module - FastMCP tool registration and wiring."""

from covmcp.mcp.context import AppContext
from covmcp.mcp.registry import ToolRegistry, ToolSpec
from covmcp.mcp.server import create_mcp_server

__all__ = ["AppContext", "ToolRegistry", "ToolSpec", "create_mcp_server"]
