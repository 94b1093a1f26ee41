"""MCP tool handlers. Importing a module registers its tools."""

from covmcp.mcp.tools import coverage, introspection, recording

__all__ = ["coverage", "introspection", "recording"]
