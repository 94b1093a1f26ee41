"""Introspection MCP tool - error catalog lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field

from covmcp.mcp.errors import ERROR_CATALOG, get_error_documentation
from covmcp.mcp.registry import registry
from covmcp.mcp.tools.base import BaseParams

if TYPE_CHECKING:
    from covmcp.mcp.context import AppContext


class DescribeErrorParams(BaseParams):
    """Parameters for describe_error."""

    code: str = Field(..., description="Error kind from meta.error.kind, e.g. NO_BASELINE")


@registry.register(
    "describe_error",
    "Explain an error kind returned in meta.error: likely causes and how to recover.",
    DescribeErrorParams,
)
async def describe_error(
    ctx: AppContext,  # noqa: ARG001
    params: DescribeErrorParams,
) -> dict[str, Any]:
    doc = get_error_documentation(params.code.upper())
    if doc is None:
        return {
            "found": False,
            "code": params.code,
            "available_codes": sorted(ERROR_CATALOG),
        }
    return {"found": True, **doc.to_dict()}
