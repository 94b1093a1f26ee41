"""FastMCP server creation and wiring.

Tool logging is two-phase: tool_start with params, tool_complete with a
result summary. Expected failures log a one-line warning; unexpected ones log
a console summary with the traceback at DEBUG (file output only).
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from fastmcp.utilities.json_schema import dereference_refs
from pydantic import BaseModel, Field

from covmcp.core.logging import clear_request_id, set_request_id

if TYPE_CHECKING:
    from fastmcp import FastMCP

    from covmcp.config.models import CovMcpConfig
    from covmcp.mcp.context import AppContext
    from covmcp.mcp.registry import HandlerFn, ToolSpec

log = structlog.get_logger(__name__)

SERVER_INSTRUCTIONS = (
    "Coverage reporting for AI coding agents. Summarize LCOV/Cobertura reports, "
    "record a baseline with start_recording, and measure the impact of changes "
    "with get_diff_since_start."
)


class ToolResponse(BaseModel):
    """Standardized tool response envelope."""

    result: Any = None
    meta: dict[str, Any] = Field(default_factory=dict)

    success: bool
    error: str | None = None


def _extract_log_params(_tool_name: str, kwargs: dict[str, Any]) -> dict[str, Any]:
    """Extract relevant parameters for logging.

    Drops unset values and limits long ones.
    """
    params: dict[str, Any] = {}

    for key, value in kwargs.items():
        # Truncate long strings
        if isinstance(value, str) and len(value) > 50:
            params[key] = value[:50] + "..."
        # Truncate long lists
        elif isinstance(value, list) and len(value) > 3:
            params[key] = f"[{len(value)} items]"
        elif value is not None:
            params[key] = value

    return params


def _extract_result_summary(tool_name: str, result: dict[str, Any]) -> dict[str, Any]:
    """Extract summary metrics from tool result for logging."""
    summary: dict[str, Any] = {}

    if "linesCoveragePercentage" in result:
        summary["lines"] = result["linesCoveragePercentage"]
    if "branchesCoveragePercentage" in result:
        summary["branches"] = result["branchesCoveragePercentage"]
    if "linesPercentageImpact" in result:
        summary["lines_impact"] = result["linesPercentageImpact"]
    if "branchesPercentageImpact" in result:
        summary["branches_impact"] = result["branchesPercentageImpact"]

    if tool_name == "coverage_files_summary" and isinstance(result.get("files"), list):
        summary["files"] = len(result["files"])
    elif tool_name == "start_recording" and "files" in result:
        summary["files"] = result["files"]
    elif tool_name == "get_file_diff_since_start":
        summary["changed"] = len(result.get("fileChanges", []))
        summary["new"] = len(result.get("newFiles", []))
        summary["removed"] = len(result.get("removedFiles", []))
    elif tool_name == "coverage_uncovered_lines":
        summary["uncovered"] = len(result.get("uncoveredLines", []))

    return summary


def _elapsed_ms(start_time: float) -> int:
    return int((time.perf_counter() - start_time) * 1000)


def create_mcp_server(context: AppContext) -> FastMCP:
    """Create FastMCP server with all tools wired to context.

    Args:
        context: AppContext holding config and the coverage facade

    Returns:
        Configured FastMCP server ready to run
    """
    from fastmcp import FastMCP

    from covmcp.mcp.registry import registry

    # Import tools to trigger registration
    from covmcp.mcp.tools import (  # noqa: F401
        coverage,
        introspection,
        recording,
    )

    log.info("mcp_server_creating", project_root=str(context.project_root))

    mcp = FastMCP(context.config.server.name, instructions=SERVER_INSTRUCTIONS)

    for spec in registry.get_all():
        _wire_tool(mcp, spec, context)

    log.info("mcp_server_created", tool_count=len(registry))

    return mcp


def make_tool_handler(spec: ToolSpec, context: AppContext) -> HandlerFn:
    """Build the FastMCP-facing handler for one tool spec.

    The handler accepts the params model's fields as keyword arguments,
    validates them, runs the spec handler and always returns a ToolResponse
    dict. Errors never propagate to FastMCP.
    """
    from pydantic import ValidationError

    from covmcp.core.errors import CovMcpError
    from covmcp.mcp.errors import FALLBACK_REMEDIATION, MCPError, MCPErrorCode

    params_model = spec.params_model
    spec_handler = spec.handler

    async def handler(**kwargs: Any) -> dict[str, Any]:
        tool_name = spec.name
        start_time = time.perf_counter()
        request_id = set_request_id()

        try:
            log.info("tool_start", tool=tool_name, **_extract_log_params(tool_name, kwargs))

            try:
                params = params_model(**kwargs)
            except ValidationError as e:
                # User input error - no traceback needed
                errors = e.errors()
                first = errors[0]["msg"] if errors else str(e)
                log.warning(
                    "tool_validation_error",
                    tool=tool_name,
                    error=first,
                    elapsed_ms=_elapsed_ms(start_time),
                )
                return ToolResponse(
                    success=False,
                    result=None,
                    error=f"Validation error: {first}",
                    meta={
                        "request_id": request_id,
                        "error_type": "validation",
                        "error": {
                            "kind": MCPErrorCode.INVALID_PARAMS.value,
                            "message": first,
                        },
                        "validation_errors": [
                            {"field": ".".join(str(x) for x in err["loc"]), "message": err["msg"]}
                            for err in errors[:5]
                        ],
                    },
                ).model_dump()

            try:
                result_data: dict[str, Any] = await spec_handler(context, params)
            except CovMcpError as e:
                raise MCPError.from_domain(e) from e

            summary = _extract_result_summary(tool_name, result_data)
            log.info("tool_complete", tool=tool_name, elapsed_ms=_elapsed_ms(start_time), **summary)

            return ToolResponse(
                success=True,
                result=result_data,
                meta={
                    "request_id": request_id,
                    "timestamp": int(time.time() * 1000),
                },
            ).model_dump()

        except MCPError as e:
            # Expected error - log warning, no traceback
            log.warning(
                "tool_error",
                tool=tool_name,
                error_code=e.code.value,
                error=e.message,
                elapsed_ms=_elapsed_ms(start_time),
            )
            return ToolResponse(
                success=False,
                result=None,
                error=e.message,
                meta={
                    "request_id": request_id,
                    "error": e.to_response().to_dict(),
                },
            ).model_dump()

        except Exception as e:
            # Console-friendly summary; full traceback at DEBUG goes to the file only
            log.error(
                "tool_internal_error",
                tool=tool_name,
                error=str(e),
                elapsed_ms=_elapsed_ms(start_time),
            )
            log.debug("tool_internal_error_traceback", tool=tool_name, exc_info=True)
            return ToolResponse(
                success=False,
                result=None,
                error=str(e),
                meta={
                    "request_id": request_id,
                    "error": {
                        "kind": MCPErrorCode.INTERNAL_ERROR.value,
                        "message": str(e),
                        "remediation": FALLBACK_REMEDIATION,
                    },
                },
            ).model_dump()

        finally:
            clear_request_id()

    return handler


def _wire_tool(mcp: FastMCP, spec: ToolSpec, context: AppContext) -> None:
    """Wire a single tool spec to FastMCP.

    Passes the params model's dereferenced JSON schema so clients see a flat
    parameter list.
    """
    from fastmcp.tools.tool import FunctionTool

    flat_schema = dereference_refs(spec.params_model.model_json_schema())

    tool = FunctionTool(
        name=spec.name,
        description=spec.description,
        parameters=flat_schema,
        fn=make_tool_handler(spec, context),
    )

    mcp.add_tool(tool)


def run_server(project_root: Path, config: CovMcpConfig) -> None:
    """Create and run the MCP server."""
    from covmcp.config.constants import STATE_DIR_NAME
    from covmcp.config.models import LoggingConfig, LogOutputConfig
    from covmcp.core.logging import configure_logging
    from covmcp.mcp.context import AppContext

    # stdout carries the stdio transport, so the console log goes to stderr.
    # The file gets DEBUG with full tracebacks.
    log_file = project_root / STATE_DIR_NAME / "mcp-server.log"
    configure_logging(
        config=LoggingConfig(
            level="DEBUG",
            outputs=[
                LogOutputConfig(destination="stderr", format="console", level=config.logging.level),
                LogOutputConfig(destination=str(log_file), format="json", level="DEBUG"),
            ],
        )
    )

    log.info(
        "mcp_server_starting",
        project_root=str(project_root),
        transport=config.server.transport,
        log_file=str(log_file),
    )

    context = AppContext.create(project_root, config)
    mcp = create_mcp_server(context)

    log.info("mcp_server_running")
    if config.server.transport == "http":
        mcp.run(transport="http", host=config.server.host, port=config.server.port)
    else:
        mcp.run()
