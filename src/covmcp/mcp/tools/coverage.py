"""Coverage MCP tools - summary handlers.

Read-only tools over the current report:
- coverage_summary: project-wide line/branch percentages
- coverage_file_summary: percentages for one file
- coverage_files_summary: percentages for several files in one read
- coverage_uncovered_lines: unexecuted line numbers for one file
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import Field

from covmcp.mcp.registry import registry
from covmcp.mcp.tools.base import ReportParams

if TYPE_CHECKING:
    from covmcp.mcp.context import AppContext


# =============================================================================
# Parameter Models
# =============================================================================


class CoverageSummaryParams(ReportParams):
    """Parameters for coverage_summary."""


class FileSummaryParams(ReportParams):
    """Parameters for coverage_file_summary."""

    file_path: str = Field(
        ...,
        description="Source file path exactly as it appears in the report (SF: line).",
    )


class FilesSummaryParams(ReportParams):
    """Parameters for coverage_files_summary."""

    file_paths: list[str] = Field(
        ...,
        min_length=1,
        description="Source file paths exactly as they appear in the report.",
    )


class UncoveredLinesParams(ReportParams):
    """Parameters for coverage_uncovered_lines."""

    file_path: str = Field(
        ...,
        description="Source file path exactly as it appears in the report (SF: line).",
    )


# =============================================================================
# Tool Handlers
# =============================================================================


@registry.register(
    "coverage_summary",
    "Get a simplified coverage summary: overall line and branch coverage "
    "percentages of the project, rounded to one decimal place.",
    CoverageSummaryParams,
)
async def coverage_summary(ctx: AppContext, params: CoverageSummaryParams) -> dict[str, Any]:
    return ctx.coverage.get_overall_summary(params.lcov_path).to_dict()


@registry.register(
    "coverage_file_summary",
    "Get line and branch coverage percentages for a specific file. "
    "A file that is not in the report returns 0 for both.",
    FileSummaryParams,
)
async def coverage_file_summary(ctx: AppContext, params: FileSummaryParams) -> dict[str, Any]:
    summary = ctx.coverage.get_file_summary(params.lcov_path, params.file_path)
    return summary.to_dict()


@registry.register(
    "coverage_files_summary",
    "Get line and branch coverage percentages for several files from a single read of the report.",
    FilesSummaryParams,
)
async def coverage_files_summary(ctx: AppContext, params: FilesSummaryParams) -> dict[str, Any]:
    summaries = ctx.coverage.get_files_summary(params.lcov_path, params.file_paths)
    return {"files": [s.to_dict() for s in summaries]}


@registry.register(
    "coverage_uncovered_lines",
    "List the line numbers of a file that were instrumented but never executed.",
    UncoveredLinesParams,
)
async def coverage_uncovered_lines(
    ctx: AppContext, params: UncoveredLinesParams
) -> dict[str, Any]:
    return ctx.coverage.get_uncovered_lines(params.lcov_path, params.file_path)
