"""Recording MCP tools - baseline snapshot and diff handlers.

Typical flow: start_recording before a change, regenerate the report after it,
then get_diff_since_start to see the percentage-point impact.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from covmcp.coverage.aggregate import summarize
from covmcp.mcp.registry import registry
from covmcp.mcp.tools.base import BaseParams, ReportParams

if TYPE_CHECKING:
    from covmcp.mcp.context import AppContext


class StartRecordingParams(ReportParams):
    """Parameters for start_recording."""


class DiffParams(ReportParams):
    """Parameters for get_diff_since_start and get_file_diff_since_start."""


class RecordingStatusParams(BaseParams):
    """Parameters for recording_status (none)."""


class ClearRecordingParams(BaseParams):
    """Parameters for clear_recording (none)."""


@registry.register(
    "start_recording",
    "Record the current coverage report as the baseline for later comparison. "
    "Replaces any previous baseline and returns its overall coverage.",
    StartRecordingParams,
)
async def start_recording(ctx: AppContext, params: StartRecordingParams) -> dict[str, Any]:
    snapshot = ctx.coverage.start_recording(params.lcov_path)
    return {
        "message": "Recording started",
        "recordedAt": snapshot.created_at.isoformat(),
        "source": snapshot.source,
        "files": len(snapshot.records),
        "baselineCoverage": summarize(snapshot.records).to_dict(),
    }


@registry.register(
    "get_diff_since_start",
    "Compare the current coverage report with the recorded baseline. Returns the "
    "signed percentage-point change in line and branch coverage (two decimals).",
    DiffParams,
)
async def get_diff_since_start(ctx: AppContext, params: DiffParams) -> dict[str, Any]:
    return ctx.coverage.get_diff_since_start(params.lcov_path).to_dict()


@registry.register(
    "get_file_diff_since_start",
    "Per-file line coverage changes since the recorded baseline, largest change "
    "first, plus files added to or removed from the report.",
    DiffParams,
)
async def get_file_diff_since_start(ctx: AppContext, params: DiffParams) -> dict[str, Any]:
    return ctx.coverage.get_file_diff_since_start(params.lcov_path).to_dict()


@registry.register(
    "recording_status",
    "Report whether a baseline is recorded, and when and from which report.",
    RecordingStatusParams,
)
async def recording_status(
    ctx: AppContext,
    params: RecordingStatusParams,  # noqa: ARG001
) -> dict[str, Any]:
    return ctx.coverage.recording_status()


@registry.register(
    "clear_recording",
    "Delete the recorded baseline. Diffs fail with NO_BASELINE until the next start_recording.",
    ClearRecordingParams,
)
async def clear_recording(
    ctx: AppContext,
    params: ClearRecordingParams,  # noqa: ARG001
) -> dict[str, Any]:
    return {"cleared": ctx.coverage.clear_recording()}
