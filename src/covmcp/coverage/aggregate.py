"""Reduce CoverageRecords to percentage summaries.

Rules:
- Overall line percentage = sum(hit) / sum(instrumented) over all records.
- Branch percentage only counts records that carry branch data; with none,
  it is exactly 0 (never NaN, never 100).
- Zero instrumented lines (including an empty report) yields {0, 0}.
- Percentages round half-up to one decimal.

A path missing from the report summarizes to zeros, the same as a file with
0% coverage. Callers cannot tell the two apart from the summary alone.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from covmcp.config.constants import SUMMARY_DECIMALS
from covmcp.coverage.models import CoverageRecord, CoverageSummary, FileCoverageSummary

ZERO_SUMMARY = CoverageSummary(lines_coverage_percentage=0.0, branches_coverage_percentage=0.0)


def round_half_up(value: float, decimals: int) -> float:
    """Round with ties going up (2.25 -> 2.3), unlike the builtin round()."""
    factor = 10**decimals
    return math.floor(value * factor + 0.5) / factor


def percentage(hit: int, instrumented: int) -> float:
    """hit/instrumented as a percentage at summary precision; 0 when nothing is instrumented."""
    if instrumented == 0:
        return 0.0
    return round_half_up(hit / instrumented * 100, SUMMARY_DECIMALS)


def branch_percentage(records: Iterable[CoverageRecord]) -> float:
    instrumented = 0
    hit = 0
    for record in records:
        if record.branches is not None:
            instrumented += record.branches.instrumented
            hit += record.branches.hit
    return percentage(hit, instrumented)


def summarize(records: Sequence[CoverageRecord]) -> CoverageSummary:
    """Overall summary across every record in a report."""
    if not records:
        return ZERO_SUMMARY

    instrumented = sum(r.lines.instrumented for r in records)
    hit = sum(r.lines.hit for r in records)
    if instrumented == 0:
        return ZERO_SUMMARY

    return CoverageSummary(
        lines_coverage_percentage=percentage(hit, instrumented),
        branches_coverage_percentage=branch_percentage(records),
    )


def find_record(records: Iterable[CoverageRecord], path: str) -> CoverageRecord | None:
    """First record whose path matches exactly."""
    return next((r for r in records if r.path == path), None)


def summarize_file(records: Sequence[CoverageRecord], path: str) -> FileCoverageSummary:
    """Summary for one file; zeros when the file is absent or has no instrumented lines."""
    record = find_record(records, path)
    if record is None or record.lines.instrumented == 0:
        return FileCoverageSummary(
            path=path, lines_coverage_percentage=0.0, branches_coverage_percentage=0.0
        )

    return FileCoverageSummary(
        path=path,
        lines_coverage_percentage=percentage(record.lines.hit, record.lines.instrumented),
        branches_coverage_percentage=branch_percentage([record]),
    )


def summarize_files(
    records: Sequence[CoverageRecord], paths: Iterable[str]
) -> list[FileCoverageSummary]:
    """One summary per requested path, in request order."""
    return [summarize_file(records, path) for path in paths]
