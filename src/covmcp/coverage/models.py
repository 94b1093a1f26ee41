"""Normalized coverage data model.

File-centric model: one CoverageRecord per source file, carrying line and
(optionally) branch hit data. Every report format converts to this shape, and
everything downstream (aggregation, baselines, diffs) consumes only this shape.

Counts are taken as given. A record whose ``hit`` exceeds ``instrumented`` is
kept as-is; consumers compute from it deterministically rather than reject it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


class CoverageParseError(Exception):
    """Report content could not be turned into CoverageRecords."""

    pass


@dataclass(frozen=True, slots=True)
class LineDetail:
    """Hit count for one instrumented line (1-based)."""

    line: int
    hits: int


@dataclass(frozen=True, slots=True)
class BranchDetail:
    """One branch outcome at a line (e.g., the else arm of an if)."""

    line: int
    block: int
    branch: int
    taken: int


@dataclass(slots=True)
class LineCoverage:
    """Line counts for a file."""

    instrumented: int = 0
    hit: int = 0
    details: list[LineDetail] = field(default_factory=list)


@dataclass(slots=True)
class BranchCoverage:
    """Branch counts for a file."""

    instrumented: int = 0
    hit: int = 0
    details: list[BranchDetail] = field(default_factory=list)


@dataclass(slots=True)
class CoverageRecord:
    """Coverage data for a single source file.

    ``branches`` is None when the report carries no branch instrumentation
    for the file, which is different from a file with zero branches.
    """

    path: str
    lines: LineCoverage = field(default_factory=LineCoverage)
    branches: BranchCoverage | None = None

    @property
    def uncovered_lines(self) -> list[int]:
        """Sorted line numbers with zero hits."""
        return sorted(d.line for d in self.lines.details if d.hits == 0)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "path": self.path,
            "lines": {
                "instrumented": self.lines.instrumented,
                "hit": self.lines.hit,
                "details": [[d.line, d.hits] for d in self.lines.details],
            },
        }
        if self.branches is not None:
            data["branches"] = {
                "instrumented": self.branches.instrumented,
                "hit": self.branches.hit,
                "details": [[d.line, d.block, d.branch, d.taken] for d in self.branches.details],
            }
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CoverageRecord:
        lines = data["lines"]
        branches = data.get("branches")
        return cls(
            path=data["path"],
            lines=LineCoverage(
                instrumented=int(lines["instrumented"]),
                hit=int(lines["hit"]),
                details=[LineDetail(line=int(ln), hits=int(h)) for ln, h in lines["details"]],
            ),
            branches=(
                BranchCoverage(
                    instrumented=int(branches["instrumented"]),
                    hit=int(branches["hit"]),
                    details=[
                        BranchDetail(line=int(ln), block=int(b), branch=int(br), taken=int(t))
                        for ln, b, br, t in branches["details"]
                    ],
                )
                if branches is not None
                else None
            ),
        )


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Line/branch percentages, each rounded to one decimal place."""

    lines_coverage_percentage: float
    branches_coverage_percentage: float

    def to_dict(self) -> dict[str, float]:
        return {
            "linesCoveragePercentage": self.lines_coverage_percentage,
            "branchesCoveragePercentage": self.branches_coverage_percentage,
        }


@dataclass(frozen=True, slots=True)
class FileCoverageSummary:
    """Summary for one file, keyed by the path that was asked for."""

    path: str
    lines_coverage_percentage: float
    branches_coverage_percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "linesCoveragePercentage": self.lines_coverage_percentage,
            "branchesCoveragePercentage": self.branches_coverage_percentage,
        }


@dataclass(frozen=True, slots=True)
class CoverageDelta:
    """Signed percentage-point change (after - before), two decimal places."""

    lines_percentage_impact: float
    branches_percentage_impact: float

    def to_dict(self) -> dict[str, float]:
        return {
            "linesPercentageImpact": self.lines_percentage_impact,
            "branchesPercentageImpact": self.branches_percentage_impact,
        }


@dataclass(frozen=True, slots=True)
class FileCoverageChange:
    """Line coverage of one file in the baseline and in the current report."""

    path: str
    before: float
    after: float
    change: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "beforePercentage": self.before,
            "afterPercentage": self.after,
            "changePercentage": self.change,
        }


@dataclass(slots=True)
class FileCoverageDiff:
    """Per-file view of a baseline comparison."""

    changes: list[FileCoverageChange] = field(default_factory=list)
    new_files: list[str] = field(default_factory=list)
    removed_files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileChanges": [c.to_dict() for c in self.changes],
            "newFiles": list(self.new_files),
            "removedFiles": list(self.removed_files),
        }


@dataclass(slots=True)
class Snapshot:
    """The stored baseline: a full record set plus when and where it came from."""

    records: list[CoverageRecord]
    created_at: datetime
    source: str | None = None
