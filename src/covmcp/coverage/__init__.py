"""Coverage computation and baseline diffing.

Usage:
    from covmcp.coverage import CoverageFacade, SnapshotStore

    facade = CoverageFacade(SnapshotStore(Path(".covmcp/recording")))
    facade.get_overall_summary("coverage/lcov.info")
    facade.start_recording()
    ...  # change code, rerun tests
    facade.get_diff_since_start()

Supported formats:
    - lcov: c8/nyc/jest/vitest, pytest-cov, cargo-llvm-cov, gcov
    - cobertura: coverage.py, coverlet, gocover-cobertura
"""

from covmcp.coverage.aggregate import (
    round_half_up,
    summarize,
    summarize_file,
    summarize_files,
)
from covmcp.coverage.diff import DiffEngine
from covmcp.coverage.facade import CoverageFacade
from covmcp.coverage.models import (
    BranchCoverage,
    BranchDetail,
    CoverageDelta,
    CoverageParseError,
    CoverageRecord,
    CoverageSummary,
    FileCoverageChange,
    FileCoverageDiff,
    FileCoverageSummary,
    LineCoverage,
    LineDetail,
    Snapshot,
)
from covmcp.coverage.parsers import (
    PARSER_BY_FORMAT,
    PARSER_REGISTRY,
    CoverageParser,
    detect_parser,
    parse_artifact,
)
from covmcp.coverage.resolver import resolve_report_path
from covmcp.coverage.snapshot import SnapshotStore

__all__ = [
    # Models
    "BranchCoverage",
    "BranchDetail",
    "CoverageDelta",
    "CoverageParseError",
    "CoverageRecord",
    "CoverageSummary",
    "FileCoverageChange",
    "FileCoverageDiff",
    "FileCoverageSummary",
    "LineCoverage",
    "LineDetail",
    "Snapshot",
    # Parsers
    "CoverageParser",
    "PARSER_BY_FORMAT",
    "PARSER_REGISTRY",
    "detect_parser",
    "parse_artifact",
    "resolve_report_path",
    # Aggregation
    "round_half_up",
    "summarize",
    "summarize_file",
    "summarize_files",
    # Recording
    "DiffEngine",
    "SnapshotStore",
    "CoverageFacade",
]
