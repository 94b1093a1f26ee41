"""Coverage facade: resolve -> parse -> aggregate/diff.

The single entry point for the MCP tools and the CLI. It owns no computation;
every method resolves a report reference, parses it, and hands the records to
the aggregator or the diff engine. Failures surface as ReportError or
RecordingError for the caller to translate.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from covmcp.config.constants import DEFAULT_REPORT_PATH
from covmcp.core.errors import RecordingError
from covmcp.coverage import aggregate
from covmcp.coverage.diff import DiffEngine
from covmcp.coverage.models import (
    CoverageDelta,
    CoverageRecord,
    CoverageSummary,
    FileCoverageDiff,
    FileCoverageSummary,
    Snapshot,
)
from covmcp.coverage.parsers import parse_artifact
from covmcp.coverage.resolver import resolve_report_path
from covmcp.coverage.snapshot import SnapshotStore

if TYPE_CHECKING:
    from covmcp.config.models import CovMcpConfig

log = structlog.get_logger(__name__)


class CoverageFacade:
    """Coverage operations bound to one snapshot store and report defaults."""

    def __init__(
        self,
        store: SnapshotStore,
        *,
        default_report_path: str = DEFAULT_REPORT_PATH,
        base_dir: Path | None = None,
        format_id: str | None = None,
    ) -> None:
        self.store = store
        self.default_report_path = default_report_path
        self.base_dir = base_dir
        self.format_id = format_id
        self.diff_engine = DiffEngine(store)

    @classmethod
    def from_config(cls, config: CovMcpConfig, base_dir: Path) -> CoverageFacade:
        recording_dir = Path(config.recording.directory).expanduser()
        if not recording_dir.is_absolute():
            recording_dir = base_dir / recording_dir
        return cls(
            SnapshotStore(recording_dir),
            default_report_path=config.coverage.default_report_path,
            base_dir=base_dir,
            format_id=config.coverage.format,
        )

    def _load_records(self, source_ref: str | None) -> tuple[Path, list[CoverageRecord]]:
        path = resolve_report_path(
            source_ref, default=self.default_report_path, base_dir=self.base_dir
        )
        records = parse_artifact(path, format_id=self.format_id)
        log.debug("report_loaded", path=str(path), files=len(records))
        return path, records

    # -------------------------------------------------------------------------
    # Summaries
    # -------------------------------------------------------------------------

    def get_overall_summary(self, source_ref: str | None = None) -> CoverageSummary:
        _, records = self._load_records(source_ref)
        return aggregate.summarize(records)

    def get_file_summary(self, source_ref: str | None, file_path: str) -> FileCoverageSummary:
        """Summary for one file. A path absent from the report yields zeros, not an error."""
        _, records = self._load_records(source_ref)
        summary = aggregate.summarize_file(records, file_path)
        if aggregate.find_record(records, file_path) is None:
            log.debug("file_not_in_report", file_path=file_path)
        return summary

    def get_files_summary(
        self, source_ref: str | None, file_paths: Sequence[str]
    ) -> list[FileCoverageSummary]:
        _, records = self._load_records(source_ref)
        return aggregate.summarize_files(records, file_paths)

    def get_uncovered_lines(self, source_ref: str | None, file_path: str) -> dict[str, Any]:
        """Line-level detail for one file: counts plus the unexecuted line numbers."""
        _, records = self._load_records(source_ref)
        return _uncovered_detail(records, file_path)

    def get_files_detail(
        self, source_ref: str | None, file_paths: Sequence[str]
    ) -> tuple[list[FileCoverageSummary], list[dict[str, Any]]]:
        """Summaries and uncovered-line detail for several files from one read of the report."""
        _, records = self._load_records(source_ref)
        summaries = aggregate.summarize_files(records, file_paths)
        return summaries, [_uncovered_detail(records, p) for p in file_paths]

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def start_recording(self, source_ref: str | None = None) -> Snapshot:
        """Snapshot the report as the new baseline, replacing any previous one."""
        path, records = self._load_records(source_ref)
        snapshot = self.store.save(records, source=str(path))
        log.info("recording_started", source=str(path), files=len(records))
        return snapshot

    def get_diff_since_start(self, source_ref: str | None = None) -> CoverageDelta:
        # Baseline first: a missing baseline wins over a missing report
        if not self.store.exists():
            raise RecordingError.no_baseline()
        _, records = self._load_records(source_ref)
        return self.diff_engine.diff_since_baseline(records)

    def get_file_diff_since_start(self, source_ref: str | None = None) -> FileCoverageDiff:
        if not self.store.exists():
            raise RecordingError.no_baseline()
        _, records = self._load_records(source_ref)
        return self.diff_engine.diff_files_since_baseline(records)

    def get_full_diff_since_start(
        self, source_ref: str | None = None
    ) -> tuple[CoverageDelta, FileCoverageDiff]:
        """Overall delta and per-file changes from one baseline load and one report read."""
        if not self.store.exists():
            raise RecordingError.no_baseline()
        baseline = self.store.load()
        _, records = self._load_records(source_ref)
        return (
            self.diff_engine.diff_since_baseline(records, baseline=baseline),
            self.diff_engine.diff_files_since_baseline(records, baseline=baseline),
        )

    def recording_status(self) -> dict[str, Any]:
        if not self.store.exists():
            return {"recording": False}
        snapshot = self.store.load_snapshot()
        return {
            "recording": True,
            "createdAt": snapshot.created_at.isoformat(),
            "source": snapshot.source,
            "files": len(snapshot.records),
        }

    def clear_recording(self) -> bool:
        return self.store.clear()


def _uncovered_detail(records: Sequence[CoverageRecord], file_path: str) -> dict[str, Any]:
    record = aggregate.find_record(records, file_path)
    if record is None:
        return {
            "path": file_path,
            "totalLines": 0,
            "coveredLines": 0,
            "uncoveredLines": [],
            "linesCoveragePercentage": 0.0,
        }
    return {
        "path": file_path,
        "totalLines": record.lines.instrumented,
        "coveredLines": record.lines.hit,
        "uncoveredLines": record.uncovered_lines,
        "linesCoveragePercentage": aggregate.summarize_file(
            records, file_path
        ).lines_coverage_percentage,
    }
