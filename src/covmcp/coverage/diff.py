"""Compare a current report against the stored baseline.

Deltas are taken between the already-rounded one-decimal summaries and then
rounded again to two decimals, not computed from the raw hit ratios.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from covmcp.config.constants import DELTA_DECIMALS
from covmcp.core.errors import RecordingError
from covmcp.coverage.aggregate import round_half_up, summarize, summarize_file
from covmcp.coverage.models import (
    CoverageDelta,
    CoverageRecord,
    FileCoverageChange,
    FileCoverageDiff,
)
from covmcp.coverage.snapshot import SnapshotStore

log = structlog.get_logger(__name__)


class DiffEngine:
    """Signed percentage-point changes between the baseline and a current record set."""

    def __init__(self, store: SnapshotStore) -> None:
        self.store = store

    def _baseline(self) -> list[CoverageRecord]:
        if not self.store.exists():
            raise RecordingError.no_baseline()
        return self.store.load()

    def diff_since_baseline(
        self,
        current: Sequence[CoverageRecord],
        *,
        baseline: Sequence[CoverageRecord] | None = None,
    ) -> CoverageDelta:
        """after - before for lines and branches. Positive means improvement.

        Pass ``baseline`` to compare against records already loaded from the store.

        Raises:
            RecordingError: NO_BASELINE when nothing has been recorded.
        """
        before = summarize(self._baseline() if baseline is None else baseline)
        after = summarize(current)

        delta = CoverageDelta(
            lines_percentage_impact=round_half_up(
                after.lines_coverage_percentage - before.lines_coverage_percentage,
                DELTA_DECIMALS,
            ),
            branches_percentage_impact=round_half_up(
                after.branches_coverage_percentage - before.branches_coverage_percentage,
                DELTA_DECIMALS,
            ),
        )
        log.debug(
            "coverage_diff",
            lines_before=before.lines_coverage_percentage,
            lines_after=after.lines_coverage_percentage,
            branches_before=before.branches_coverage_percentage,
            branches_after=after.branches_coverage_percentage,
            lines_impact=delta.lines_percentage_impact,
            branches_impact=delta.branches_percentage_impact,
        )
        return delta

    def diff_files_since_baseline(
        self,
        current: Sequence[CoverageRecord],
        *,
        baseline: Sequence[CoverageRecord] | None = None,
    ) -> FileCoverageDiff:
        """Per-file line coverage changes, largest absolute change first."""
        if baseline is None:
            baseline = self._baseline()
        before_paths = {r.path for r in baseline}
        after_paths = {r.path for r in current}

        changes = []
        for path in before_paths & after_paths:
            before = summarize_file(baseline, path).lines_coverage_percentage
            after = summarize_file(current, path).lines_coverage_percentage
            changes.append(
                FileCoverageChange(
                    path=path,
                    before=before,
                    after=after,
                    change=round_half_up(after - before, DELTA_DECIMALS),
                )
            )
        changes.sort(key=lambda c: (-abs(c.change), c.path))

        return FileCoverageDiff(
            changes=changes,
            new_files=sorted(after_paths - before_paths),
            removed_files=sorted(before_paths - after_paths),
        )
