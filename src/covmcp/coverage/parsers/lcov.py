"""LCOV format parser.

LCOV is a plain text format with one record per source file:
- SF:<source file path>
- DA:<line>,<hit count>[,<checksum>]
- BRDA:<line>,<block>,<branch>,<taken>   ('-' taken means never evaluated)
- LF:<lines found>      LH:<lines hit>
- BRF:<branches found>  BRH:<branches hit>
- FN/FNDA/FNF/FNH function records, MCDC and any other extension (read past)
- end_of_record

Used by: c8/nyc/jest/vitest, pytest-cov, cargo-llvm-cov, gcov/lcov, dart test
"""

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from covmcp.coverage.models import (
    BranchCoverage,
    BranchDetail,
    CoverageParseError,
    CoverageRecord,
    LineCoverage,
    LineDetail,
)

log = structlog.get_logger(__name__)

_RECORD_KEYS = frozenset(
    {
        "TN",
        "VER",
        "SF",
        "DA",
        "BRDA",
        "BRF",
        "BRH",
        "LF",
        "LH",
        "FN",
        "FNL",
        "FNA",
        "FNDA",
        "FNF",
        "FNH",
    }
)
_IGNORED_KEYS = frozenset({"TN", "VER", "FN", "FNL", "FNA", "FNDA", "FNF", "FNH"})
_BRANCH_KEYS = frozenset({"BRDA", "BRF", "BRH"})


def _count(value: str) -> int:
    # '-' is written by gcov-based tools for "never executed"
    return 0 if value == "-" else int(value)


@dataclass
class _PendingRecord:
    """Accumulates one SF..end_of_record block."""

    path: str
    lines: list[LineDetail] = field(default_factory=list)
    branches: list[BranchDetail] = field(default_factory=list)
    has_branch_data: bool = False
    lines_found: int | None = None
    lines_hit: int | None = None
    branches_found: int | None = None
    branches_hit: int | None = None

    def build(self) -> CoverageRecord:
        # LF/LH (BRF/BRH) win over counts derived from the detail lines
        lines = LineCoverage(
            instrumented=(
                self.lines_found if self.lines_found is not None else len(self.lines)
            ),
            hit=(
                self.lines_hit
                if self.lines_hit is not None
                else sum(1 for d in self.lines if d.hits > 0)
            ),
            details=self.lines,
        )
        branches = None
        if self.has_branch_data:
            branches = BranchCoverage(
                instrumented=(
                    self.branches_found
                    if self.branches_found is not None
                    else len(self.branches)
                ),
                hit=(
                    self.branches_hit
                    if self.branches_hit is not None
                    else sum(1 for b in self.branches if b.taken > 0)
                ),
                details=self.branches,
            )
        return CoverageRecord(path=self.path, lines=lines, branches=branches)


class LcovParser:
    """Parser for LCOV format coverage files."""

    @property
    def format_id(self) -> str:
        return "lcov"

    def can_parse(self, path: Path) -> bool:
        """Check if file looks like LCOV.

        LCOV is the text fallback: an empty file counts as an empty report.
        """
        if not path.is_file():
            return False
        if path.suffix in (".info", ".lcov"):
            return True
        try:
            with path.open(encoding="utf-8") as f:
                for line in f:
                    stripped = line.strip()
                    if not stripped or stripped.startswith("#"):
                        continue
                    key, sep, _ = stripped.partition(":")
                    return (bool(sep) and key in _RECORD_KEYS) or stripped == "end_of_record"
        except (OSError, UnicodeDecodeError):
            return False
        return True

    def parse(self, path: Path) -> list[CoverageRecord]:
        """Parse LCOV file into CoverageRecords, in file order.

        Records this parser does not model (functions, MC/DC and other
        extensions) are read past.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CoverageParseError(f"Failed to read LCOV file: {e}") from e

        records: list[CoverageRecord] = []
        current: _PendingRecord | None = None

        for lineno, raw in enumerate(content.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue

            if line == "end_of_record":
                if current is not None:
                    records.append(current.build())
                current = None
                continue

            key, sep, value = line.partition(":")
            if not sep:
                raise CoverageParseError(f"line {lineno}: unrecognized LCOV record {line[:60]!r}")
            if key in _IGNORED_KEYS:
                continue
            if key not in _RECORD_KEYS:
                log.debug("lcov_record_skipped", path=str(path), line=lineno, key=key)
                continue

            if key == "SF":
                # A new SF without end_of_record closes the previous file
                if current is not None:
                    records.append(current.build())
                current = _PendingRecord(path=value)
                continue

            if current is None:
                raise CoverageParseError(f"line {lineno}: {key} record outside of an SF block")

            try:
                self._apply(current, key, value)
            except (ValueError, IndexError) as e:
                raise CoverageParseError(
                    f"line {lineno}: invalid {key} value {value!r}"
                ) from e

        # Handle file without end_of_record
        if current is not None:
            records.append(current.build())

        return records

    @staticmethod
    def _apply(record: _PendingRecord, key: str, value: str) -> None:
        if key == "DA":
            parts = value.split(",")
            record.lines.append(LineDetail(line=int(parts[0]), hits=_count(parts[1])))
        elif key == "BRDA":
            parts = value.split(",")
            if len(parts) < 4:
                raise ValueError("expected line,block,branch,taken")
            record.branches.append(
                BranchDetail(
                    line=int(parts[0]),
                    block=int(parts[1]),
                    branch=int(parts[2]),
                    taken=_count(parts[3]),
                )
            )
        elif key == "LF":
            record.lines_found = int(value)
        elif key == "LH":
            record.lines_hit = int(value)
        elif key == "BRF":
            record.branches_found = int(value)
        elif key == "BRH":
            record.branches_hit = int(value)

        if key in _BRANCH_KEYS:
            record.has_branch_data = True
