"""Tests for the LCOV parser.

Covers:
- record fields (SF, DA, BRDA, LF/LH, BRF/BRH)
- summary counts vs detail-derived counts
- function records read past
- malformed input
- format sniffing
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from covmcp.coverage.models import CoverageParseError
from covmcp.coverage.parsers import LcovParser


@pytest.fixture
def parser() -> LcovParser:
    return LcovParser()


class TestLcovParse:
    """Tests for LcovParser.parse."""

    def test_parses_lines_and_branches(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        path = write_report(
            "TN:\n"
            "SF:src/app.ts\n"
            "DA:1,5\n"
            "DA:2,0\n"
            "DA:3,1\n"
            "BRDA:2,0,0,1\n"
            "BRDA:2,0,1,-\n"
            "BRF:2\n"
            "BRH:1\n"
            "LF:3\n"
            "LH:2\n"
            "end_of_record\n"
        )

        records = parser.parse(path)

        assert len(records) == 1
        record = records[0]
        assert record.path == "src/app.ts"
        assert record.lines.instrumented == 3
        assert record.lines.hit == 2
        assert record.uncovered_lines == [2]
        assert record.branches is not None
        assert record.branches.instrumented == 2
        assert record.branches.hit == 1
        assert [b.taken for b in record.branches.details] == [1, 0]

    def test_multiple_records_in_file_order(
        self, parser: LcovParser, write_report: Callable[..., Path], make_lcov: Callable[..., str]
    ) -> None:
        path = write_report(make_lcov("b.ts", {1: 1}) + make_lcov("a.ts", {1: 0}))

        records = parser.parse(path)

        assert [r.path for r in records] == ["b.ts", "a.ts"]

    def test_summary_counts_win_over_details(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        """LF/LH are taken as given even when DA lines disagree."""
        path = write_report("SF:x.ts\nDA:1,1\nLF:10\nLH:7\nend_of_record\n")

        record = parser.parse(path)[0]

        assert record.lines.instrumented == 10
        assert record.lines.hit == 7

    def test_counts_derived_when_summary_missing(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        path = write_report("SF:x.ts\nDA:1,1\nDA:2,0\nDA:3,4\nBRDA:1,0,0,0\nend_of_record\n")

        record = parser.parse(path)[0]

        assert record.lines.instrumented == 3
        assert record.lines.hit == 2
        assert record.branches is not None
        assert record.branches.instrumented == 1
        assert record.branches.hit == 0

    def test_no_branch_data_means_none(
        self, parser: LcovParser, write_report: Callable[..., Path], make_lcov: Callable[..., str]
    ) -> None:
        """A file without BRDA/BRF/BRH has no branch section at all."""
        path = write_report(make_lcov("x.ts", {1: 1}))

        assert parser.parse(path)[0].branches is None

    def test_zero_branches_found_is_not_none(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        path = write_report("SF:x.ts\nDA:1,1\nBRF:0\nBRH:0\nend_of_record\n")

        branches = parser.parse(path)[0].branches

        assert branches is not None
        assert branches.instrumented == 0

    def test_function_records_are_ignored(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        path = write_report(
            "SF:x.ts\nFN:1,main\nFNDA:3,main\nFNF:1\nFNH:1\nDA:1,3\nLF:1\nLH:1\nend_of_record\n"
        )

        record = parser.parse(path)[0]

        assert record.lines.instrumented == 1
        assert record.lines.hit == 1

    def test_da_checksum_is_ignored(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        path = write_report("SF:x.ts\nDA:4,2,abcdef\nend_of_record\n")

        detail = parser.parse(path)[0].lines.details[0]

        assert (detail.line, detail.hits) == (4, 2)

    def test_missing_end_of_record_still_closes_file(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        path = write_report("SF:a.ts\nDA:1,1\nSF:b.ts\nDA:1,0\n")

        records = parser.parse(path)

        assert [r.path for r in records] == ["a.ts", "b.ts"]

    def test_empty_file_is_empty_report(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        assert parser.parse(write_report("")) == []

    def test_absolute_paths_kept_as_recorded(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        path = write_report("SF:/repo/src/app.ts\nDA:1,1\nend_of_record\n")

        assert parser.parse(path)[0].path == "/repo/src/app.ts"

    def test_unknown_extension_records_are_skipped(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        """MC/DC and other newer geninfo records do not fail the report."""
        path = write_report(
            "TN:\nSF:src/a.ts\nDA:1,1\nDA:2,0\nMCDC:1,2,t,1,1,a\nXYZ:whatever\n"
            "LF:2\nLH:1\nend_of_record\n"
        )

        record = parser.parse(path)[0]

        assert record.path == "src/a.ts"
        assert (record.lines.instrumented, record.lines.hit) == (2, 1)
        assert record.branches is None


class TestLcovParseErrors:
    """Malformed LCOV input."""

    @pytest.mark.parametrize(
        ("content", "fragment"),
        [
            ("SF:x.ts\nDA:one,1\nend_of_record\n", "invalid DA"),
            ("SF:x.ts\nDA:1\nend_of_record\n", "invalid DA"),
            ("SF:x.ts\nBRDA:1,0\nend_of_record\n", "invalid BRDA"),
            ("SF:x.ts\nLF:many\nend_of_record\n", "invalid LF"),
            ("DA:1,1\n", "outside of an SF block"),
            ("SF:x.ts\nthis is not lcov\n", "unrecognized LCOV record"),
        ],
    )
    def test_raises_with_line_number(
        self,
        parser: LcovParser,
        write_report: Callable[..., Path],
        content: str,
        fragment: str,
    ) -> None:
        path = write_report(content)

        with pytest.raises(CoverageParseError, match=fragment) as exc_info:
            parser.parse(path)
        assert "line " in str(exc_info.value)


class TestLcovCanParse:
    """Tests for LcovParser.can_parse."""

    def test_accepts_info_extension(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        assert parser.can_parse(write_report("anything", name="report.info"))

    def test_sniffs_content(self, parser: LcovParser, write_report: Callable[..., Path]) -> None:
        assert parser.can_parse(write_report("TN:\nSF:a.ts\n", name="report.txt"))

    def test_rejects_other_text(
        self, parser: LcovParser, write_report: Callable[..., Path]
    ) -> None:
        assert not parser.can_parse(write_report("hello world\n", name="notes.txt"))

    def test_rejects_missing_file(self, parser: LcovParser, tmp_path: Path) -> None:
        assert not parser.can_parse(tmp_path / "missing.info")
