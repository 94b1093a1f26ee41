"""Cobertura XML format parser.

Cobertura XML is emitted by coverage.py (``coverage xml``), coverlet, and
gocover-cobertura, among others:

<coverage line-rate="0.85" branch-rate="0.50" ...>
  <packages>
    <package name="...">
      <classes>
        <class name="..." filename="..." line-rate="...">
          <lines>
            <line number="1" hits="1"/>
            <line number="2" hits="0" branch="true" condition-coverage="50% (1/2)"/>
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>

A file may be split across several <class> elements; their lines are merged
with max-hit semantics.
"""

import re
import xml.etree.ElementTree as ET
from pathlib import Path

from covmcp.coverage.models import (
    BranchCoverage,
    BranchDetail,
    CoverageParseError,
    CoverageRecord,
    LineCoverage,
    LineDetail,
)

_CONDITION_RE = re.compile(r"\((\d+)/(\d+)\)")


class CoberturaParser:
    """Parser for Cobertura XML format."""

    @property
    def format_id(self) -> str:
        return "cobertura"

    def can_parse(self, path: Path) -> bool:
        """Check for a <coverage> root carrying line-rate (rules out Clover/JaCoCo)."""
        if not path.is_file():
            return False
        try:
            with path.open("rb") as f:
                header = f.read(2048).decode("utf-8", errors="ignore")
        except OSError:
            return False
        return (
            "<coverage" in header
            and "line-rate=" in header
            and "<CoverletCoverage" not in header
            and "<report name=" not in header
        )

    def parse(self, path: Path) -> list[CoverageRecord]:
        """Parse Cobertura XML into CoverageRecords, in first-seen file order."""
        try:
            tree = ET.parse(path)
        except ET.ParseError as e:
            raise CoverageParseError(f"Invalid Cobertura XML: {e}") from e
        except OSError as e:
            raise CoverageParseError(f"Failed to read Cobertura file: {e}") from e

        root = tree.getroot()

        # Strip namespace if present
        for elem in root.iter():
            if "}" in elem.tag:
                elem.tag = elem.tag.split("}", 1)[1]

        lines_by_file: dict[str, dict[int, int]] = {}
        branches_by_file: dict[str, dict[int, tuple[int, int]]] = {}

        for cls in root.findall(".//class"):
            filename = cls.get("filename", "")
            if not filename:
                continue

            file_lines = lines_by_file.setdefault(filename, {})

            # Class-level lines only; method-level lines repeat them
            for line in cls.findall("./lines/line"):
                try:
                    line_num = int(line.get("number", ""))
                    hits = int(line.get("hits", "0"))
                except ValueError as e:
                    snippet = ET.tostring(line, encoding="unicode")[:80]
                    raise CoverageParseError(f"Invalid <line> in {filename}: {snippet}") from e
                file_lines[line_num] = max(file_lines.get(line_num, 0), hits)

                if line.get("branch") == "true":
                    match = _CONDITION_RE.search(line.get("condition-coverage", ""))
                    if match:
                        taken, total = int(match.group(1)), int(match.group(2))
                        file_branches = branches_by_file.setdefault(filename, {})
                        prev_taken, prev_total = file_branches.get(line_num, (0, 0))
                        file_branches[line_num] = (max(prev_taken, taken), max(prev_total, total))

        records = []
        for filename, file_lines in lines_by_file.items():
            line_details = [LineDetail(line=n, hits=h) for n, h in sorted(file_lines.items())]
            branches = None
            if filename in branches_by_file:
                branch_details = [
                    BranchDetail(line=n, block=0, branch=i, taken=1 if i < taken else 0)
                    for n, (taken, total) in sorted(branches_by_file[filename].items())
                    for i in range(total)
                ]
                branches = BranchCoverage(
                    instrumented=len(branch_details),
                    hit=sum(1 for b in branch_details if b.taken > 0),
                    details=branch_details,
                )
            records.append(
                CoverageRecord(
                    path=filename,
                    lines=LineCoverage(
                        instrumented=len(line_details),
                        hit=sum(1 for d in line_details if d.hits > 0),
                        details=line_details,
                    ),
                    branches=branches,
                )
            )
        return records
