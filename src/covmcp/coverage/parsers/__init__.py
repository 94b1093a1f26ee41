"""Coverage parser registry and auto-detection.

This module provides:
- PARSER_REGISTRY: All available parsers
- detect_parser: Auto-detect format from a report file
- parse_artifact: Resolve, detect and parse in one call, raising ReportError
"""

from collections.abc import Sequence
from pathlib import Path

import structlog

from covmcp.core.errors import ReportError
from covmcp.coverage.models import CoverageParseError, CoverageRecord

from .base import CoverageParser
from .cobertura import CoberturaParser
from .lcov import LcovParser

log = structlog.get_logger(__name__)

# Order matters for detection: XML first, LCOV text is the fallback
PARSER_REGISTRY: Sequence[CoverageParser] = (
    CoberturaParser(),
    LcovParser(),
)

PARSER_BY_FORMAT: dict[str, CoverageParser] = {p.format_id: p for p in PARSER_REGISTRY}

__all__ = [
    "PARSER_REGISTRY",
    "PARSER_BY_FORMAT",
    "detect_parser",
    "parse_artifact",
    "CoverageParser",
    "CoberturaParser",
    "LcovParser",
]


def detect_parser(path: Path) -> CoverageParser | None:
    """Return the first registered parser that claims the file, if any."""
    for parser in PARSER_REGISTRY:
        if parser.can_parse(path):
            return parser
    return None


def parse_artifact(
    path: Path,
    *,
    format_id: str | None = None,
) -> list[CoverageRecord]:
    """Parse a coverage report into CoverageRecords.

    Args:
        path: Path to the report file.
        format_id: Force specific format (skip auto-detection). "auto" or None detects.

    Raises:
        ReportError: REPORT_NOT_FOUND if the file is missing, REPORT_PARSE_ERROR
            if the format is unknown/undetectable or the content is malformed.
    """
    if not path.is_file():
        raise ReportError.not_found(str(path))

    if format_id and format_id != "auto":
        parser = PARSER_BY_FORMAT.get(format_id)
        if not parser:
            valid = ", ".join(sorted(PARSER_BY_FORMAT.keys()))
            raise ReportError.parse_error(
                str(path), f"Unknown coverage format: {format_id!r}. Valid formats: {valid}"
            )
    else:
        parser = detect_parser(path)
        if not parser:
            raise ReportError.parse_error(
                str(path), "Could not detect coverage format. Supported formats: lcov, cobertura"
            )

    try:
        records = parser.parse(path)
    except CoverageParseError as e:
        log.warning("report_parse_failed", path=str(path), format=parser.format_id, error=str(e))
        raise ReportError.parse_error(str(path), str(e)) from e

    log.debug("report_parsed", path=str(path), format=parser.format_id, files=len(records))
    return records
