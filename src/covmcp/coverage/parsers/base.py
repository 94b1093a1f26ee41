"""Coverage parser protocol."""

from pathlib import Path
from typing import Protocol

from covmcp.coverage.models import CoverageRecord


class CoverageParser(Protocol):
    """Protocol for coverage format parsers.

    Each parser handles one report format and converts it to the normalized
    CoverageRecord list. Anything satisfying this protocol can back the facade.
    """

    @property
    def format_id(self) -> str:
        """Format identifier (e.g., 'lcov', 'cobertura')."""
        ...

    def can_parse(self, path: Path) -> bool:
        """Check if this parser can handle the given file.

        Uses extension and content sniffing for auto-detection.
        """
        ...

    def parse(self, path: Path) -> list[CoverageRecord]:
        """Parse a coverage file into normalized records.

        File paths are kept exactly as the report records them.

        Raises:
            CoverageParseError: If the content is malformed.
        """
        ...
