"""Single-baseline snapshot store.

One baseline per store location. ``save`` replaces it wholesale by writing a
temp file next to it and renaming over the old one, so entries from an earlier
baseline can never survive into a later one.

There is no locking. Interleaving ``save`` and ``load`` from two concurrent
callers is unsupported; the server handles one tool call at a time.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog

from covmcp.config.constants import BASELINE_FILENAME, BASELINE_SCHEMA_VERSION
from covmcp.core.errors import RecordingError, ReportError
from covmcp.coverage.models import CoverageRecord, Snapshot

log = structlog.get_logger(__name__)


class SnapshotStore:
    """Persists the baseline record set under ``directory``."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    @property
    def path(self) -> Path:
        return self.directory / BASELINE_FILENAME

    def exists(self) -> bool:
        return self.path.is_file()

    def save(self, records: Sequence[CoverageRecord], *, source: str | None = None) -> Snapshot:
        """Replace the current baseline. Last write wins."""
        snapshot = Snapshot(records=list(records), created_at=datetime.now(UTC), source=source)
        payload: dict[str, Any] = {
            "version": BASELINE_SCHEMA_VERSION,
            "created_at": snapshot.created_at.isoformat(),
            "source": source,
            "records": [r.to_dict() for r in snapshot.records],
        }

        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{BASELINE_FILENAME}.", suffix=".tmp", dir=self.directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        log.info("baseline_saved", path=str(self.path), source=source, files=len(records))
        return snapshot

    def load_snapshot(self) -> Snapshot:
        """Read the full baseline.

        Raises:
            RecordingError: NO_BASELINE when nothing has been recorded.
            ReportError: REPORT_PARSE_ERROR when the baseline file is unreadable.
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise RecordingError.no_baseline() from None
        except (OSError, UnicodeDecodeError) as e:
            raise ReportError.parse_error(str(self.path), str(e)) from e

        try:
            payload = json.loads(raw)
            version = payload.get("version")
            if version != BASELINE_SCHEMA_VERSION:
                raise ValueError(f"unsupported baseline version {version!r}")
            snapshot = Snapshot(
                records=[CoverageRecord.from_dict(r) for r in payload["records"]],
                created_at=datetime.fromisoformat(payload["created_at"]),
                source=payload.get("source"),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ReportError.parse_error(str(self.path), f"corrupt baseline: {e}") from e

        log.debug("baseline_loaded", path=str(self.path), files=len(snapshot.records))
        return snapshot

    def load(self) -> list[CoverageRecord]:
        """Baseline records; raises NO_BASELINE when nothing has been recorded."""
        return self.load_snapshot().records

    def clear(self) -> bool:
        """Delete the baseline. Returns whether one existed."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        log.info("baseline_cleared", path=str(self.path))
        return True
