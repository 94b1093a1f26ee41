"""Report source resolution."""

from pathlib import Path

from covmcp.config.constants import DEFAULT_REPORT_PATH
from covmcp.core.errors import ReportError


def resolve_report_path(
    ref: str | None = None,
    *,
    default: str = DEFAULT_REPORT_PATH,
    base_dir: Path | None = None,
) -> Path:
    """Resolve a report reference to an absolute path of an existing file.

    Args:
        ref: Absolute or relative path. None falls back to ``default``.
        default: Conventional report location.
        base_dir: Directory relative paths resolve against (cwd when None).

    Raises:
        ReportError: REPORT_NOT_FOUND when nothing exists at the resolved path.
    """
    candidate = Path(ref if ref else default).expanduser()
    if not candidate.is_absolute():
        candidate = (base_dir or Path.cwd()) / candidate
    resolved = candidate.resolve()

    if not resolved.is_file():
        raise ReportError.not_found(str(resolved), default_used=not ref)
    return resolved
