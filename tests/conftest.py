"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages, and
provides LCOV report builders shared by all test packages.
"""

import os
import sys
from collections.abc import Callable, Iterator, Mapping, Sequence
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local covmcp package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of covmcp modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("covmcp"):
        del sys.modules[module_name]


def lcov_record(
    path: str,
    lines: Mapping[int, int],
    branches: Sequence[int] | None = None,
) -> str:
    """Render one SF..end_of_record block.

    Args:
        path: SF value.
        lines: line number -> hit count.
        branches: taken count per branch (all on line 1, block 0); None omits branch data.
    """
    out = [f"SF:{path}"]
    out.extend(f"DA:{n},{h}" for n, h in lines.items())
    out.append(f"LF:{len(lines)}")
    out.append(f"LH:{sum(1 for h in lines.values() if h > 0)}")
    if branches is not None:
        out.extend(f"BRDA:1,0,{i},{t}" for i, t in enumerate(branches))
        out.append(f"BRF:{len(branches)}")
        out.append(f"BRH:{sum(1 for t in branches if t > 0)}")
    out.append("end_of_record")
    return "\n".join(out) + "\n"


@pytest.fixture
def write_report(tmp_path: Path) -> Callable[..., Path]:
    """Write report text under tmp_path and return its path."""

    def _write(content: str, name: str = "coverage/lcov.info") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def half_covered_report(write_report: Callable[..., Path]) -> Path:
    """One file, 4 instrumented lines, 2 hit, no branch data."""
    return write_report(lcov_record("src/app.ts", {1: 1, 2: 1, 3: 0, 4: 0}))


@pytest.fixture
def fully_covered_report(write_report: Callable[..., Path]) -> Path:
    """One file, 4 lines all hit, 4 branches with 3 taken."""
    return write_report(
        lcov_record("src/app.ts", {1: 3, 2: 1, 3: 1, 4: 2}, branches=[1, 2, 1, 0]),
        name="coverage/full.info",
    )


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep the user's global config and COVMCP__* env vars out of tests."""
    monkeypatch.setattr(
        "covmcp.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global-config-missing.yaml"
    )
    for key in list(os.environ):
        if key.upper().startswith("COVMCP__"):
            monkeypatch.delenv(key)
    yield


@pytest.fixture
def make_lcov() -> Callable[..., str]:
    """The lcov_record builder, for tests that compose their own reports."""
    return lcov_record
