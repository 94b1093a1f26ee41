"""Tests for core/progress.py module.

Covers:
- status() styling and indentation
- pluralize()
- spinner() on TTY and non-TTY stderr
- suppress_console_logs() and ConsoleSuppressingFilter
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest

from covmcp.core.logging import ConsoleSuppressingFilter
from covmcp.core.progress import (
    _STYLES,
    get_console,
    is_console_suppressed,
    pluralize,
    spinner,
    status,
    suppress_console_logs,
)


class TestStatus:
    """Tests for status function."""

    def test_success_style(self) -> None:
        """Applies success style."""
        with patch("covmcp.core.progress._console") as mock_console:
            status("Done", style="success")
            call_args = mock_console.print.call_args[0][0]
            assert "✓" in call_args
            assert call_args.endswith("Done")

    def test_unknown_style_has_no_prefix(self) -> None:
        with patch("covmcp.core.progress._console") as mock_console:
            status("Plain", style="bogus")
            assert mock_console.print.call_args[0][0] == "Plain"

    def test_with_indent(self) -> None:
        """Applies indentation."""
        with patch("covmcp.core.progress._console") as mock_console:
            status("Indented", style="none", indent=4)
            assert mock_console.print.call_args[0][0] == "    Indented"

    def test_styles(self) -> None:
        assert set(_STYLES) == {"success", "error", "info", "warning", "none"}


class TestPluralize:
    """Tests for pluralize function."""

    @pytest.mark.parametrize(
        ("count", "expected"),
        [(0, "0 files"), (1, "1 file"), (2, "2 files")],
    )
    def test_default_plural(self, count: int, expected: str) -> None:
        assert pluralize(count, "file") == expected

    def test_custom_plural(self) -> None:
        assert pluralize(3, "branch", "branches") == "3 branches"


class TestSpinner:
    """Tests for spinner context manager."""

    def test_non_tty_prints_plain_line(self) -> None:
        with (
            patch("covmcp.core.progress._is_tty", return_value=False),
            patch("covmcp.core.progress._console") as mock_console,
            spinner("Parsing report"),
        ):
            assert is_console_suppressed() is False

        mock_console.print.assert_called_once_with("Parsing report...", highlight=False)

    def test_tty_suppresses_console_logs(self) -> None:
        mock_console = MagicMock()
        with (
            patch("covmcp.core.progress._is_tty", return_value=True),
            patch("covmcp.core.progress._console", mock_console),
            spinner("Parsing report"),
        ):
            assert is_console_suppressed() is True

        assert is_console_suppressed() is False
        mock_console.status.assert_called_once()

    def test_exception_propagates(self) -> None:
        with (
            patch("covmcp.core.progress._is_tty", return_value=False),
            patch("covmcp.core.progress._console"),
            pytest.raises(ValueError, match="boom"),
            spinner("Parsing report"),
        ):
            raise ValueError("boom")


class TestSuppressConsoleLogs:
    """Tests for suppress_console_logs and the console filter."""

    def test_filter_follows_suppression(self) -> None:
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
        console_filter = ConsoleSuppressingFilter()

        assert console_filter.filter(record) is True
        with suppress_console_logs():
            assert console_filter.filter(record) is False
        assert console_filter.filter(record) is True

    def test_resets_after_exception(self) -> None:
        with pytest.raises(RuntimeError), suppress_console_logs():
            raise RuntimeError("fail")

        assert is_console_suppressed() is False


class TestGetConsole:
    def test_returns_shared_console(self) -> None:
        assert get_console() is get_console()
        assert get_console().stderr is True
