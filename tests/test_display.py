"""Tests for display module."""

from datetime import datetime, timedelta
from unittest.mock import patch

from reposweep.display import (
    format_age,
    format_count,
    format_size,
    show_all_clean,
    show_categories,
    show_deletion_result,
    show_deletion_summary,
)
from reposweep.models import DeletionResult


class TestFormatSize:
    def test_bytes(self):
        assert format_size(0) == "0 B"
        assert format_size(1023) == "1023 B"

    def test_kilobytes(self):
        assert format_size(1024) == "1 KB"
        assert format_size(100 * 1024) == "100 KB"

    def test_megabytes(self):
        assert format_size(1048576) == "1.0 MB"
        assert format_size(5 * 1024**2 + 300 * 1024) == "5.3 MB"

    def test_gigabytes(self):
        assert format_size(1073741824) == "1.0 GB"
        assert format_size(3 * 1024**4) == "3072.0 GB"


class TestFormatCount:
    def test_thousands_separator(self):
        assert format_count(7) == "7"
        assert format_count(1234567) == "1,234,567"


class TestFormatAge:
    now = datetime(2026, 3, 1, 12, 0)

    def test_today(self):
        assert format_age(self.now - timedelta(hours=5), now=self.now) == "today"

    def test_days(self):
        assert format_age(self.now - timedelta(days=1), now=self.now) == "1d ago"
        assert format_age(self.now - timedelta(days=59), now=self.now) == "59d ago"

    def test_months(self):
        assert format_age(self.now - timedelta(days=60), now=self.now) == "2mo ago"
        assert format_age(self.now - timedelta(days=400), now=self.now) == "13mo ago"


class TestShowOutput:
    @patch("reposweep.display.console")
    def test_show_categories(self, mock_console):
        show_categories({"node": frozenset({"node_modules"})})
        mock_console.print.assert_called_once()

    @patch("reposweep.display.console")
    def test_all_clean(self, mock_console):
        show_all_clean("/some/[dir]")
        printed = mock_console.print.call_args[0][0]
        assert "All clean!" in printed
        assert "\\[dir]" in printed

    @patch("reposweep.display.console")
    def test_successful_result(self, mock_console):
        show_deletion_result(
            DeletionResult(path="/w/a/dist", relative_path="a/dist", bytes_freed=2048)
        )
        printed = mock_console.print.call_args[0][0]
        assert "✓" in printed
        assert "a/dist/" in printed
        assert "2 KB" in printed

    @patch("reposweep.display.console")
    def test_failed_result(self, mock_console):
        show_deletion_result(
            DeletionResult(
                path="/w/a/dist", relative_path="a/dist", success=False, error="Permission denied"
            )
        )
        printed = mock_console.print.call_args[0][0]
        assert "✗" in printed
        assert "Permission denied" in printed

    @patch("reposweep.display.console")
    def test_summary_with_errors(self, mock_console):
        results = [
            DeletionResult(path="/w/a", relative_path="a", bytes_freed=1048576, files_deleted=1500),
            DeletionResult(path="/w/b", relative_path="b", success=False, error="boom"),
        ]
        show_deletion_summary(results)
        printed = " ".join(str(call.args[0]) for call in mock_console.print.call_args_list if call.args)
        assert "Done with 1 error(s)." in printed
        assert "1.0 MB" in printed
        assert "1,500" in printed

    @patch("reposweep.display.console")
    def test_summary_without_errors(self, mock_console):
        show_deletion_summary([DeletionResult(path="/w/a", relative_path="a", bytes_freed=10)])
        printed = " ".join(str(call.args[0]) for call in mock_console.print.call_args_list if call.args)
        assert "Done!" in printed
