"""Tests for CLI interface."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from conftest import KB, MB, fill
from reposweep.cli import app
from reposweep.models import ScanFilter

runner = CliRunner()


def output(result):
    """Command output with line wrapping collapsed."""
    return " ".join(result.stdout.split())


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setenv("REPOSWEEP_CONFIG", str(path))
    return path


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "work"
    fill(root / "web" / "node_modules", 2 * MB, files=10)
    fill(root / "api" / "target", 1 * MB, files=4)
    fill(root / "api" / "dist", 10 * KB)
    return root


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "reposweep version" in output(result)

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "reposweep version" in output(result)


class TestHelp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "--only" in output(result)
        assert "--exclude" in output(result)
        assert "--stale" in output(result)


class TestListCategories:
    def test_lists_all(self):
        result = runner.invoke(app, ["--list-categories"])
        assert result.exit_code == 0
        assert "Available Categories" in output(result)
        assert "node_modules" in output(result)
        assert "python" in output(result)


class TestValidation:
    def test_only_and_exclude_together(self, project):
        result = runner.invoke(app, [str(project), "--only", "node", "--exclude", "build"])
        assert result.exit_code == 1
        assert "cannot be used together" in output(result)

    def test_unknown_category(self, project):
        result = runner.invoke(app, [str(project), "--only", "node,cobol"])
        assert result.exit_code == 1
        assert "Unknown category" in output(result)

    def test_invalid_stale(self, project):
        result = runner.invoke(app, [str(project), "--stale", "soon"])
        assert result.exit_code == 1
        assert "Invalid duration" in output(result)

    def test_missing_directory(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "is not a valid directory" in output(result)

    def test_file_instead_of_directory(self, tmp_path):
        (tmp_path / "f.txt").write_text("x")
        result = runner.invoke(app, [str(tmp_path / "f.txt")])
        assert result.exit_code == 1


class TestSweep:
    def test_all_clean(self, tmp_path):
        (tmp_path / "src").mkdir()
        result = runner.invoke(app, [str(tmp_path)])
        assert result.exit_code == 0
        assert "All clean!" in output(result)

    def test_nothing_selected(self, project):
        with patch("reposweep.cli.select_items", return_value=[]) as mock_select:
            result = runner.invoke(app, [str(project)])

        assert result.exit_code == 0
        assert "Nothing to delete" in output(result)
        items = mock_select.call_args[0][0]
        assert [i.name for i in items] == ["node_modules", "target"]
        assert (project / "web" / "node_modules").exists()

    def test_deletes_selection(self, project):
        with patch("reposweep.cli.select_items", side_effect=lambda items, root: [items[0]]):
            result = runner.invoke(app, [str(project)])

        assert result.exit_code == 0
        assert "Deleting 1 directories" in output(result)
        assert "Done!" in output(result)
        assert "2.0 MB" in output(result)
        assert not (project / "web" / "node_modules").exists()
        assert (project / "api" / "target").exists()

    def test_dry_run_keeps_files(self, project):
        with patch("reposweep.cli.select_items", side_effect=lambda items, root: list(items)):
            result = runner.invoke(app, [str(project), "--dry-run"])

        assert result.exit_code == 0
        assert "DRY RUN" in output(result)
        assert "3.0 MB" in output(result)
        assert (project / "web" / "node_modules").exists()
        assert (project / "api" / "target").exists()

    def test_only_filter_passed_to_scan(self, project):
        with patch("reposweep.cli.scan", return_value=()) as mock_scan:
            result = runner.invoke(app, [str(project), "--only", "node,rust"])

        assert result.exit_code == 0
        assert mock_scan.call_args[0][2] == ScanFilter(only=["node", "rust"])

    def test_config_exclude_used_by_default(self, project, isolated_config):
        isolated_config.write_text(json.dumps({"exclude_categories": ["rust"]}))
        with patch("reposweep.cli.scan", return_value=()) as mock_scan:
            runner.invoke(app, [str(project)])
        assert mock_scan.call_args[0][2] == ScanFilter(exclude=["rust"])

        with patch("reposweep.cli.scan", return_value=()) as mock_scan:
            runner.invoke(app, [str(project), "--only", "node"])
        assert mock_scan.call_args[0][2] == ScanFilter(only=["node"])

    def test_unknown_config_category_ignored(self, project, isolated_config):
        isolated_config.write_text(json.dumps({"exclude_categories": ["cobol", "rust"]}))
        with patch("reposweep.cli.scan", return_value=()) as mock_scan:
            result = runner.invoke(app, [str(project)])

        assert result.exit_code == 0
        assert mock_scan.call_args[0][2] == ScanFilter(exclude=["rust"])

    def test_protected_paths_hidden(self, project, isolated_config):
        isolated_config.write_text(json.dumps({"protected_paths": [str(project / "web")]}))
        with patch("reposweep.cli.select_items", return_value=[]) as mock_select:
            runner.invoke(app, [str(project)])

        items = mock_select.call_args[0][0]
        assert [i.name for i in items] == ["target"]

    def test_stale_filters_recent_artifacts(self, project):
        result = runner.invoke(app, [str(project), "--stale", "30d"])
        assert result.exit_code == 0
        assert "All clean!" in output(result)
