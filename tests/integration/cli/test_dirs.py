"""Integration tests for the dirs and init commands (list -> fetch -> diff -> render)"""

import pytest
from typer.testing import CliRunner

from diffreport.cli.cli import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def chdir_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


@pytest.fixture(name="trees")
def trees_fixture(tmp_path):
    before, after = tmp_path / "before", tmp_path / "after"
    before.mkdir()
    after.mkdir()
    (before / "notes.txt").write_text("a\nb\n")
    (after / "notes.txt").write_text("a\nb\nc\n")
    (after / "new.txt").write_text("hello\n")
    return before, after


def test_dirs_headers_only_by_default(trees):
    before, after = trees
    result = runner.invoke(app, ["dirs", str(before), str(after)])
    assert result.exit_code == 0, result.output
    assert "## new.txt\n- **Change Type:** add" in result.output
    assert "## notes.txt\n- **Change Type:** edit" in result.output
    assert "Diff Region" not in result.output


def test_dirs_with_content(trees):
    before, after = trees
    result = runner.invoke(app, ["dirs", str(before), str(after), "--content"])
    assert result.exit_code == 0, result.output
    assert "### Diff Region (added) - Lines 3-2 → 3-3" in result.output
    assert "   3: c" in result.output


def test_dirs_pagination(trees):
    before, after = trees
    result = runner.invoke(app, ["dirs", str(before), str(after), "--skip", "1", "--top", "1"])
    assert result.exit_code == 0, result.output
    assert "## notes.txt" in result.output
    assert "## new.txt" not in result.output


def test_dirs_writes_out_file(trees, tmp_path):
    before, after = trees
    out = tmp_path / "reports" / "diff.md"
    result = runner.invoke(app, ["dirs", str(before), str(after), "--content", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8").startswith("# File Diffs\n")


def test_dirs_strict_exits_2_on_partial_failure(trees):
    before, after = trees
    (before / "blob.bin").write_bytes(b"\xff\x00")
    (after / "blob.bin").write_bytes(b"\xfe\x00")
    result = runner.invoke(app, ["dirs", str(before), str(after), "--content", "--strict"])
    assert result.exit_code == 2
    assert "Could not retrieve file content" in result.output


def test_dirs_partial_failure_without_strict_succeeds(trees):
    before, after = trees
    (before / "blob.bin").write_bytes(b"\xff\x00")
    (after / "blob.bin").write_bytes(b"\xfe\x00")
    result = runner.invoke(app, ["dirs", str(before), str(after), "--content"])
    assert result.exit_code == 0
    assert "## notes.txt" in result.output


def test_dirs_missing_directory_reports_no_revisions(tmp_path):
    result = runner.invoke(app, ["dirs", str(tmp_path / "x"), str(tmp_path / "y")])
    assert result.exit_code == 0
    assert "No revisions found" in result.output


def test_dirs_reads_config_file(trees, tmp_path):
    """diffreport.yaml in the working directory supplies defaults."""
    before, after = trees
    (tmp_path / "diffreport.yaml").write_text("include_content: true\ntitle: Snapshot Review\n")
    result = runner.invoke(app, ["dirs", str(before), str(after)])
    assert result.exit_code == 0, result.output
    assert "# Snapshot Review" in result.output
    assert "Diff Region" in result.output


def test_dirs_invalid_config_fails(trees, tmp_path):
    before, after = trees
    (tmp_path / "diffreport.yaml").write_text("top: [unclosed\n")
    result = runner.invoke(app, ["dirs", str(before), str(after)])
    assert result.exit_code == 1
    assert "Invalid diffreport.yaml" in result.output


def test_init_writes_config_once(tmp_path):
    first = runner.invoke(app, ["init"])
    assert first.exit_code == 0, first.output
    assert (tmp_path / "diffreport.yaml").exists()

    second = runner.invoke(app, ["init"])
    assert second.exit_code == 1
    assert "already exists" in second.output
