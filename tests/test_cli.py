"""Tests for the CLI commands."""

import json
import os
import sys
import zipfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from builddiff.cli import app

runner = CliRunner()


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "builddiff" in result.output


class TestInit:
    def test_creates_config(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (tmp_path / ".builddiff.toml").exists()

    def test_refuses_overwrite(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".builddiff.toml").write_text("existing")
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1


class TestArgumentErrors:
    def test_missing_directories(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["compare", "nope-old", "nope-new"])
        assert result.exit_code == 2
        assert "do not exist" in result.output

    def test_bad_format(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        result = runner.invoke(app, ["compare", "build-old", "build-new", "--format", "xml"])
        assert result.exit_code == 2

    def test_bad_config(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        (old_build.parent / ".builddiff.toml").write_text("not [valid")
        result = runner.invoke(app, ["compare", "build-old", "build-new"])
        assert result.exit_code == 2

    def test_diff_not_on_path(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        monkeypatch.setenv("BUILDDIFF_DIFF_COMMAND", "builddiff-no-such-diff")
        result = runner.invoke(app, ["compare", "build-old", "build-new"])
        assert result.exit_code == 2
        assert "not found on PATH" in result.output

    def test_missing_exclude_file(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        result = runner.invoke(
            app, ["compare", "build-old", "build-new", "--exclude-from", "missing.yml"]
        )
        assert result.exit_code == 2


@pytest.mark.requires_diff
class TestCompare:
    def test_terminal_lists_paths(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        (new_build / "fresh.txt").write_text("new\n")
        (new_build / "index.html").write_text("<html>v2</html>\n")
        result = runner.invoke(app, ["compare", "build-old", "build-new"])
        assert result.exit_code == 0
        assert "fresh.txt" in result.output
        assert "index.html" in result.output

    def test_no_differences(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        result = runner.invoke(app, ["compare", "build-old", "build-new"])
        assert result.exit_code == 0
        assert "No differences" in result.output

    def test_json_stdout(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        (new_build / "css" / "site.css").unlink()
        result = runner.invoke(app, ["compare", "build-old", "build-new", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["deleted"] == ["css/site.css"]

    def test_report_file(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        (new_build / "fresh.txt").write_text("new\n")
        result = runner.invoke(app, ["compare", "build-old", "build-new", "-o", "report.json"])
        assert result.exit_code == 0
        data = json.loads((old_build.parent / "report.json").read_text())
        assert data["added"] == ["fresh.txt"]

    def test_exclude_option(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        (new_build / "version.json").write_text("{}")
        result = runner.invoke(
            app, ["compare", "build-old", "build-new", "-x", "version.json", "-o", "r.json"]
        )
        assert result.exit_code == 0
        assert json.loads((old_build.parent / "r.json").read_text())["total"] == 0

    def test_builddiffignore(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        (old_build.parent / ".builddiffignore").write_text("*.map\n")
        (new_build / "app.js.map").write_text("{}")
        result = runner.invoke(app, ["compare", "build-old", "build-new", "-o", "r.json"])
        assert result.exit_code == 0
        assert json.loads((old_build.parent / "r.json").read_text())["added"] == []

    def test_verbose_narration(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        result = runner.invoke(app, ["compare", "build-old", "build-new", "-v"])
        assert result.exit_code == 0
        assert "Diffing directories..." in result.output

    def test_verbose_reports_ignored_env_timeout(self, old_build, new_build, monkeypatch):
        monkeypatch.chdir(old_build.parent)
        monkeypatch.setenv("BUILDDIFF_TIMEOUT", "soon")
        quiet = runner.invoke(app, ["compare", "build-old", "build-new"])
        assert "BUILDDIFF_TIMEOUT" not in quiet.output
        loud = runner.invoke(app, ["compare", "build-old", "build-new", "-v"])
        assert loud.exit_code == 0
        assert "Ignoring BUILDDIFF_TIMEOUT='soon'" in loud.output


@pytest.mark.requires_diff
class TestPackage:
    def test_stages_and_zips(self, old_build, new_build, monkeypatch):
        workdir = old_build.parent
        monkeypatch.chdir(workdir)
        (new_build / "fresh.txt").write_text("new\n")
        (new_build / "fonts").mkdir()
        (new_build / "fonts" / "a.woff").write_text("a")
        (new_build / "index.html").write_text("<html>v2</html>\n")
        (new_build / "img" / "logo.svg").unlink()

        result = runner.invoke(app, ["package", "build-old", "build-new"])
        assert result.exit_code == 0
        staging = workdir / "build_for_upload"
        assert (staging / "fresh.txt").is_file()
        assert (staging / "fonts" / "a.woff").is_file()
        assert (staging / "index.html").read_text() == "<html>v2</html>\n"
        assert not (staging / "img").exists()
        with zipfile.ZipFile(workdir / "build_for_upload.zip") as zf:
            assert sorted(zf.namelist()) == ["fonts/a.woff", "fresh.txt", "index.html"]
        assert "img/logo.svg" in result.output

    def test_no_archive(self, old_build, new_build, monkeypatch):
        workdir = old_build.parent
        monkeypatch.chdir(workdir)
        (new_build / "fresh.txt").write_text("new\n")
        result = runner.invoke(
            app, ["package", "build-old", "build-new", "--no-archive", "-d", "upload"]
        )
        assert result.exit_code == 0
        assert (workdir / "upload" / "fresh.txt").is_file()
        assert not (workdir / "upload.zip").exists()

    def test_nothing_to_package(self, old_build, new_build, monkeypatch):
        workdir = old_build.parent
        monkeypatch.chdir(workdir)
        result = runner.invoke(app, ["package", "build-old", "build-new"])
        assert result.exit_code == 0
        assert "No files were different" in result.output
        assert not (workdir / "build_for_upload").exists()

    def test_json_includes_archive(self, old_build, new_build, monkeypatch):
        workdir = old_build.parent
        monkeypatch.chdir(workdir)
        (new_build / "fresh.txt").write_text("new\n")
        result = runner.invoke(app, ["package", "build-old", "build-new", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["changed"] == ["fresh.txt"]
        assert data["archive"].endswith("build_for_upload.zip")

    @pytest.mark.skipif(sys.platform != "linux", reason="needs byte file names")
    def test_undecodable_file_name_is_staged(self, old_build, new_build, monkeypatch):
        workdir = old_build.parent
        monkeypatch.chdir(workdir)
        name = os.fsdecode(b"caf\xe9.txt")
        (new_build / name).write_text("menu\n")
        result = runner.invoke(app, ["package", "build-old", "build-new"])
        assert result.exit_code == 0
        assert (workdir / "build_for_upload" / name).read_text() == "menu\n"
        assert "caf\ufffd.txt" in result.output
