"""Tests for output reporters."""

import io
import json

from rich.console import Console

from builddiff.compare.engine import ComparisonResult
from builddiff.output import json_report, terminal


def _make_result() -> ComparisonResult:
    return ComparisonResult(
        added=("fonts", "fresh.txt"),
        deleted=("img/logo.svg",),
        updated=("index.html",),
    )


def _capture(**kwargs) -> str:
    buf = io.StringIO()
    terminal.render(console=Console(file=buf, width=200), **kwargs)
    return buf.getvalue()


class TestJsonReport:
    def test_valid_json(self):
        data = json.loads(json_report.render(_make_result()))
        assert data["version"] == "1.0"
        assert data["added"] == ["fonts", "fresh.txt"]
        assert data["deleted"] == ["img/logo.svg"]
        assert data["updated"] == ["index.html"]
        assert data["changed"] == ["fonts", "fresh.txt", "index.html"]
        assert data["total"] == 4

    def test_optional_fields(self):
        data = json_report.to_dict(
            _make_result(), old_root="old", new_root="new", archive="out.zip"
        )
        assert data["old_root"] == "old"
        assert data["new_root"] == "new"
        assert data["archive"] == "out.zip"

    def test_optional_fields_omitted(self):
        data = json_report.to_dict(ComparisonResult())
        assert "archive" not in data
        assert "old_root" not in data
        assert data["total"] == 0


class TestTerminal:
    def test_sections(self):
        text = _capture(result=_make_result())
        assert "The following files were deleted:" in text
        assert "The following files were added:" in text
        assert "The following files were updated:" in text
        assert "img/logo.svg" in text
        assert "Deleted:" in text

    def test_changed_merged(self):
        text = _capture(result=_make_result(), split_changes=False)
        assert "The following files were changed:" in text
        assert "The following files were added:" not in text

    def test_no_summary(self):
        text = _capture(result=_make_result(), show_summary=False)
        assert "Updated:" not in text

    def test_empty(self):
        text = _capture(result=ComparisonResult())
        assert "No differences" in text

    def test_markup_in_paths_escaped(self):
        text = _capture(result=ComparisonResult(added=("[bold]x.txt",)))
        assert "[bold]x.txt" in text
