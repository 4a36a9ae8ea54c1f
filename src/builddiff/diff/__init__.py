"""Recursive diff layer — subprocess runner, report parsing, models."""

from builddiff.diff.models import Category, ReportEntry, UnparsedLine
from builddiff.diff.report_parser import ReportParser, relativize
from builddiff.diff.runner import has_binary, run_diff

__all__ = [
    "Category",
    "ReportEntry",
    "ReportParser",
    "UnparsedLine",
    "has_binary",
    "relativize",
    "run_diff",
]
