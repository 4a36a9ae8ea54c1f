"""Data models for parsed ``diff -q -r`` reports."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    UPDATED = "updated"


@dataclass(frozen=True, slots=True)
class ReportEntry:
    """A single classified line from a recursive diff report."""

    category: Category
    path: str  # root-relative, no leading separator
    line: str


@dataclass(frozen=True)
class UnparsedLine:
    """A report line matching none of the known forms (skipped, never fatal)."""

    line: str
