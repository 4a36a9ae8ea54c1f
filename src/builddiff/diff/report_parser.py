"""Parser for ``diff -q -r`` reports.

There are three line forms, with ``old`` and ``new`` standing for the
roots exactly as they were passed to diff::

    Only in old/sub: gone.txt            -> deleted  sub/gone.txt
    Only in new: fresh-dir               -> added    fresh-dir
    Files old/a.css and new/a.css differ -> updated  a.css

Keywords match case-insensitively, roots verbatim. A new directory shows
up once as ``Only in``; its contents are never listed. Anything else
(type mismatches, symlink notices) yields UnparsedLine.
"""

from __future__ import annotations

import os
import re
from pathlib import PurePath
from typing import Generator, List, Optional, Pattern, Tuple

from builddiff.diff.models import Category, ReportEntry, UnparsedLine

_SEPARATORS = os.sep + (os.altsep or "")
_SEP = "[" + re.escape(_SEPARATORS) + "]"


def _root_pattern(root: str) -> str:
    """Regex for *root* followed by an optional sub-path."""
    sep = "" if root.endswith(tuple(_SEPARATORS)) else _SEP
    return re.escape(root) + r"(?:" + sep + r".+?)?"


def _only_in_re(root: str) -> Pattern[str]:
    return re.compile(
        r"^(?i:only in )(?P<dir>" + _root_pattern(root) + r"): (?P<name>.+)$"
    )


def _files_differ_re(old_root: str, new_root: str) -> Pattern[str]:
    return re.compile(
        r"^(?i:files )(?P<old>" + _root_pattern(old_root) + r")"
        r"(?i: and )(?P<new>" + _root_pattern(new_root) + r")"
        r"(?i: differ)$"
    )


def relativize(path: str, root: str) -> Optional[str]:
    """Return *path* relative to *root*, or None if it lies outside it.

    The root itself maps to the empty string.
    """
    try:
        rel = PurePath(path).relative_to(PurePath(root))
    except ValueError:
        return None
    if rel == PurePath("."):
        return ""
    return str(rel).lstrip(_SEPARATORS)


class ReportParser:
    """Turn a recursive diff report into ReportEntry / UnparsedLine items.

    Usage::

        parser = ReportParser(report, old_root, new_root)
        for item in parser.parse():
            if isinstance(item, ReportEntry):
                ...
    """

    def __init__(self, report: str, old_root: str, new_root: str) -> None:
        # Only "\n" ends a line; other separators are legal in file names
        self._lines = report.split("\n")
        self.old_root = old_root
        self.new_root = new_root
        # Longest root first so a root nested in the other wins its own lines
        only_in: List[Tuple[str, Category]] = [
            (old_root, Category.DELETED),
            (new_root, Category.ADDED),
        ]
        only_in.sort(key=lambda item: len(item[0]), reverse=True)
        self._only_in = [(_only_in_re(root), root, cat) for root, cat in only_in]
        self._files_differ = _files_differ_re(old_root, new_root)

    def parse(self) -> Generator[ReportEntry | UnparsedLine, None, None]:
        """Yield one item per non-blank report line, in report order."""
        for raw_line in self._lines:
            line = raw_line.rstrip("\r")
            if not line.strip():
                continue
            entry = self.parse_line(line)
            if entry is None:
                yield UnparsedLine(line=line)
            else:
                yield entry

    def parse_line(self, line: str) -> Optional[ReportEntry]:
        """Classify a single line. Returns None for unrecognised lines."""
        for pattern, root, category in self._only_in:
            m = pattern.match(line)
            if m is None:
                continue
            subdir = relativize(m.group("dir"), root)
            if subdir is None:
                continue
            name = m.group("name")
            path = os.sep.join(part for part in (subdir, name) if part)
            return ReportEntry(category=category, path=path.lstrip(_SEPARATORS), line=line)

        m = self._files_differ.match(line)
        if m is not None:
            path = relativize(m.group("old"), self.old_root)
            if path:
                return ReportEntry(category=Category.UPDATED, path=path, line=line)

        return None
