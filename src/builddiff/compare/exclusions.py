"""Exclusion lists — exact paths, glob patterns, and the .builddiffignore file.

.builddiffignore format:
  - One root-relative path per line.
  - Lines starting with ``#`` are comments.
  - Entries containing ``*``, ``?`` or ``[`` are fnmatch globs; everything
    else must match a path exactly.

``--exclude-from`` also accepts YAML: either a list of entries (classified
like ignore-file lines), or a mapping with ``paths`` and ``patterns`` keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import FrozenSet, Iterable, List, Tuple

import yaml

from builddiff.config.defaults import DEFAULT_EXCLUSIONS

_GLOB_CHARS = frozenset("*?[")


def is_glob(entry: str) -> bool:
    return any(ch in _GLOB_CHARS for ch in entry)


@dataclass(frozen=True)
class Exclusions:
    """Paths and patterns that are always dropped from a comparison."""

    paths: FrozenSet[str] = DEFAULT_EXCLUSIONS
    patterns: Tuple[str, ...] = ()

    def matches(self, path: str) -> bool:
        """Return True if *path* should be omitted."""
        if path in self.paths:
            return True
        return any(fnmatch(path, pat) for pat in self.patterns)

    def extend(self, entries: Iterable[str]) -> "Exclusions":
        """Return a copy with *entries* added. Never removes anything."""
        paths = set(self.paths)
        patterns: List[str] = list(self.patterns)
        for entry in entries:
            entry = entry.strip()
            if not entry:
                continue
            if is_glob(entry):
                if entry not in patterns:
                    patterns.append(entry)
            else:
                paths.add(entry)
        return Exclusions(paths=frozenset(paths), patterns=tuple(patterns))

    def merge(self, other: "Exclusions") -> "Exclusions":
        extra = tuple(p for p in other.patterns if p not in self.patterns)
        return Exclusions(paths=self.paths | other.paths, patterns=self.patterns + extra)


_EMPTY = Exclusions(paths=frozenset())


def _read_ignore_lines(path: Path) -> List[str]:
    entries: List[str] = []
    with open(path, encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            entries.append(line)
    return entries


def _strings(values) -> List[str]:
    return [str(v).strip() for v in values or [] if str(v).strip()]


def _load_yaml(path: Path) -> Exclusions:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return _EMPTY
    if isinstance(data, list):
        return _EMPTY.extend(_strings(data))
    if isinstance(data, dict):
        return Exclusions(
            paths=frozenset(_strings(data.get("paths"))),
            patterns=tuple(_strings(data.get("patterns"))),
        )
    raise ValueError(f"{path}: expected a list or a mapping of paths/patterns")


def load_exclusions(path: Path) -> Exclusions:
    """Load extra exclusions from a YAML or .builddiffignore-style file.

    The result holds only what the file lists; merge it into the defaults.
    """
    if path.suffix in (".yaml", ".yml"):
        return _load_yaml(path)
    return _EMPTY.extend(_read_ignore_lines(path))


def load_ignore_file(directory: Path) -> Exclusions:
    """Load ``.builddiffignore`` from *directory*, empty if absent."""
    path = directory / ".builddiffignore"
    if not path.is_file():
        return _EMPTY
    return load_exclusions(path)
