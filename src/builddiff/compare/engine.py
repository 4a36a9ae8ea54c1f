"""Comparison engine — run the recursive diff, classify, filter, sort.

``compare()`` is the single entry point used by the CLI. It either returns
a complete ComparisonResult or raises ExecutionFailed; there are no
partial results.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from rich.console import Console

from builddiff.compare.exclusions import Exclusions
from builddiff.config.defaults import DEFAULT_EXCLUSIONS
from builddiff.diff.models import Category, ReportEntry, UnparsedLine
from builddiff.diff.report_parser import ReportParser
from builddiff.diff.runner import run_diff

PathLike = Union[str, Path]


@dataclass(frozen=True)
class CompareOptions:
    """Per-call settings. ``verbose`` only affects narration, never results."""

    exclusions: FrozenSet[str] = DEFAULT_EXCLUSIONS
    exclude_patterns: Tuple[str, ...] = ()
    verbose: bool = False
    timeout: Optional[float] = None
    diff_command: str = "diff"

    def __post_init__(self) -> None:
        # Accept any iterable from callers but store immutable copies
        object.__setattr__(self, "exclusions", frozenset(self.exclusions))
        object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))

    @classmethod
    def from_exclusions(cls, exclusions: Exclusions, **kwargs: Any) -> "CompareOptions":
        return cls(exclusions=exclusions.paths, exclude_patterns=exclusions.patterns, **kwargs)

    @property
    def exclusion_rules(self) -> Exclusions:
        return Exclusions(paths=self.exclusions, patterns=self.exclude_patterns)

    def with_exclusions(self, *entries: str) -> "CompareOptions":
        """Return a copy whose exclusions are a superset of these."""
        rules = self.exclusion_rules.extend(entries)
        return dataclasses.replace(
            self, exclusions=rules.paths, exclude_patterns=rules.patterns
        )


@dataclass(frozen=True)
class ComparisonRequest:
    """Input to one comparison. Roots are canonical (absolute, resolved)."""

    old_root: str
    new_root: str
    options: CompareOptions = field(default_factory=CompareOptions)

    @classmethod
    def create(
        cls,
        old_root: PathLike,
        new_root: PathLike,
        options: Optional[CompareOptions] = None,
    ) -> "ComparisonRequest":
        return cls(
            old_root=canonical_root(old_root),
            new_root=canonical_root(new_root),
            options=options or CompareOptions(),
        )


@dataclass(frozen=True)
class ComparisonResult:
    """Sorted, deduplicated root-relative paths per category."""

    added: Tuple[str, ...] = ()
    deleted: Tuple[str, ...] = ()
    updated: Tuple[str, ...] = ()

    @property
    def changed(self) -> Tuple[str, ...]:
        """Added and updated paths together — everything that must be uploaded."""
        return tuple(sorted(set(self.added) | set(self.updated)))

    @property
    def total(self) -> int:
        return len(self.added) + len(self.deleted) + len(self.updated)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def as_dict(self) -> Dict[str, List[str]]:
        return {
            "added": list(self.added),
            "deleted": list(self.deleted),
            "updated": list(self.updated),
        }


def canonical_root(root: PathLike) -> str:
    """Absolute, symlink-resolved form of *root* without a trailing separator."""
    return str(Path(root).resolve())


def classify(
    items: Iterable[Union[ReportEntry, UnparsedLine]],
    exclusions: Exclusions,
) -> ComparisonResult:
    """Fold parsed report items into a ComparisonResult.

    Each path lands in exactly one category; excluded paths are dropped.
    """
    categories: Dict[str, Category] = {}
    for item in items:
        if isinstance(item, ReportEntry):
            categories[item.path] = item.category

    buckets: Dict[Category, List[str]] = {cat: [] for cat in Category}
    for path, category in categories.items():
        if exclusions.matches(path):
            continue
        buckets[category].append(path)

    return ComparisonResult(
        added=tuple(sorted(buckets[Category.ADDED])),
        deleted=tuple(sorted(buckets[Category.DELETED])),
        updated=tuple(sorted(buckets[Category.UPDATED])),
    )


def run_comparison(
    request: ComparisonRequest,
    *,
    console: Optional[Console] = None,
) -> ComparisonResult:
    """Execute *request*: diff, parse, classify."""
    options = request.options
    narrate = options.verbose
    if narrate and console is None:
        console = Console(stderr=True)

    if narrate:
        console.print("[yellow]Diffing directories...[/yellow]", end=" ")
    report = run_diff(
        request.old_root,
        request.new_root,
        diff_command=options.diff_command,
        timeout=options.timeout,
    )
    if narrate:
        console.print("[green]Done[/green]")
        console.print("[yellow]Parsing diff results...[/yellow]", end=" ")

    items = list(ReportParser(report, request.old_root, request.new_root).parse())
    result = classify(items, options.exclusion_rules)

    if narrate:
        console.print("[green]Done[/green]")
        skipped = sum(1 for item in items if isinstance(item, UnparsedLine))
        if skipped:
            console.print(f"[dim]Skipped {skipped} unrecognised report line(s)[/dim]")
        console.print(
            f"[dim]Added: {len(result.added)}  Updated: {len(result.updated)}  "
            f"Deleted: {len(result.deleted)}[/dim]"
        )
    return result


def compare(
    old_root: PathLike,
    new_root: PathLike,
    options: Optional[CompareOptions] = None,
    *,
    console: Optional[Console] = None,
) -> ComparisonResult:
    """Compare two build trees and classify every differing path.

    Raises ExecutionFailed if the recursive diff cannot run.
    """
    request = ComparisonRequest.create(old_root, new_root, options)
    return run_comparison(request, console=console)
