"""Comparison engine and exclusion handling."""

from builddiff.compare.engine import (
    CompareOptions,
    ComparisonRequest,
    ComparisonResult,
    canonical_root,
    classify,
    compare,
    run_comparison,
)
from builddiff.compare.exclusions import Exclusions, load_exclusions, load_ignore_file

__all__ = [
    "CompareOptions",
    "ComparisonRequest",
    "ComparisonResult",
    "Exclusions",
    "canonical_root",
    "classify",
    "compare",
    "load_exclusions",
    "load_ignore_file",
    "run_comparison",
]
