"""builddiff — classify the differences between two build output trees."""

__version__ = "0.3.0"

from builddiff.compare.engine import (  # noqa: E402
    CompareOptions,
    ComparisonRequest,
    ComparisonResult,
    compare,
)
from builddiff.errors import BuildDiffError, ExecutionFailed  # noqa: E402

__all__ = [
    "BuildDiffError",
    "CompareOptions",
    "ComparisonRequest",
    "ComparisonResult",
    "ExecutionFailed",
    "__version__",
    "compare",
]
