"""JSON reporter for CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from builddiff.compare.engine import ComparisonResult


def to_dict(
    result: ComparisonResult,
    *,
    old_root: Optional[str] = None,
    new_root: Optional[str] = None,
    archive: Optional[str] = None,
) -> Dict[str, Any]:
    """Convert a ComparisonResult to a JSON-serialisable dict."""
    return {
        "version": "1.0",
        **({"old_root": old_root} if old_root else {}),
        **({"new_root": new_root} if new_root else {}),
        **result.as_dict(),
        "changed": list(result.changed),
        "total": result.total,
        **({"archive": archive} if archive else {}),
    }


def render(result: ComparisonResult, **kwargs: Any) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result, **kwargs), indent=2)
