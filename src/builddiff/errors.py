"""Exception hierarchy shared by every builddiff layer."""

from __future__ import annotations

from typing import Optional


class BuildDiffError(Exception):
    """Base class for all builddiff errors."""


class ExecutionFailed(BuildDiffError):
    """Raised when the recursive diff could not run or exited unexpectedly.

    ``returncode`` is None when the process never produced a status
    (binary missing, timeout).
    """

    def __init__(
        self,
        message: str,
        *,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class StagingError(BuildDiffError):
    """Raised when changed files cannot be copied or archived."""
