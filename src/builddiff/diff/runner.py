"""Recursive diff subprocess wrapper."""

from __future__ import annotations

import shutil
import subprocess
import sys
from typing import Optional

from builddiff.errors import ExecutionFailed

# diff(1): 0 = identical, 1 = differences found, >1 = trouble
_EXIT_SAME = 0
_EXIT_DIFFERENT = 1


def has_binary(name: str) -> bool:
    """Return True if *name* resolves to an executable on ``PATH``."""
    return shutil.which(name) is not None


def run_diff(
    old_root: str,
    new_root: str,
    *,
    diff_command: str = "diff",
    timeout: Optional[float] = None,
) -> str:
    """Run ``diff -q -r`` on two roots and return its report.

    "Differences found" is data, not failure. Anything else the tool
    reports raises ExecutionFailed and the output is discarded.

    The report is decoded the way ``os.fsdecode`` decodes file names, so
    undecodable bytes survive as surrogates and the paths can be opened
    again when staging.
    """
    args = [diff_command, "-q", "-r", old_root, new_root]
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding=sys.getfilesystemencoding(),
            errors="surrogateescape",
        )
    except FileNotFoundError as exc:
        raise ExecutionFailed(f"{diff_command} is not installed or not on PATH") from exc
    except subprocess.TimeoutExpired as exc:
        # subprocess.run has already killed the child
        raise ExecutionFailed(
            f"{diff_command} timed out after {timeout}s comparing {old_root} and {new_root}"
        ) from exc
    except OSError as exc:
        raise ExecutionFailed(f"could not run {diff_command}: {exc}") from exc

    if result.returncode in (_EXIT_SAME, _EXIT_DIFFERENT):
        return result.stdout

    stderr = result.stderr.strip()
    raise ExecutionFailed(
        f"{diff_command} exited with status {result.returncode}: {stderr or 'no error output'}",
        returncode=result.returncode,
        stderr=stderr,
    )
