"""Copy added and updated paths from the new build into a staging directory."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable, List

from builddiff.errors import StagingError


def ensure_dir(path: Path) -> Path:
    """Create *path* (and parents) if missing. Returns the resolved path."""
    path = path.resolve()
    if path.exists() and not path.is_dir():
        raise StagingError(f"Output path exists and is not a directory: {path}")
    path.mkdir(parents=True, exist_ok=True)
    return path


def _source_path(new_root: Path, rel_path: str) -> Path:
    # Lexical check only: symlinks inside the build may point anywhere
    source = Path(os.path.normpath(new_root / rel_path))
    try:
        source.relative_to(new_root)
    except ValueError as exc:
        raise StagingError(f"Refusing to stage path outside {new_root}: {rel_path}") from exc
    return source


def stage_changes(new_root: Path, paths: Iterable[str], output_dir: Path) -> List[Path]:
    """Copy each root-relative path under *new_root* into *output_dir*.

    Added directories are reported once by the comparison, so their whole
    subtree is copied. Returns the staged destinations in input order.
    """
    new_root = new_root.resolve()
    output_dir = ensure_dir(output_dir)
    staged: List[Path] = []

    for rel_path in paths:
        source = _source_path(new_root, rel_path)
        dest = output_dir / rel_path
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            if source.is_dir():
                shutil.copytree(source, dest, dirs_exist_ok=True)
            else:
                shutil.copy2(source, dest)
        except OSError as exc:
            raise StagingError(f"Failed to copy {rel_path}: {exc}") from exc
        staged.append(dest)

    return staged
