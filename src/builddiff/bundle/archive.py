"""Zip a staging directory for upload."""

from __future__ import annotations

import os
import zipfile
from pathlib import Path
from typing import FrozenSet, Optional

from builddiff.errors import StagingError

ARCHIVE_EXCLUDED_NAMES: FrozenSet[str] = frozenset({".DS_Store"})


def default_archive_path(staging_dir: Path) -> Path:
    """``build_for_upload`` -> ``build_for_upload.zip`` next to it."""
    staging_dir = staging_dir.resolve()
    return staging_dir.with_name(staging_dir.name + ".zip")


def _arcname(rel_path: Path) -> str:
    # Zip entry names are UTF-8; undecodable file name bytes become U+FFFD
    return rel_path.as_posix().encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def create_archive(
    staging_dir: Path,
    archive_path: Optional[Path] = None,
    *,
    excluded_names: FrozenSet[str] = ARCHIVE_EXCLUDED_NAMES,
) -> Path:
    """Write every file under *staging_dir* into a maximum-compression zip.

    Entry names are relative to *staging_dir*, so the archive unpacks to the
    same layout as the build. Files named in *excluded_names* are skipped at
    any depth. Returns the archive path.
    """
    staging_dir = staging_dir.resolve()
    if not staging_dir.is_dir():
        raise StagingError(f"Staging directory does not exist: {staging_dir}")
    archive_path = (archive_path or default_archive_path(staging_dir)).resolve()

    try:
        with zipfile.ZipFile(
            archive_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9
        ) as zf:
            for dirpath, dirnames, filenames in os.walk(staging_dir):
                dirnames.sort()
                for name in sorted(filenames):
                    if name in excluded_names:
                        continue
                    file_path = Path(dirpath) / name
                    if file_path == archive_path:
                        continue
                    zf.write(file_path, _arcname(file_path.relative_to(staging_dir)))
    except OSError as exc:
        raise StagingError(f"Failed to write archive {archive_path}: {exc}") from exc

    return archive_path
