"""Staging and archiving of changed build files."""

from builddiff.bundle.archive import ARCHIVE_EXCLUDED_NAMES, create_archive, default_archive_path
from builddiff.bundle.staging import ensure_dir, stage_changes

__all__ = [
    "ARCHIVE_EXCLUDED_NAMES",
    "create_archive",
    "default_archive_path",
    "ensure_dir",
    "stage_changes",
]
