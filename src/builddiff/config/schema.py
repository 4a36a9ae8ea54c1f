"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

from builddiff.config.defaults import DEFAULT_OUTPUT_DIR

OutputFormat = Literal["terminal", "json"]

OUTPUT_FORMATS = ("terminal", "json")


@dataclass
class CompareConfig:
    exclusions: List[str] = field(default_factory=list)  # extends DEFAULT_EXCLUSIONS
    exclude_patterns: List[str] = field(default_factory=list)
    timeout: Optional[float] = None
    diff_command: str = "diff"


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    show_summary: bool = True


@dataclass
class PackageConfig:
    output_dir: str = DEFAULT_OUTPUT_DIR
    archive: bool = True


@dataclass
class BuildDiffConfig:
    version: str = "1.0"
    compare: CompareConfig = field(default_factory=CompareConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    package: PackageConfig = field(default_factory=PackageConfig)
    # Environment overrides that were ignored; the CLI shows them with --verbose
    notes: List[str] = field(default_factory=list)
