"""Load and merge configuration from .builddiff.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from builddiff.config.schema import (
    OUTPUT_FORMATS,
    BuildDiffConfig,
    CompareConfig,
    OutputConfig,
    PackageConfig,
)
from builddiff.errors import BuildDiffError

CONFIG_FILENAME = ".builddiff.toml"


class ConfigError(BuildDiffError):
    """Raised when config is malformed or unreadable."""


def find_config_file(base_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = base_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _merge_env_overrides(cfg: BuildDiffConfig) -> None:
    """Apply BUILDDIFF_* environment variable overrides."""
    if val := os.environ.get("BUILDDIFF_EXCLUDE"):
        cfg.compare.exclusions.extend(p.strip() for p in val.split(os.pathsep) if p.strip())
    if val := os.environ.get("BUILDDIFF_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
        else:
            cfg.notes.append(f"Ignoring BUILDDIFF_FORMAT={val!r}: expected one of {', '.join(OUTPUT_FORMATS)}")
    if val := os.environ.get("BUILDDIFF_OUTPUT_DIR"):
        cfg.package.output_dir = val
    if val := os.environ.get("BUILDDIFF_DIFF_COMMAND"):
        cfg.compare.diff_command = val
    if val := os.environ.get("BUILDDIFF_TIMEOUT"):
        try:
            cfg.compare.timeout = float(val)
        except ValueError:
            cfg.notes.append(f"Ignoring BUILDDIFF_TIMEOUT={val!r}: not a number of seconds")


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    section_data = data.get(section, {})
    if not isinstance(section_data, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in section_data.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: BuildDiffConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format: {cfg.output.format!r}")
    for name in ("exclusions", "exclude_patterns"):
        value = getattr(cfg.compare, name)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"[compare] {name} must be a list of strings")
    if cfg.compare.timeout is not None and not isinstance(cfg.compare.timeout, (int, float)):
        raise ConfigError("[compare] timeout must be a number of seconds")


def load_config(
    base_dir: Path,
    config_override: Optional[str] = None,
) -> BuildDiffConfig:
    """Load, validate, and return a BuildDiffConfig."""
    config_path = find_config_file(base_dir, config_override)

    if config_path is None:
        cfg = BuildDiffConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = BuildDiffConfig(
            version=str(raw.get("version", "1.0")),
            compare=_build_section(raw, CompareConfig, "compare"),
            output=_build_section(raw, OutputConfig, "output"),
            package=_build_section(raw, PackageConfig, "package"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
