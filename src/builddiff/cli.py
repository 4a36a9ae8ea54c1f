"""builddiff CLI — Typer application with compare, package, and init commands."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape

from builddiff import __version__

app = typer.Typer(
    name="builddiff",
    help="Package only what changed between two build outputs.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _fail(label: str, exc: object) -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=2)


def _load(config: Optional[str]):
    """Load config from the working directory, exit 2 on failure."""
    from builddiff.config.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), config)
    except ConfigError as exc:
        raise _fail("Config error", exc) from exc


def _check_roots(old_build: str, new_build: str) -> None:
    """Both builds must be existing directories, exit 2 otherwise."""
    if Path(old_build).is_dir() and Path(new_build).is_dir():
        return
    console.print("[bold red]The passed build directories do not exist:[/bold red]")
    console.print(f'  "{escape(old_build)}"\n  "{escape(new_build)}"')
    raise typer.Exit(code=2)


def _build_options(cfg, exclude: Optional[List[str]], exclude_from: Optional[str], verbose: bool):
    """Merge defaults, config, .builddiffignore, and CLI exclusions into CompareOptions."""
    from builddiff.compare.engine import CompareOptions
    from builddiff.compare.exclusions import Exclusions, load_exclusions, load_ignore_file

    if verbose:
        for note in cfg.notes:
            console.print(f"[dim]{escape(note)}[/dim]")

    rules = Exclusions().extend(cfg.compare.exclusions)
    rules = rules.merge(Exclusions(paths=frozenset(), patterns=tuple(cfg.compare.exclude_patterns)))
    rules = rules.merge(load_ignore_file(Path.cwd()))
    rules = rules.extend(exclude or [])

    if exclude_from:
        path = Path(exclude_from)
        if not path.is_file():
            raise _fail("Error", f"Exclusion file not found: {exclude_from}")
        try:
            rules = rules.merge(load_exclusions(path))
        except (OSError, ValueError, yaml.YAMLError) as exc:
            raise _fail("Error", f"Failed to load {exclude_from}: {exc}") from exc

    return CompareOptions.from_exclusions(
        rules,
        verbose=verbose,
        timeout=cfg.compare.timeout,
        diff_command=cfg.compare.diff_command,
    )


def _run_compare(old_build: str, new_build: str, options):
    """Run the comparison, exit 2 if diff is missing or fails."""
    from builddiff.compare.engine import compare as run_compare
    from builddiff.diff.runner import has_binary
    from builddiff.errors import ExecutionFailed

    if not has_binary(options.diff_command):
        raise _fail("Error", f"'{options.diff_command}' was not found on PATH")

    if options.verbose:
        console.print(f'Comparing "[magenta]{escape(old_build)}[/magenta]" against "[magenta]{escape(new_build)}[/magenta]"...')

    try:
        return run_compare(old_build, new_build, options, console=console)
    except ExecutionFailed as exc:
        raise _fail("Diff error", exc) from exc


def _resolve_format(cfg, format: Optional[str]) -> str:
    if format:
        from builddiff.config.schema import OUTPUT_FORMATS

        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {escape(format)}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    return cfg.output.format


# ── compare ───────────────────────────────────────────────────────────────────


@app.command()
def compare(
    old_build: str = typer.Argument(..., help="Previous build output directory"),
    new_build: str = typer.Argument(..., help="New build output directory"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-x", help="Relative path or glob to ignore (repeatable)"),
    exclude_from: Optional[str] = typer.Option(None, "--exclude-from", help="Text or YAML file listing exclusions"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .builddiff.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Narrate progress"),
) -> None:
    """List the files added, updated, and deleted between two builds."""
    from builddiff.output import json_report, terminal

    cfg = _load(config)
    fmt = _resolve_format(cfg, format)
    _check_roots(old_build, new_build)
    options = _build_options(cfg, exclude, exclude_from, verbose)
    result = _run_compare(old_build, new_build, options)

    report_kwargs = {"old_root": old_build, "new_root": new_build}
    if fmt == "json":
        print(json_report.render(result, **report_kwargs))
    else:
        terminal.render(result, show_summary=cfg.output.show_summary, console=console)

    if output:
        Path(output).write_text(json_report.render(result, **report_kwargs), encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {escape(output)}[/dim]")


# ── package ───────────────────────────────────────────────────────────────────


@app.command()
def package(
    old_build: str = typer.Argument(..., help="Previous build output directory"),
    new_build: str = typer.Argument(..., help="New build output directory"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", "-d", help="Staging directory (default: build_for_upload)"),
    no_archive: bool = typer.Option(False, "--no-archive", help="Stage files without zipping them"),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-x", help="Relative path or glob to ignore (repeatable)"),
    exclude_from: Optional[str] = typer.Option(None, "--exclude-from", help="Text or YAML file listing exclusions"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .builddiff.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Narrate progress"),
) -> None:
    """Copy added and updated files into a staging directory and zip it."""
    from builddiff.bundle.archive import create_archive
    from builddiff.bundle.staging import stage_changes
    from builddiff.errors import StagingError
    from builddiff.output import json_report, terminal

    cfg = _load(config)
    fmt = _resolve_format(cfg, format)
    _check_roots(old_build, new_build)
    options = _build_options(cfg, exclude, exclude_from, verbose)
    result = _run_compare(old_build, new_build, options)

    if result.is_empty:
        if fmt == "json":
            print(json_report.render(result, old_root=old_build, new_root=new_build))
        else:
            console.print(
                f'[dim]No files were different between "{escape(old_build)}" '
                f'and "{escape(new_build)}", exiting[/dim]'
            )
        raise typer.Exit(code=0)

    staging_dir = Path(output_dir or cfg.package.output_dir).resolve()
    archive_path: Optional[Path] = None
    try:
        if result.changed:
            if verbose:
                console.print("[yellow]Copying over changed files...[/yellow]", end=" ")
            stage_changes(Path(new_build), result.changed, staging_dir)
            if verbose:
                console.print("[green]Done[/green]")
        else:
            staging_dir.mkdir(parents=True, exist_ok=True)

        if cfg.package.archive and not no_archive:
            if verbose:
                console.print("[yellow]Zipping changed files...[/yellow]", end=" ")
            archive_path = create_archive(staging_dir)
            if verbose:
                console.print("[green]Done[/green]")
    except StagingError as exc:
        raise _fail("Staging error", exc) from exc

    if fmt == "json":
        print(json_report.render(
            result,
            old_root=old_build,
            new_root=new_build,
            archive=str(archive_path) if archive_path else None,
        ))
        raise typer.Exit(code=0)

    terminal.render(result, show_summary=cfg.output.show_summary, split_changes=False, console=console)

    relative_dir = os.path.relpath(staging_dir, Path.cwd())
    console.print()
    if archive_path is not None:
        console.print(
            f"All changed files have been copied to [cyan]{escape(relative_dir)}[/cyan], "
            f"and zipped in [cyan]{escape(relative_dir)}.zip[/cyan]"
        )
    else:
        console.print(f"All changed files have been copied to [cyan]{escape(relative_dir)}[/cyan]")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .builddiff.toml in the working directory."""
    from builddiff.config.defaults import DEFAULT_TOML
    from builddiff.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"builddiff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """builddiff — Package only what changed between two build outputs."""
