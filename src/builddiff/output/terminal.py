"""Rich terminal reporter — coloured path lists and a summary."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape

from builddiff.compare.engine import ComparisonResult


def _printable(path: str) -> str:
    # Undecodable file name bytes arrive as surrogates; show them as U+FFFD
    return path.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def _print_section(console: Console, title: str, style: str, paths: Sequence[str]) -> None:
    if not paths:
        return
    console.print()
    console.print(f"[{style}]{title}[/{style}]")
    for path in paths:
        console.print(f"  {escape(_printable(path))}", soft_wrap=True)


def render(
    result: ComparisonResult,
    *,
    show_summary: bool = True,
    split_changes: bool = True,
    console: Optional[Console] = None,
) -> None:
    """Print the classification to the terminal using Rich.

    With *split_changes* off, added and updated paths are listed together
    as "changed", which is how an upload package sees them.
    """
    console = console or Console(stderr=True)

    if result.is_empty:
        console.print()
        console.print("[bold green]✅ No differences between the two builds.[/bold green]")
        return

    _print_section(console, "The following files were deleted:", "bold red", result.deleted)
    if split_changes:
        _print_section(console, "The following files were added:", "bold green", result.added)
        _print_section(console, "The following files were updated:", "bold green", result.updated)
    else:
        _print_section(console, "The following files were changed:", "bold green", result.changed)

    if show_summary:
        _print_summary(console, result)


def _print_summary(console: Console, result: ComparisonResult) -> None:
    console.print()
    console.print(f"[dim]Added:[/dim]    {len(result.added)}")
    console.print(f"[dim]Updated:[/dim]  {len(result.updated)}")
    console.print(f"[dim]Deleted:[/dim]  {len(result.deleted)}")
