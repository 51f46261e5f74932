"""Rich terminal reporter — change-record table and digest summary."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from diffdigest.digest.composer import DigestStats
from diffdigest.git.models import ChangeKind, ChangeRecord

_KIND_STYLE = {
    ChangeKind.ADDED: "green",
    ChangeKind.MODIFIED: "yellow",
    ChangeKind.DELETED: "red",
    ChangeKind.RENAMED: "cyan",
}


def render_records(records: Sequence[ChangeRecord], console: Optional[Console] = None) -> None:
    """Print the parsed change records as a table."""
    console = console or Console(stderr=True)

    if not records:
        console.print("[dim]No staged changes.[/dim]")
        return

    table = Table(
        title=f"{len(records)} staged files",
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Change", justify="center", width=10)
    table.add_column("Path", style="magenta")
    table.add_column("Binary", justify="center")
    table.add_column("Diff chars", justify="right", style="green")

    for record in records:
        style = _KIND_STYLE.get(record.kind, "")
        table.add_row(
            f"[{style}]{record.kind.label}[/{style}]",
            escape(record.path),
            "yes" if record.is_binary else "",
            str(len(record.diff_text)) if record.diff_text else "-",
        )

    console.print(table)


def render_summary(stats: DigestStats, console: Optional[Console] = None) -> None:
    console = console or Console(stderr=True)
    console.print()
    console.print(f"[dim]Files:[/dim]           {stats.files}")
    console.print(
        f"[dim]Budget:[/dim]          {stats.total_budget} tokens "
        f"({stats.per_file_budget} per file)"
    )
    console.print(f"[dim]Truncated:[/dim]       {stats.truncated_files}")
    console.print(f"[dim]Chunks kept:[/dim]     {stats.chunks_kept}")
    console.print(f"[dim]Digest size:[/dim]     {stats.output_chars} chars")
    console.print(f"[dim]Duration:[/dim]        {stats.duration_ms:.0f}ms")
