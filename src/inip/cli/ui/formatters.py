from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from inip.core.errors import InipError
from inip.core.models import ParseStats
from inip.parsers.types import IniEntry


def _short(s: str, max_len: int = 140) -> str:
    s = s or ""
    if len(s) <= max_len:
        return s
    return s[:max_len] + "…"


# ----------------------------
# Entry tables
# ----------------------------

@dataclass(frozen=True)
class EntriesRenderOptions:
    title: Optional[str] = None
    show_lines: bool = False        # source line column


def render_entries_table(
    console: Console,
    entries: Sequence[IniEntry],
    *,
    opts: Optional[EntriesRenderOptions] = None,
) -> None:
    opts = opts or EntriesRenderOptions()

    if not entries:
        console.print("[muted]No entries.[/muted]")
        return

    table = Table(title=opts.title or f"Entries ({len(entries)})", show_lines=False)
    if opts.show_lines:
        table.add_column("Line", justify="right", no_wrap=True)
    table.add_column("Section", style="section", no_wrap=True)
    table.add_column("Key", style="key", no_wrap=True)
    table.add_column("Value")

    for e in entries:
        row: List[object] = []
        if opts.show_lines:
            row.append(str(e.line or ""))
        row.extend(
            [
                Text(e.section or "-", style="section" if e.section else "muted"),
                e.key,
                _short(e.value, 120),
            ]
        )
        table.add_row(*row)

    console.print(table)


# ----------------------------
# Errors
# ----------------------------

def render_error(console: Console, error: Exception, *, source: Optional[str] = None) -> None:
    prefix = f"{source}: " if source else ""
    console.print(f"[error]error:[/error] {escape(prefix + str(error))}", highlight=False, soft_wrap=True)
    if isinstance(error, InipError) and error.hint:
        console.print(f"[muted]hint: {escape(error.hint)}[/muted]", highlight=False, soft_wrap=True)


# ----------------------------
# Summaries / stats
# ----------------------------

def render_parse_summary(
    console: Console,
    stats: ParseStats,
    *,
    header: str = "Summary",
    source: Optional[str] = None,
) -> None:
    cols: List[str] = [
        "source",
        "bytes_read",
        "entries",
        "keys",
        "sections",
        "arena_used",
        "table_capacity",
        "duration_ms",
    ]
    vals: List[str] = [
        source or "-",
        str(stats.bytes_read),
        str(stats.entries),
        str(stats.keys),
        str(stats.sections),
        f"{stats.arena_used}/{stats.arena_capacity}",
        str(stats.table_capacity),
        str(stats.duration_ms),
    ]

    table = Table(title=header, show_header=True, show_lines=False)
    for c in cols:
        table.add_column(c, style="bold", no_wrap=True)
    table.add_row(*vals)

    console.print()
    console.print(table)
