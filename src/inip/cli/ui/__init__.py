from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.theme import Theme

from inip.cli.ui.formatters import (
    EntriesRenderOptions,
    render_entries_table,
    render_error,
    render_parse_summary,
)

THEME = Theme(
    {
        "ok": "green",
        "warn": "yellow",
        "error": "bold red",
        "muted": "dim",
        "path": "cyan",
        "section": "magenta",
        "key": "bold",
    }
)


@dataclass(frozen=True)
class UI:
    console: Console
    err_console: Console
    verbose: bool = False


def get_ui(*, verbose: bool = False) -> UI:
    return UI(
        console=Console(theme=THEME),
        err_console=Console(theme=THEME, stderr=True),
        verbose=verbose,
    )


__all__ = [
    "EntriesRenderOptions",
    "UI",
    "get_ui",
    "render_entries_table",
    "render_error",
    "render_parse_summary",
]
