from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.markup import escape

from inip.cli.ui import (
    UI,
    EntriesRenderOptions,
    get_ui,
    render_entries_table,
    render_error,
    render_parse_summary,
)
from inip.cli.utils.log import configure_logging
from inip.core.config import LoadedConfig, load_config
from inip.core.engine import ParseResult, parse_file
from inip.core.errors import ExitCode, InipError


def _cli_overrides(
    arena_capacity: Optional[int],
    table_capacity: Optional[int],
    max_input_bytes: Optional[int],
) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if arena_capacity is not None:
        overrides.setdefault("arena", {})["capacity"] = arena_capacity
    if table_capacity is not None:
        overrides.setdefault("table", {})["capacity"] = table_capacity
    if max_input_bytes is not None:
        overrides.setdefault("limits", {})["max_input_bytes"] = max_input_bytes
    return overrides


def _load_and_parse(
    ui: UI,
    path: Path,
    overrides: Dict[str, Any],
) -> ParseResult:
    """Resolve config for `path` and parse it; renders errors and exits on failure."""
    try:
        loaded: LoadedConfig = load_config(start_dir=path.resolve().parent, cli_overrides=overrides)
    except (ValueError, OSError) as e:
        # bad TOML, a value the config models reject, or an unreadable file
        render_error(ui.err_console, e, source="config")
        raise typer.Exit(code=int(ExitCode.ERROR))

    if ui.verbose:
        ui.err_console.print("[bold]Config sources:[/bold]")
        ui.err_console.print(f"  global:  {loaded.global_path or '-'}")
        ui.err_console.print(f"  project: {loaded.project_path or '-'}")

    try:
        return parse_file(path, loaded.config)
    except InipError as e:
        render_error(ui.err_console, e, source=str(path))
        raise typer.Exit(code=int(ExitCode.ERROR))


def parse_cmd(
    path: Path = typer.Argument(..., help="INI file to parse."),
    as_json: bool = typer.Option(
        False, "--json", help="Print sections and keys as a JSON object."
    ),
    show_lines: bool = typer.Option(
        False, "--lines", help="Show the source line of every entry."
    ),
    arena_capacity: Optional[int] = typer.Option(
        None, "--arena-capacity", min=0, help="Arena size in bytes (overrides config)."
    ),
    table_capacity: Optional[int] = typer.Option(
        None, "--table-capacity", min=2, help="String table slots, a power of two (overrides config)."
    ),
    max_input_bytes: Optional[int] = typer.Option(
        None, "--max-input-bytes", min=0, help="Refuse files larger than this (overrides config)."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output."),
) -> None:
    configure_logging(verbose=verbose)
    ui = get_ui(verbose=verbose)

    result = _load_and_parse(
        ui, path, _cli_overrides(arena_capacity, table_capacity, max_input_bytes)
    )

    with result.document as doc:
        if as_json:
            typer.echo(json.dumps(doc.to_dict(), indent=2))
        else:
            render_entries_table(
                ui.console,
                doc.entries,
                opts=EntriesRenderOptions(
                    title=f"{path.name} ({len(doc.entries)} entries)",
                    show_lines=show_lines,
                ),
            )
        if ui.verbose:
            render_parse_summary(ui.err_console, result.stats, source=result.source.name)

    raise typer.Exit(code=int(ExitCode.OK))


def get_cmd(
    path: Path = typer.Argument(..., help="INI file to read."),
    section: str = typer.Argument(..., help='Section name ("" for keys before the first header).'),
    key: str = typer.Argument(..., help="Key inside the section."),
    default: Optional[str] = typer.Option(
        None, "--default", help="Print this instead of failing when the key is absent."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Verbose output."),
) -> None:
    configure_logging(verbose=verbose)
    ui = get_ui(verbose=verbose)

    result = _load_and_parse(ui, path, {})

    with result.document as doc:
        value = doc.get(section, key)

    if value is None:
        if default is not None:
            typer.echo(default)
            raise typer.Exit(code=int(ExitCode.OK))
        where = f"[{section}]" if section else "the implicit section"
        ui.err_console.print(
            f"[warn]{escape(f'{key} not found in {where}')}[/warn]", highlight=False, soft_wrap=True
        )
        raise typer.Exit(code=int(ExitCode.NOT_FOUND))

    typer.echo(value)
    raise typer.Exit(code=int(ExitCode.OK))
