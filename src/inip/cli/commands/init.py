from __future__ import annotations

from pathlib import Path

import typer

from inip.cli.utils.files import write_file

DEFAULT_CONFIG_TOML = """\
[arena]
# bytes reserved up front for the file buffer, table slots and parsed strings
capacity = 1048576

[table]
# string table slots; must be a power of two, at most capacity/2 - 1 keys fit
capacity = 1024

[limits]
max_input_bytes = 524288
"""


def init_cmd(
    path: Path = typer.Argument(Path("."), help="Directory to write .inip.toml into."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    target = path.resolve() / ".inip.toml"
    if write_file(target, DEFAULT_CONFIG_TOML, force=force):
        typer.echo(f"Wrote {target}")
    else:
        typer.echo(f"{target} already exists (use --force to overwrite)")
