from __future__ import annotations

import typer
from rich.console import Console

from inip import __version__
from inip.cli.commands.init import init_cmd
from inip.cli.commands.parse import get_cmd, parse_cmd

app = typer.Typer(
    name="inip",
    help="Parse INI files into an arena-backed key/value table.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"inip {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", callback=_version_callback, is_eager=True
    ),
) -> None:
    pass


app.command("parse", help="Parse an INI file and print its entries.")(parse_cmd)
app.command("get", help="Print the value of one key.")(get_cmd)
app.command("init", help="Write a default .inip.toml.")(init_cmd)
