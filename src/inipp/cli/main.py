import enum
import logging
import pathlib
import sys
from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.table import Table

from .. import files
from ..convert import extract
from ..exceptions import InippError
from ..ini import Ini

from .console import console, err_console

LOG_LEVELS = [
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
]


class Scalar(str, enum.Enum):
    STR = "str"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"


SCALAR_TYPES = {
    Scalar.STR: str,
    Scalar.INT: int,
    Scalar.FLOAT: float,
    Scalar.BOOL: bool,
}

File = Annotated[
    pathlib.Path, typer.Argument(exists=True, dir_okay=False, resolve_path=True)
]
Encoding = Annotated[
    Optional[str],
    typer.Option(help="File encoding. If not given, it is detected."),
]
Interpolate = Annotated[
    bool, typer.Option(help="Resolve %(key) references before output.")
]

app = typer.Typer(no_args_is_help=True)


@app.callback()
def common(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, min=0, max=5, help="set logging level"
        ),
    ] = 0
):
    """Read, check and rewrite INI files."""

    if verbose == 0:
        logging.disable()
    else:
        logging.basicConfig(level=LOG_LEVELS[verbose - 1])


def _read(file: pathlib.Path, encoding: str | None, interpolate: bool = False) -> Ini:
    try:
        config = files.read(file, encoding)
    except InippError as e:
        err_console.print(f"[red]error:[/red] {escape(str(e))}")
        raise typer.Exit(code=2)

    if interpolate:
        config.interpolate()

    return config


@app.command()
def check(file: File, encoding: Encoding = None):
    """Report lines that are not valid INI."""

    config = _read(file, encoding)

    for line in config.errors:
        typer.echo(line)

    if config.errors:
        err_console.print(f"{len(config.errors)} invalid line(s) in {escape(str(file))}")
        raise typer.Exit(code=1)


@app.command()
def show(
    file: File,
    section: Annotated[
        Optional[str], typer.Option(help="Only show this section.")
    ] = None,
    encoding: Encoding = None,
    interpolate: Interpolate = False,
):
    """Show the properties of an INI file as a table."""

    config = _read(file, encoding, interpolate)

    table = Table()
    for column in ("Section", "Key", "Value"):
        table.add_column(column)

    names = sorted(config) if section is None else [section]

    for name in names:
        for key, value in sorted(config.get(name, {}).items()):
            table.add_row(escape(name), escape(key), escape(value))

    console.print(table)


@app.command(name="format")
def format_(
    file: File,
    output: Annotated[
        Optional[pathlib.Path],
        typer.Option("--output", "-o", dir_okay=False, help="Write here instead of stdout."),
    ] = None,
    encoding: Encoding = None,
    interpolate: Interpolate = False,
):
    """Rewrite an INI file with sorted sections and keys."""

    config = _read(file, encoding, interpolate)

    if output is None:
        config.generate(sys.stdout)
    else:
        files.write(config, output, encoding or "utf-8")


@app.command()
def get(
    file: File,
    section: str,
    key: str,
    kind: Annotated[
        Scalar, typer.Option("--type", "-t", help="Convert the value to this type.")
    ] = Scalar.STR,
    encoding: Encoding = None,
    interpolate: Interpolate = False,
):
    """Print a single value."""

    config = _read(file, encoding, interpolate)

    try:
        value = config[section][key]
    except KeyError:
        err_console.print(f"not found: [{section}] {key}", markup=False)
        raise typer.Exit(code=1)

    ok, result = extract(value, SCALAR_TYPES[kind])
    if not ok:
        err_console.print(f"not a valid {kind.value}: {value}", markup=False)
        raise typer.Exit(code=1)

    if isinstance(result, bool):
        result = "true" if result else "false"

    typer.echo(result)
