"""CLI entrypoint: Typer app definition, logging setup and command registration"""

import logging
from typing import Annotated

import typer

from hpal.cli.commands import _settings, docs_cmd, make_cmd


LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

app = typer.Typer(name="hpal", no_args_is_help=True, help="Developer tooling for hapi pal projects")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")] = False,
    ):
    """Configure logging before any command runs."""
    level = "DEBUG" if verbose else _settings().log_level
    logging.basicConfig(level=level, format=LOG_FORMAT)


app.command(name="docs")(docs_cmd)
app.command(name="make")(make_cmd)
