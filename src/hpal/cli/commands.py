"""CLI command implementations"""

import asyncio
import os
from pathlib import Path
from typing import Annotated, Optional

import typer

from hpal.config import Settings, load_config
from hpal.core.docs import DocsTarget, lookup
from hpal.core.make import make_stub
from hpal.exceptions import DisplayError, ManifestError


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.secho(f"Error: {msg}", err=True, fg=typer.colors.RED)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def docs_cmd(
    query: Annotated[str, typer.Argument(help="Section to search for, e.g. 'route' or '#server.route()'")],
    item_query: Annotated[Optional[str], typer.Argument(help="List item within the section, e.g. an option name")] = None,
    pkg: Annotated[str, typer.Option("--pkg", "-p", help="Package whose API.md to search")] = "hapi",
    ver: Annotated[Optional[str], typer.Option("--ver", help="Package version or git ref")] = None,
    color: Annotated[Optional[bool], typer.Option("--color/--no-color", help="Colorize output")] = None,
    width: Annotated[Optional[int], typer.Option("--width", help="Render width in columns")] = None,
    ):
    """Search a package's API docs and print the matching section."""
    settings = _settings(overrides={"color": color, "width": width})

    def notify(target: DocsTarget) -> None:
        typer.secho(f"Searching docs from {target.owner}/{target.pkg} @ {target.ref}...\n", fg=typer.colors.BRIGHT_BLACK)

    try:
        output = asyncio.run(lookup(pkg, ver, query, item_query, cwd=Path.cwd(), settings=settings, notify=notify))
    except DisplayError as e:
        _fail(str(e))
    except ManifestError as e:
        _fail("Could not read the project manifest", e)

    if output is None:
        described = f'"{query}"' + (f' / "{item_query}"' if item_query else '')
        typer.secho(f"Sorry, couldn't find documentation for {described}.", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(1)

    typer.echo(output, nl=False)


def make_cmd(
    place: Annotated[Optional[str], typer.Argument(help="Manifest place, e.g. routes or plugins")] = None,
    name: Annotated[Optional[str], typer.Argument(help="File name for an item of a list place")] = None,
    as_dir: Annotated[bool, typer.Option("--as-dir", help="Write <place>/index.js")] = False,
    as_file: Annotated[bool, typer.Option("--as-file", help="Write <place>.js")] = False,
    ):
    """Generate a stub file for a haute-couture place."""
    if as_dir and as_file:
        _fail("Options --as-dir and --as-file can't be used together.")
    settings = _settings()
    layout = True if as_dir else (False if as_file else None)
    cwd = Path.cwd()

    try:
        path = make_stub(cwd, place, name, layout, tuple(settings.manifest_names))
    except DisplayError as e:
        _fail(str(e))
    except ManifestError as e:
        _fail("Could not read the project manifest", e)

    typer.secho(f"Wrote {os.path.relpath(path, cwd)}", fg=typer.colors.GREEN)
