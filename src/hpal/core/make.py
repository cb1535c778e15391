"""Stub generation for a manifest place"""

import logging
from pathlib import Path
from typing import Optional

from hpal.core.example import print_example, print_requires, signature_to_example
from hpal.core.manifest import AMENDMENT_NAMES, find_item, load_manifest
from hpal.core.models import (
    Example, ExplicitExample, Manifest, ManifestItem, SignatureDerived,
)
from hpal.core.project import find_root
from hpal.exceptions import DisplayError


logger = logging.getLogger(__name__)


def example_value(example: Example):
    """Return the value to print for a resolved example."""
    if isinstance(example, ExplicitExample):
        return example.value
    if isinstance(example, SignatureDerived):
        return signature_to_example(example.args)
    return {}


def stub_path(manifest: Manifest, item: ManifestItem, name: Optional[str], as_dir: Optional[bool]) -> Path:
    """Where the stub for item goes, relative to the amendment file's directory."""
    base = manifest.file.parent
    if name:
        return base / item.place / f"{name}.js"
    if (item.list and as_dir is False) or (not item.list and not as_dir):
        return base / f"{item.place}.js"
    return base / item.place / "index.js"


def stub_contents(item: ManifestItem, name: Optional[str]) -> str:
    """JavaScript source for a new stub of item."""
    example = example_value(item.example)
    requires = print_requires(example)
    exported = [example] if item.list and not name else example

    lines = ["'use strict';", ""] if item.use_strict else []
    if requires:
        lines += [requires, ""]
    lines += [f"module.exports = {print_example(exported)};", ""]
    return "\n".join(lines)


def write_stub(path: Path, contents: str) -> None:
    """Create path (and its parents) with contents, refusing to overwrite."""
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with path.open("x", encoding="utf-8") as f:
            f.write(contents)
    except FileExistsError as e:
        raise DisplayError(f"The file {path} already exists.") from e


def make_stub(
    cwd: Path,
    place: Optional[str],
    name: Optional[str] = None,
    as_dir: Optional[bool] = None,
    names: tuple[str, ...] = AMENDMENT_NAMES,
    ) -> Path:
    """Generate a stub file for a manifest place and return its path."""
    root = find_root(cwd)
    if root is None:
        raise DisplayError("No nearby package.json found, you don't seem to be in a project.")

    manifest = load_manifest(root, cwd, names)
    places = ", ".join(manifest.places())

    if not place:
        raise DisplayError(f"Ah, but what to make? You must specify a haute-couture item. Try one of: {places}.")

    item = find_item(manifest, place)
    if item is None:
        raise DisplayError(f'We don\'t know anything about "{place}". Try one of: {places}.')

    if not item.list and name:
        raise DisplayError(f'{item.place} should be declared once and not in a list, so we can\'t use name "{name}".')

    path = stub_path(manifest, item, name, as_dir)
    write_stub(path, stub_contents(item, name))
    logger.info("Wrote %s", path)
    return path
