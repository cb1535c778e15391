"""Manifest loading: default haute-couture places plus project amendments from .hc.yaml"""

import logging
import os
from pathlib import Path
from typing import Any, Iterable, Optional

import inflect
import yaml
from pydantic import ValidationError

from hpal.core.models import (
    EmptyExample, Example, ExplicitExample, Manifest, ManifestEntry, ManifestItem, SignatureDerived,
)
from hpal.core.project import has_dependency
from hpal.exceptions import ManifestError, ManifestUnavailable


logger = logging.getLogger(__name__)

DEFAULT_MANIFEST = Path(__file__).parent.parent / "data" / "manifest.yaml"
FRAMEWORK_PACKAGE = "@hapipal/haute-couture"
AMENDMENT_NAMES = (".hc.yaml", ".hc.yml")
IGNORED_DIRS = {"node_modules"}

_inflect = inflect.engine()


def resolve_example(entry: ManifestEntry) -> Example:
    """Decide once how a place's example is produced: given outright, derived from a signature, or empty."""
    if "example" in entry.model_fields_set:
        return ExplicitExample(entry.example)
    if entry.signature:
        return SignatureDerived(tuple(entry.signature))
    return EmptyExample()


def to_item(entry: ManifestEntry) -> ManifestItem:
    return ManifestItem(
        place=entry.place,
        method=entry.method,
        list=entry.list,
        use_strict=entry.use_strict,
        example=resolve_example(entry),
    )


def pluralize(word: str) -> str:
    """Return a plural form of a place name ('route' -> 'routes', 'auth/strategy' -> 'auth/strategies')."""
    prefix, _, last = word.rpartition('/')
    if not last or _inflect.singular_noun(last):
        return word
    return f"{prefix}/{_inflect.plural_noun(last)}" if prefix else _inflect.plural_noun(last)


def find_item(manifest: Manifest, place: str) -> Optional[ManifestItem]:
    """Look a place up by name, then by its plural."""
    return manifest.get(place) or manifest.get(pluralize(place))


def _load_yaml(path: Path) -> Any:
    try:
        return yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid manifest file {path}: {e}") from e


def _validate(data: dict, source: Path) -> ManifestEntry:
    try:
        return ManifestEntry.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest entry in {source}: {e}") from e


def load_defaults(path: Path = DEFAULT_MANIFEST) -> list[ManifestEntry]:
    """Load the ordered default places."""
    data = _load_yaml(path) or []
    if not isinstance(data, list):
        raise ManifestError(f"Invalid manifest file {path}: expected a list of places")
    return [_validate(entry, path) for entry in data]


def apply_amendments(entries: list[ManifestEntry], amendments: dict, source: Path) -> list[ManifestEntry]:
    """Merge per-place overrides onto entries; `false` removes a place, unknown places are appended."""
    result = list(entries)
    for place, override in amendments.items():
        index = next((i for i, e in enumerate(result) if e.place == place), None)
        if override is False:
            if index is not None:
                del result[index]
            continue
        if not isinstance(override, dict):
            raise ManifestError(f"Invalid amendment for {place!r} in {source}: expected a mapping or false")
        base = result[index].model_dump(exclude_unset=True) if index is not None else {}
        amended = _validate({**base, **override, "place": place}, source)
        if index is None:
            result.append(amended)
        else:
            result[index] = amended
    return result


def _is_within(path: Path, other: Path) -> bool:
    return path == other or other in path.parents


def _outermost(paths: list[Path]) -> list[Path]:
    return [p for p in paths if not any(o != p and _is_within(p, o) for o in paths)]


def _amendment_dirs(root: Path, names: Iterable[str]) -> list[Path]:
    names = set(names)
    dirs = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in IGNORED_DIRS]
        if names.intersection(filenames):
            dirs.append(Path(dirpath))
    return sorted(dirs)


def _unambiguous(paths: list[Path], cwd: Path) -> Path:
    if len(paths) > 1:
        names = ", ".join(os.path.relpath(p, cwd) for p in paths)
        raise ManifestUnavailable(f"It's ambiguous which directory containing a .hc.yaml file to use: {names}")
    return paths[0]


def find_amendment_dir(root: Path, cwd: Path, names: Iterable[str] = AMENDMENT_NAMES) -> Optional[Path]:
    """Prefer the nearest ancestor of cwd holding an amendment file, then the nearest child, then any side path."""
    root, cwd = Path(root).resolve(), Path(cwd).resolve()
    dirs = _amendment_dirs(root, names)

    ancestors = [d for d in dirs if _is_within(cwd, d)]
    if ancestors:
        return max(ancestors, key=lambda d: len(d.parts))

    children = [d for d in dirs if _is_within(d, cwd)]
    if children:
        return _unambiguous(_outermost(children), cwd)

    if dirs:
        return _unambiguous(_outermost(dirs), cwd)

    return None


def load_manifest(
    root: Path,
    cwd: Path,
    names: Iterable[str] = AMENDMENT_NAMES,
    amendments_required: bool = True,
    ) -> Manifest:
    """Return the project's manifest: default places with its .hc.yaml amendments applied.

    Raises ManifestUnavailable when the project doesn't use haute-couture, when
    the amendment directory is ambiguous, or when amendments are required but
    missing. Raises ManifestError for malformed files.
    """
    names = tuple(names)
    if not has_dependency(root, FRAMEWORK_PACKAGE):
        raise ManifestUnavailable(
            f"Couldn't find the {FRAMEWORK_PACKAGE} package in this project. It may just need to be installed."
        )

    try:
        directory = find_amendment_dir(root, cwd, names)
    except ManifestUnavailable as err:
        if amendments_required:
            raise
        logger.debug("Ignoring amendments: %s", err)
        directory = None

    if directory is None and amendments_required:
        raise ManifestUnavailable("There's no directory in this project containing a .hc.yaml file.")

    file = next((directory / n for n in names if (directory / n).is_file()), None) if directory else None
    amendments = (_load_yaml(file) or {}) if file else {}
    if not isinstance(amendments, dict):
        raise ManifestError(f"Invalid manifest file {file}: expected a mapping of places")

    logger.debug("Using amendments from %s", file)
    entries = apply_amendments(load_defaults(), amendments, file)
    return Manifest(items=tuple(to_item(e) for e in entries), file=file)
