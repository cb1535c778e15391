"""Project root discovery and installed npm package lookup"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from hpal.exceptions import ManifestUnavailable


logger = logging.getLogger(__name__)

PACKAGE_FILE = "package.json"


def find_root(cwd: Path) -> Optional[Path]:
    """Return the nearest directory at or above cwd containing a package.json, else None."""
    cwd = Path(cwd).resolve()
    for path in (cwd, *cwd.parents):
        if (path / PACKAGE_FILE).is_file():
            return path
    return None


def read_package(path: Path) -> dict[str, Any]:
    """Read and parse a package.json file."""
    return json.loads(Path(path).read_text(encoding="utf-8"))


def installed_version(root: Path, pkg: str) -> Optional[str]:
    """Return the version of pkg installed under root/node_modules, or None if it isn't installed."""
    path = Path(root) / "node_modules" / pkg / PACKAGE_FILE
    try:
        version = read_package(path).get("version")
    except FileNotFoundError:
        return None
    logger.debug("Installed %s version: %s", pkg, version)
    return version


def has_dependency(root: Path, pkg: str) -> bool:
    """Return True when the project's package.json lists pkg as a dependency or devDependency."""
    path = Path(root) / PACKAGE_FILE
    try:
        meta = read_package(path)
    except json.JSONDecodeError as e:
        raise ManifestUnavailable(f"Couldn't read {path}: {e}") from e
    return any(pkg in (meta.get(key) or {}) for key in ("dependencies", "devDependencies"))
