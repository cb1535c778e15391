"""Root test configuration: throwaway hapi pal projects on disk"""

import json
from pathlib import Path

import pytest


def _write_package(root: Path, deps: dict = None, **extra) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    path = root / "package.json"
    path.write_text(json.dumps({"name": root.name, "dependencies": deps or {}, **extra}))
    return path


def _install(root: Path, pkg: str, version: str) -> None:
    pkg_dir = root / "node_modules" / pkg
    pkg_dir.mkdir(parents=True, exist_ok=True)
    (pkg_dir / "package.json").write_text(json.dumps({"name": pkg, "version": version}))


@pytest.fixture(name="write_package")
def write_package_fixture():
    """Write a package.json with the given dependencies."""
    return _write_package


@pytest.fixture(name="install")
def install_fixture():
    """Fake an npm install of pkg@version under root/node_modules."""
    return _install


@pytest.fixture(name="project")
def project_fixture(tmp_path):
    """A project depending on haute-couture, with an empty lib/.hc.yaml."""
    root = tmp_path / "proj"
    (root / "lib").mkdir(parents=True)
    _write_package(root, {"@hapipal/haute-couture": "4.x.x", "@hapi/hapi": "21.x.x"})
    (root / "lib" / ".hc.yaml").write_text("")
    return root
