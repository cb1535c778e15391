"""Unit tests for core/manifest.py"""

import os
from pathlib import Path

import pytest

from hpal.core.manifest import (
    apply_amendments, find_amendment_dir, find_item, load_defaults, load_manifest,
    pluralize, resolve_example,
)
from hpal.core.models import (
    EmptyExample, ExplicitExample, Manifest, ManifestEntry, ManifestItem, SignatureDerived,
)
from hpal.exceptions import ManifestError, ManifestUnavailable


def _hc(directory, text=""):
    directory.mkdir(parents=True, exist_ok=True)
    (directory / ".hc.yaml").write_text(text)
    return directory


@pytest.fixture(name="defaults")
def defaults_fixture():
    return load_defaults()


# --- examples ---

def test_resolve_example_explicit():
    """An example key wins, even when a signature is also present."""
    entry = ManifestEntry(place="bind", example={"a": 1}, signature=["x"])
    assert resolve_example(entry) == ExplicitExample({"a": 1})


def test_resolve_example_explicit_null():
    """An example that is present but null is still explicit."""
    entry = ManifestEntry.model_validate({"place": "bind", "example": None})
    assert resolve_example(entry) == ExplicitExample(None)


def test_resolve_example_signature():
    """Without an example, a signature drives the example."""
    entry = ManifestEntry(place="plugins", signature=["plugins", "[options]"])
    assert resolve_example(entry) == SignatureDerived(("plugins", "[options]"))


def test_resolve_example_empty():
    """Neither example nor signature gives an empty example."""
    assert resolve_example(ManifestEntry(place="x")) == EmptyExample()


# --- lookup ---

@pytest.mark.parametrize("word,expected", [
    ("route", "routes"),
    ("routes", "routes"),
    ("plugin", "plugins"),
    ("auth/strategy", "auth/strategies"),
    ("day", "days"),
    ("box", "boxes"),
    ("branch", "branches"),
    ("auth/strategies", "auth/strategies"),
    ("person", "people"),
])
def test_pluralize(word, expected):
    """Singular words are pluralized, plural ones kept; only the last path segment changes."""
    assert pluralize(word) == expected


def test_find_item_plural():
    """Places can be named in the singular."""
    manifest = Manifest(items=(ManifestItem(place="routes", method="route", list=True),))
    assert find_item(manifest, "routes").method == "route"
    assert find_item(manifest, "route").place == "routes"
    assert find_item(manifest, "nothing") is None


def test_load_defaults(defaults):
    """The bundled places load in order with their settings."""
    places = [e.place for e in defaults]
    assert places[0] == "path"
    assert places[-1] == "subscriptions"
    assert places.index("plugins") < places.index("routes")
    routes = next(e for e in defaults if e.place == "routes")
    assert routes.method == "route"
    assert routes.list is True
    assert isinstance(resolve_example(routes), ExplicitExample)


# --- amendments ---

def test_amendment_removes_place(defaults, tmp_path):
    """false drops a place."""
    entries = apply_amendments(defaults, {"routes": False}, tmp_path)
    assert "routes" not in [e.place for e in entries]


def test_amendment_merges_place(defaults, tmp_path):
    """Overrides merge onto the existing entry and keep its position."""
    entries = apply_amendments(defaults, {"routes": {"use_strict": False}}, tmp_path)
    index = [e.place for e in defaults].index("routes")
    amended = entries[index]
    assert amended.place == "routes"
    assert amended.use_strict is False
    assert amended.method == "route"
    assert isinstance(resolve_example(amended), ExplicitExample)


def test_amendment_appends_place(defaults, tmp_path):
    """Unknown places are appended."""
    entries = apply_amendments(defaults, {"models": {"list": True, "signature": ["models"]}}, tmp_path)
    assert entries[-1].place == "models"
    assert entries[-1].list is True


def test_amendment_invalid(defaults, tmp_path):
    """Anything other than a mapping or false is rejected, as are unknown fields."""
    with pytest.raises(ManifestError):
        apply_amendments(defaults, {"routes": "yes"}, tmp_path)
    with pytest.raises(ManifestError):
        apply_amendments(defaults, {"routes": {"bogus": 1}}, tmp_path)


# --- amendment directory ---

def test_amendment_dir_deepest_ancestor(tmp_path):
    """The nearest ancestor of cwd with an amendment file wins."""
    _hc(tmp_path / "lib")
    inner = _hc(tmp_path / "lib" / "plugins")
    cwd = inner / "deeper"
    cwd.mkdir()
    assert find_amendment_dir(tmp_path, cwd) == inner.resolve()


def test_amendment_dir_child(tmp_path):
    """Below cwd, the outermost amendment directory is used."""
    lib = _hc(tmp_path / "lib")
    _hc(tmp_path / "lib" / "plugins" / "x")
    assert find_amendment_dir(tmp_path, tmp_path) == lib.resolve()


def test_amendment_dir_ambiguous(tmp_path):
    """Sibling amendment directories can't be chosen between."""
    _hc(tmp_path / "a")
    _hc(tmp_path / "b")
    with pytest.raises(ManifestUnavailable, match="ambiguous"):
        find_amendment_dir(tmp_path, tmp_path)


def test_amendment_dir_side_path(tmp_path):
    """An amendment directory off to the side of cwd is still found."""
    lib = _hc(tmp_path / "lib")
    cwd = tmp_path / "test"
    cwd.mkdir()
    assert find_amendment_dir(tmp_path, cwd) == lib.resolve()


def test_amendment_dir_ignores_node_modules(tmp_path):
    """Amendment files inside installed packages don't count."""
    _hc(tmp_path / "node_modules" / "some-plugin" / "lib")
    assert find_amendment_dir(tmp_path, tmp_path) is None


def test_amendment_dir_yml(tmp_path):
    """The .yml spelling is recognized too."""
    lib = tmp_path / "lib"
    lib.mkdir()
    (lib / ".hc.yml").write_text("")
    assert find_amendment_dir(tmp_path, tmp_path) == lib.resolve()


# --- load_manifest ---

def test_load_manifest(project):
    """A haute-couture project gets the defaults and the amendment file location."""
    manifest = load_manifest(project, project)
    assert manifest.file == (project / "lib" / ".hc.yaml").resolve()
    assert manifest.places()[0] == "path"
    assert manifest.get("routes").list is True


def test_load_manifest_amended(project):
    """Amendments in .hc.yaml are applied."""
    (project / "lib" / ".hc.yaml").write_text("routes: false\nmodels:\n  list: true\n")
    manifest = load_manifest(project, project)
    assert manifest.get("routes") is None
    assert manifest.places()[-1] == "models"


def test_load_manifest_without_framework(tmp_path, write_package):
    """Projects not using haute-couture have no manifest."""
    write_package(tmp_path, {"@hapi/hapi": "21.x.x"})
    with pytest.raises(ManifestUnavailable, match="@hapipal/haute-couture"):
        load_manifest(tmp_path, tmp_path)


def test_load_manifest_dev_dependency(tmp_path, write_package):
    """haute-couture as a devDependency counts."""
    write_package(tmp_path, devDependencies={"@hapipal/haute-couture": "4.x.x"})
    manifest = load_manifest(tmp_path, tmp_path, amendments_required=False)
    assert manifest.file is None


def test_load_manifest_amendments_required(project):
    """Without any .hc.yaml, a required manifest is unavailable."""
    (project / "lib" / ".hc.yaml").unlink()
    with pytest.raises(ManifestUnavailable, match="no directory"):
        load_manifest(project, project)
    assert load_manifest(project, project, amendments_required=False).get("routes") is not None


def test_load_manifest_malformed(project):
    """Broken YAML or a non-mapping amendment file is a ManifestError."""
    hc = project / "lib" / ".hc.yaml"
    hc.write_text("routes: [unclosed\n")
    with pytest.raises(ManifestError):
        load_manifest(project, project)
    hc.write_text("- routes\n")
    with pytest.raises(ManifestError):
        load_manifest(project, project)


def test_amendment_dir_prunes_installed_packages(tmp_path, monkeypatch):
    """Installed packages are never listed while looking for amendment files."""
    lib = _hc(tmp_path / "lib")
    for i in range(5):
        (tmp_path / "node_modules" / f"pkg-{i}" / "lib").mkdir(parents=True)

    scanned = []
    real_scandir = os.scandir

    def spy(path="."):
        scanned.append(os.fspath(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", spy)
    assert find_amendment_dir(tmp_path, tmp_path) == lib.resolve()
    assert scanned
    assert not [p for p in scanned if "node_modules" in Path(p).relative_to(tmp_path.resolve()).parts]


def test_load_manifest_ambiguous_optional(project):
    """An ambiguous amendment directory still yields the default places when amendments are optional."""
    (project / "lib" / ".hc.yaml").unlink()
    _hc(project / "a", "routes: false\n")
    _hc(project / "b")
    with pytest.raises(ManifestUnavailable, match="ambiguous"):
        load_manifest(project, project)

    manifest = load_manifest(project, project, amendments_required=False)
    assert manifest.file is None
    assert manifest.get("routes").method == "route"


def test_load_manifest_malformed_package_json(tmp_path):
    """An unreadable package.json means there is no manifest, not a crash."""
    (tmp_path / "package.json").write_text("{ not json")
    with pytest.raises(ManifestUnavailable, match="package.json"):
        load_manifest(tmp_path, tmp_path, amendments_required=False)
