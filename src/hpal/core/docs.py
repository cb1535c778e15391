"""Docs lookup: resolve a ref, fetch API.md, and extract the fragment matching a query"""

import asyncio
import logging
import re
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import httpx

from hpal.config import Settings
from hpal.core.extract.items import extract_list_item
from hpal.core.extract.sections import extract_section
from hpal.core.fetch import fetch_api_doc
from hpal.core.manifest import find_item, load_manifest
from hpal.core.matchers import heading_matchers, item_matcher
from hpal.core.models import Manifest, ManifestItem, Matcher, MarkdownDoc
from hpal.core.parse import parse_markdown
from hpal.core.project import find_root, installed_version
from hpal.core.render import render_markdown, render_terminal
from hpal.exceptions import FetchError, ManifestUnavailable, NotFoundError, OfflineError


logger = logging.getLogger(__name__)

HAPIPAL = 'hapipal'
HAPI = 'hapi'
SIDEWAY = 'sideway'

_HAPIPAL_PACKAGES = [
    'schwifty', 'schmervice', 'toys', 'haute-couture', 'hodgepodge',
    'underdog', 'hecks', 'lalalambda', 'avocat', 'ahem',
]

_HAPI_PACKAGES = [
    'accept', 'address', 'ammo', 'b64', 'basic', 'bell', 'boom', 'bossy', 'bounce',
    'call', 'catbox', 'catbox-memecached', 'catbox-memory', 'catbox-redis', 'code',
    'content', 'cookie', 'crumb', 'cryptiles', 'glue', 'good', 'good-console',
    'good-squeeze', 'h2o2', 'hapi', 'hawk', 'heavy', 'hoek', 'inert', 'iron', 'joi',
    'joi-date', 'lab', 'mimos', 'nes', 'nigel', 'oppsy', 'pez', 'podium', 'scooter',
    'shot', 'sntp', 'somever', 'statehood', 'subtext', 'teamwork', 'topo', 'vise',
    'vision', 'wreck', 'yar',
]

# npm scope each package is published under
PKG_SCOPES: dict[str, str] = {
    **{pkg: HAPIPAL for pkg in _HAPIPAL_PACKAGES},
    **{pkg: HAPI for pkg in _HAPI_PACKAGES},
}

# GitHub owner for packages not living under the default owner
PKG_OWNERS: dict[str, str] = {
    **{pkg: HAPIPAL for pkg in _HAPIPAL_PACKAGES},
    'joi': SIDEWAY,
    'joi-date': SIDEWAY,
}

SEMVER_RE = re.compile(
    r'^[v=]?\s*'
    r'((?:0|[1-9]\d*)\.(?:0|[1-9]\d*)\.(?:0|[1-9]\d*)'
    r'(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?'
    r'(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?)$'
)

_DNS_FAILURE_MESSAGES = (
    'getaddrinfo',
    'name or service not known',
    'nodename nor servname',
    'temporary failure in name resolution',
    'no address associated with hostname',
)


@dataclass(frozen=True)
class DocsTarget:
    """Where a package's docs live."""
    owner: str
    pkg:   str
    ref:   str
    root:  Optional[Path] = None


def parse_version(version: Optional[str]) -> Optional[str]:
    """Return the normalized semver in version, or None if it isn't one."""
    if not version:
        return None
    m = SEMVER_RE.match(version.strip())
    return m.group(1) if m else None


def resolve_version(pkg: str, version: Optional[str], root: Optional[Path]) -> Optional[str]:
    """Return the explicit version, else the version installed in the project (scoped name first)."""
    if version or root is None:
        return version
    if pkg in PKG_SCOPES:
        version = installed_version(root, f"@{PKG_SCOPES[pkg]}/{pkg}")
    return version or installed_version(root, pkg)


def resolve_ref(version: Optional[str], default_ref: str = 'master') -> str:
    """A semver becomes a v-prefixed tag; any other version string is used as the ref as-is."""
    parsed = parse_version(version)
    if parsed:
        return f"v{parsed}"
    return version or default_ref


def resolve_target(pkg: str, version: Optional[str], cwd: Path, settings: Settings) -> DocsTarget:
    root = find_root(cwd)
    ref = resolve_ref(resolve_version(pkg, version, root), settings.default_ref)
    owner = PKG_OWNERS.get(pkg, settings.default_owner)
    logger.debug("Docs for %s resolve to %s/%s @ %s", pkg, owner, pkg, ref)
    return DocsTarget(owner=owner, pkg=pkg, ref=ref, root=root)


def try_in_order(
    doc: MarkdownDoc,
    matchers: list[Matcher],
    *stages: Callable[[MarkdownDoc], MarkdownDoc],
    ) -> Optional[MarkdownDoc]:
    """Extract a section with each matcher in turn, piping it through stages; first non-empty result wins."""
    for i, matcher in enumerate(matchers):
        result = extract_section(doc, matcher)
        for stage in stages:
            result = stage(result)
        if result:
            logger.debug("Matcher %d of %d matched", i + 1, len(matchers))
            return result
    return None


def find_fragment(
    text: str,
    query: str,
    item_query: Optional[str] = None,
    item: Optional[ManifestItem] = None,
    ) -> Optional[MarkdownDoc]:
    """Return the section (or single list item) of a markdown document best matching query."""
    doc = parse_markdown(text)
    matchers = heading_matchers(query.lower(), item)
    if not item_query:
        return try_in_order(doc, matchers)
    list_item = item_matcher(item_query)
    return try_in_order(doc, matchers, lambda section: extract_list_item(section, list_item))


def _is_offline(err: BaseException) -> bool:
    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        if isinstance(err, socket.gaierror):
            return True
        if any(msg in str(err).lower() for msg in _DNS_FAILURE_MESSAGES):
            return True
        err = err.__cause__ or err.__context__
    return False


def classify_fetch_error(err: httpx.HTTPError, target: DocsTarget) -> FetchError:
    """Map an httpx failure to NotFoundError, OfflineError, or FetchError."""
    pkg, owner, ref = target.pkg, target.owner, target.ref
    if isinstance(err, httpx.HTTPStatusError) and err.response.status_code == 404:
        return NotFoundError(
            f"Couldn't find docs for that version of {pkg}. Are you sure {owner}/{pkg} @ {ref} exists?"
        )
    if isinstance(err, httpx.ConnectError) and _is_offline(err):
        return OfflineError(
            f"Could not fetch the {pkg} docs. It seems you may be offline, ensure you have a connection then try again."
        )
    return FetchError(f"Could not fetch the {pkg} docs: {err}")


async def get_api(target: DocsTarget, settings: Settings, client: Optional[httpx.AsyncClient] = None) -> str:
    try:
        return await fetch_api_doc(
            target.owner, target.pkg, target.ref,
            client=client, template=settings.docs_url, timeout=settings.fetch_timeout,
        )
    except httpx.HTTPError as err:
        raise classify_fetch_error(err, target) from err


async def get_manifest(root: Optional[Path], cwd: Path, settings: Settings) -> Optional[Manifest]:
    """Load the project's manifest off the event loop; None when there's no usable one."""
    if root is None:
        return None
    try:
        return await asyncio.to_thread(
            load_manifest, root, cwd, settings.manifest_names, amendments_required=False,
        )
    except ManifestUnavailable as err:
        logger.debug("Proceeding without a manifest: %s", err)
        return None


async def lookup(
    pkg: str,
    version: Optional[str],
    query: str,
    item_query: Optional[str] = None,
    *,
    cwd: Path,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
    notify: Optional[Callable[[DocsTarget], None]] = None,
    ) -> Optional[str]:
    """Answer one docs query: the rendered matching fragment, or None when nothing matched.

    Raises NotFoundError, OfflineError, or FetchError when the docs can't be
    fetched, and ManifestError when the project's manifest is malformed.
    """
    cwd = Path(cwd)
    target = resolve_target(pkg, version, cwd, settings)
    if notify:
        notify(target)

    api, manifest = await asyncio.gather(
        get_api(target, settings, client),
        get_manifest(target.root, cwd, settings),
    )

    query = query.lower()
    item = find_item(manifest, query) if manifest else None
    fragment = find_fragment(api, query, item_query, item)
    if fragment is None:
        return None
    return render_terminal(render_markdown(fragment), color=settings.color, width=settings.width)
