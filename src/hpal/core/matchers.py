"""Heading and list-item matcher construction for docs queries"""

import logging
import re
from typing import Optional

from hpal.core.extract.sections import HEADING_ANCHOR_TAG_RE
from hpal.core.models import ManifestItem, Matcher


logger = logging.getLogger(__name__)

METHOD_RE = re.compile(r'^([a-z.]+)')
MIN_QUERY_LENGTH = 3


def anchorize(text: str) -> list[str]:
    """Return the anchors a heading can be linked by: its name tag (if any), then its slug."""
    text = text.lower()
    anchors = []

    tag = HEADING_ANCHOR_TAG_RE.search(text)
    if tag:
        text = text.replace(tag.group(0), '', 1)
        anchors.append(f"#{tag.group(1)}")

    slug = re.sub(r'[^a-z0-9\s-]', '', text).strip()
    anchors.append('#' + re.sub(r'\s', '-', slug))
    return anchors


def needle_matcher(needle: str) -> Matcher:
    """Match headings containing needle; needles starting with '#' are compared against anchors."""
    needle = needle.lower()

    def matcher(heading: str) -> bool:
        if needle.startswith('#'):
            return any(needle in anchor for anchor in anchorize(heading))
        return needle in heading.lower()

    return matcher


def heading_needles(query: str, item: Optional[ManifestItem] = None) -> list[str]:
    """Return the substrings to look for in headings, most specific first."""
    method_match = METHOD_RE.match(query)
    candidates = [
        item is not None and isinstance(item.method, str) and f"server.{item.method}(",
        method_match is not None and f"{method_match.group(1)}(",
        len(query) >= MIN_QUERY_LENGTH and query,
    ]
    return [c for c in candidates if c]


def heading_matchers(query: str, item: Optional[ManifestItem] = None) -> list[Matcher]:
    """Build the ordered heading matchers for a query and its (optional) manifest item."""
    needles = heading_needles(query, item)
    logger.debug("Heading needles for %r: %s", query, needles)
    return [needle_matcher(n) for n in needles]


def item_pattern(item_query: str) -> re.Pattern:
    """Compile the list-item pattern: optional backtick, item query, optional backtick, ' -'."""
    return re.compile(rf"^`?{re.escape(item_query)}`? -", re.IGNORECASE)


def item_matcher(item_query: str) -> Matcher:
    """Match list items documenting item_query, e.g. "`name` - description"."""
    pattern = item_pattern(item_query)
    return lambda text: pattern.match(text) is not None
