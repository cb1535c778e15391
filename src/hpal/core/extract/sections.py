"""Section extraction: a matched heading and everything nested beneath it"""

import re
from dataclasses import replace

from hpal.core.models import Heading, Matcher, MarkdownDoc


HEADING_ANCHOR_TAG_RE = re.compile(r'<a\s+name="([^"]*)"\s*/?>(?:\s*</a>)?', re.IGNORECASE)
_LEADING_ANCHOR_TAG_RE = re.compile(r'^\s*' + HEADING_ANCHOR_TAG_RE.pattern, re.IGNORECASE)


def strip_anchor_tag(heading: Heading) -> Heading:
    """Return a copy of heading without a leading <a name="..."> tag and leading whitespace."""
    text = _LEADING_ANCHOR_TAG_RE.sub('', heading.text, count=1).lstrip()
    return replace(heading, text=text)


def extract_section(doc: MarkdownDoc, matcher: Matcher) -> MarkdownDoc:
    """Return the first heading accepted by matcher plus its content, up to the next heading of equal or lesser depth."""
    collected = []
    depth = None

    for tok in doc:
        if depth is None:
            if isinstance(tok, Heading) and matcher(tok.text):
                depth = tok.depth
                collected.append(strip_anchor_tag(tok))
            continue
        if isinstance(tok, Heading) and tok.depth <= depth:
            break
        collected.append(tok)

    return MarkdownDoc(tokens=tuple(collected), references=doc.references)
