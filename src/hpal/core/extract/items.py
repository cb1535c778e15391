"""List-item extraction: narrow a section down to a single matching list item"""

from dataclasses import replace
from textwrap import dedent

from hpal.core.models import ListBlock, ListItem, Matcher, MarkdownDoc, Paragraph


def item_text(item: ListItem) -> str | None:
    """Return the text of an item's leading paragraph, or None when it starts with non-text content."""
    if item.tokens and isinstance(item.tokens[0], Paragraph):
        return item.tokens[0].text
    return None


def narrow_list(block: ListBlock, item: ListItem) -> ListBlock:
    """Return a copy of block holding only item, re-sourced from the item's own lines."""
    return replace(block, items=(item,), source=dedent(item.source))


def extract_list_item(section: MarkdownDoc, matcher: Matcher) -> MarkdownDoc:
    """Return [heading, single-item list] for the first item in the section's first list accepted by matcher."""
    if not section:
        return MarkdownDoc(references=section.references)

    block = next((tok for tok in section if isinstance(tok, ListBlock)), None)
    if block is None:
        return MarkdownDoc(references=section.references)

    for item in block.items:
        text = item_text(item)
        if text is not None and matcher(text):
            return MarkdownDoc(
                tokens=(section[0], narrow_list(block, item)),
                references=section.references,
            )

    return MarkdownDoc(references=section.references)
