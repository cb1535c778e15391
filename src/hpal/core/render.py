"""Rendering of extracted blocks back to markdown and to terminal output"""

import io
from textwrap import dedent
from typing import Optional

from rich.console import Console
from rich.markdown import Markdown

from hpal.core.models import Heading, ListBlock, MarkdownDoc, Token


def render_token(tok: Token) -> str:
    """Return the markdown for a single block."""
    if isinstance(tok, Heading):
        return f"{'#' * tok.depth} {tok.text}".rstrip()
    if isinstance(tok, ListBlock):
        return dedent(tok.source)
    return tok.source


def render_references(references: dict[str, dict]) -> str:
    """Return link reference definitions so reference-style links still resolve in a fragment."""
    lines = []
    for label, ref in references.items():
        line = f"[{label}]: {ref['href']}"
        if ref.get('title'):
            line += ' "{}"'.format(ref['title'].replace('"', '\\"'))
        lines.append(line)
    return '\n'.join(lines)


def render_markdown(doc: MarkdownDoc) -> str:
    """Render a block sequence (and its reference table) as markdown text."""
    if not doc:
        return ''
    parts = [render_token(tok) for tok in doc]
    if doc.references:
        parts.append(render_references(doc.references))
    return '\n\n'.join(parts) + '\n'


def render_terminal(markdown: str, color: bool = True, width: Optional[int] = None) -> str:
    """Format markdown for terminal display."""
    console = Console(
        file=io.StringIO(),
        force_terminal=color,
        no_color=not color,
        width=width,
        highlight=False,
    )
    with console.capture() as capture:
        console.print(Markdown(markdown))
    return capture.get()
