"""markdown-it tokenization into the block model used for section lookup"""

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from hpal.core.models import (
    CodeBlock, Heading, ListBlock, ListItem, MarkdownDoc, Opaque, Paragraph, Token,
)
from hpal.core.utils.tokens import heading_level, inline_content, source_slice


LIST_TYPES = {'bullet_list', 'ordered_list'}
CODE_TYPES = {'fence', 'code_block'}


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _to_item(node: SyntaxTreeNode, lines: list[str]) -> ListItem:
    # Tight lists wrap item text in hidden paragraphs
    tight = any(c.type == 'paragraph' and c.hidden for c in node.children)
    return ListItem(
        tokens=tuple(_to_token(c, lines) for c in node.children),
        loose=not tight,
        source=source_slice(node, lines),
    )


def _to_token(node: SyntaxTreeNode, lines: list[str]) -> Token:
    """Convert one block-level syntax tree node into a Token."""
    source = source_slice(node, lines)
    level = heading_level(node)

    if level is not None:
        return Heading(depth=level, text=inline_content(node), source=source)
    if node.type == 'paragraph':
        return Paragraph(text=inline_content(node), source=source)
    if node.type in LIST_TYPES:
        return ListBlock(
            ordered=node.type == 'ordered_list',
            items=tuple(_to_item(c, lines) for c in node.children),
            source=source,
        )
    if node.type in CODE_TYPES:
        lang = node.info.strip().split(' ')[0] if node.info else ''
        return CodeBlock(text=node.content, lang=lang, source=source)
    return Opaque(kind=node.type, source=source)


def parse_markdown(text: str, parser_config: str = 'gfm-like') -> MarkdownDoc:
    """Parse markdown text into a MarkdownDoc of top-level blocks and its link references."""
    env: dict = {}
    tokens = _make_parser(parser_config).parse(text, env)
    lines = text.splitlines(keepends=True)
    root = SyntaxTreeNode(tokens)
    return MarkdownDoc(
        tokens=tuple(_to_token(node, lines) for node in root.children),
        references=dict(env.get('references', {})),
    )
