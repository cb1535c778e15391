"""Shared markdown-it syntax tree utilities"""


def heading_level(node) -> int | None:
    """Return the heading level (1-6) for a heading node, else None."""
    if node.type == 'heading' and node.tag and node.tag[0] == 'h' and node.tag[1:].isdigit():
        return int(node.tag[1:])
    return None


def inline_content(node) -> str:
    """Return the raw inline source of a heading or paragraph node ('' if it has none)."""
    if node.children and node.children[0].type == 'inline':
        return node.children[0].content
    return ''


def source_slice(node, source_lines: list[str]) -> str:
    """Extract raw source for a block via node.map; fallback to node.content."""
    if node.map:
        start, end = node.map
        return ''.join(source_lines[start:end]).rstrip()
    return node.content.rstrip()
