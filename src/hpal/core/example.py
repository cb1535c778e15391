"""Render manifest examples as JavaScript source for generated stubs"""

import re
from pathlib import PurePosixPath
from typing import Any, Optional


INDENT = "    "
IDENTIFIER_RE = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')
DIRECTIVES = {"$requires"}


def _primitive(value: Any) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        escaped = value.replace('\\', '\\\\').replace("'", "\\'").replace('\n', '\\n')
        return f"'{escaped}'"
    return str(value)


def _key(key: str) -> str:
    return key if IDENTIFIER_RE.match(key) else _primitive(key)


def _unwrap(value: Any) -> tuple[Any, Optional[str], bool]:
    """Split a {$value|$literal, $comment} wrapper into (value, comment, is_literal)."""
    if isinstance(value, dict):
        if "$literal" in value:
            return str(value["$literal"]), value.get("$comment"), True
        if "$value" in value:
            return value["$value"], value.get("$comment"), False
    return value, None, False


def _entries(value: Any) -> list[tuple[Optional[str], Any]]:
    if isinstance(value, dict):
        return [(_key(k), v) for k, v in value.items() if k not in DIRECTIVES]
    return [(None, v) for v in value]


def _render(value: Any, depth: int, indent: str) -> tuple[str, Optional[str]]:
    """Return (source, trailing comment). Non-empty containers carry their comment on the opening line."""
    value, comment, literal = _unwrap(value)
    if literal:
        return value, comment
    if not isinstance(value, (dict, list, tuple)):
        return _primitive(value), comment

    opener, closer = ('{', '}') if isinstance(value, dict) else ('[', ']')
    entries = _entries(value)
    if not entries:
        return opener + closer, comment

    lines = [opener + (f" // {comment}" if comment else '')]
    for i, (key, child) in enumerate(entries):
        text, child_comment = _render(child, depth + 1, indent)
        prefix = indent * (depth + 1) + (f"{key}: " if key is not None else '')
        comma = ',' if i < len(entries) - 1 else ''
        lines.append(prefix + text + comma + (f" // {child_comment}" if child_comment else ''))
    lines.append(indent * depth + closer)
    return '\n'.join(lines), None


def print_example(example: Any, indent: str = INDENT) -> str:
    """Render an example value as a JavaScript literal."""
    text, comment = _render(example, 0, indent)
    return text + (f" // {comment}" if comment else '')


def _pascal_name(path: str) -> str:
    name = PurePosixPath(path).name
    name = re.sub(r'\.[cm]?js$', '', name)
    return ''.join(part[:1].upper() + part[1:] for part in re.split(r'[^A-Za-z0-9]+', name) if part)


def print_requires(example: Any) -> str:
    """Render an example's $requires as `const X = require('x');` lines ('' when there are none)."""
    if not isinstance(example, dict):
        return ''
    return '\n'.join(
        f"const {_pascal_name(path)} = require({_primitive(path)});"
        for path in example.get("$requires") or []
    )


def signature_to_example(args: tuple[str, ...]) -> dict:
    """Turn a call signature into an example; `[arg]` marks an optional argument."""
    example = {}
    for arg in args:
        optional = arg.startswith('[') and arg.endswith(']')
        key = arg[1:-1] if optional else arg
        example[key] = {"$value": None, "$comment": "Optional" if optional else None}
    return example
