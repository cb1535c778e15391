"""Block-level markdown model and manifest models used by the docs and make commands"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict


# --- markdown blocks ---

@dataclass(frozen=True)
class Heading:
    depth:  int                 # 1-6
    text:   str                 # raw inline source, inline html included
    source: str


@dataclass(frozen=True)
class Paragraph:
    text:   str
    source: str


@dataclass(frozen=True)
class CodeBlock:
    text:   str
    lang:   str
    source: str


@dataclass(frozen=True)
class Opaque:
    """Any other block kind (html, hr, blockquote, table, ...), passed through untouched."""
    kind:   str
    source: str


@dataclass(frozen=True)
class ListItem:
    tokens: tuple["Token", ...]
    loose:  bool
    source: str


@dataclass(frozen=True)
class ListBlock:
    ordered: bool
    items:   tuple[ListItem, ...]
    source:  str


Token = Union[Heading, Paragraph, CodeBlock, ListBlock, Opaque]
Matcher = Callable[[str], bool]


@dataclass(frozen=True)
class MarkdownDoc:
    """An ordered block sequence plus the link-reference table needed to render it."""
    tokens:     tuple[Token, ...] = ()
    references: dict[str, dict] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self):
        return iter(self.tokens)

    def __getitem__(self, index):
        return self.tokens[index]


# --- manifest ---

@dataclass(frozen=True)
class ExplicitExample:
    value: Any


@dataclass(frozen=True)
class SignatureDerived:
    args: tuple[str, ...]


@dataclass(frozen=True)
class EmptyExample:
    pass


Example = Union[ExplicitExample, SignatureDerived, EmptyExample]


class ManifestEntry(BaseModel):
    """Raw manifest entry as written in manifest.yaml or an amendment file."""
    model_config = ConfigDict(extra="forbid")

    place:      str
    method:     Optional[str] = None
    list:       bool = False
    use_strict: bool = True
    example:    Any = None
    signature:  Optional[List[str]] = None


@dataclass(frozen=True)
class ManifestItem:
    """A single place in the manifest, with its example resolved."""
    place:      str
    method:     Optional[str] = None
    list:       bool = False
    use_strict: bool = True
    example:    Example = EmptyExample()


@dataclass(frozen=True)
class Manifest:
    """Ordered places plus the amendment file they were read from (None for defaults only)."""
    items: tuple[ManifestItem, ...]
    file:  Optional[Path] = None

    def places(self) -> list[str]:
        return [item.place for item in self.items]

    def get(self, place: str) -> Optional[ManifestItem]:
        return next((item for item in self.items if item.place == place), None)
