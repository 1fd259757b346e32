"""Token kinds, typed payloads, and source position data structures."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    # Block constructs
    HEADER = auto()  # # Title
    PARAGRAPH = auto()  # text run ending at end of line
    BLOCKQUOTE = auto()  # > quoted
    TABLE = auto()  # |a|b|
    CODE_BLOCK = auto()  # ```lang ... ```
    BLOCK_MATH = auto()  # $$ ... $$

    # Lists: marker tokens carry no value
    UNORDERED_LIST = auto()
    ORDERED_LIST = auto()
    LIST_ITEM = auto()
    TODO_ITEM = auto()

    # Inline constructs
    TEXT = auto()  # text run cut short by an inline construct
    BOLD = auto()
    ITALIC = auto()
    CODE = auto()
    LINK = auto()
    IMAGE = auto()
    INLINE_MATH = auto()

    LINE_BREAK = auto()
    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class HeaderPayload:
    level: int
    text: str


@dataclass(frozen=True, slots=True)
class LinkPayload:
    text: str
    url: str


@dataclass(frozen=True, slots=True)
class ImagePayload:
    alt: str
    src: str


@dataclass(frozen=True, slots=True)
class CodeBlockPayload:
    language: str
    code: str


@dataclass(frozen=True, slots=True)
class TodoPayload:
    text: str
    checked: bool


Payload = HeaderPayload | LinkPayload | ImagePayload | CodeBlockPayload | TodoPayload


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with its payload and original source text."""

    type: TokenKind
    value: str | Payload
    raw: str
    span: Span

    @property
    def packed(self) -> str:
        """The value in its delimiter-encoded string form."""
        return pack(self.value)


# ---------------------------------------------------------------------------
# Packed (delimiter-encoded) payloads
# ---------------------------------------------------------------------------

_LINK_SYNTAX = re.compile(r"\[([^\]]*)\]\(([^)]*)\)")
_IMAGE_SYNTAX = re.compile(r"!\[([^\]]*)\]\(([^)]*)\)")
_TODO_SYNTAX = re.compile(r"-\s*\[([ xX])\]\s*(.*)", re.DOTALL)


def pack(value: str | Payload) -> str:
    """Encode a payload as a single delimited string.

    Header packs as ``level:text``, link as ``text|url``, image as
    ``alt|src``, code block as ``language:code`` and todo items as
    ``- [ ] text`` / ``- [x] text``. Plain strings are returned unchanged.
    """
    if isinstance(value, HeaderPayload):
        return f"{value.level}:{value.text}"
    if isinstance(value, LinkPayload):
        return f"{value.text}|{value.url}"
    if isinstance(value, ImagePayload):
        return f"{value.alt}|{value.src}"
    if isinstance(value, CodeBlockPayload):
        return f"{value.language}:{value.code}"
    if isinstance(value, TodoPayload):
        mark = "x" if value.checked else " "
        return f"- [{mark}] {value.text}"
    return value


def unpack(kind: TokenKind, packed: str) -> str | Payload:
    """Decode a packed string into the typed payload for *kind*.

    Links and images accept either the packed ``text|url`` form or the
    original Markdown syntax. The split is on the first delimiter, so a
    code block whose language line contains a colon is mis-split.
    """
    if kind == TokenKind.HEADER:
        level, _, text = packed.partition(":")
        try:
            return HeaderPayload(int(level), text)
        except ValueError:
            return HeaderPayload(0, text)

    if kind == TokenKind.LINK:
        m = _LINK_SYNTAX.search(packed)
        if m:
            return LinkPayload(m.group(1), m.group(2))
        text, _, url = packed.partition("|")
        return LinkPayload(text, url)

    if kind == TokenKind.IMAGE:
        m = _IMAGE_SYNTAX.search(packed)
        if m:
            return ImagePayload(m.group(1), m.group(2))
        alt, _, src = packed.partition("|")
        return ImagePayload(alt, src)

    if kind == TokenKind.CODE_BLOCK:
        language, _, code = packed.partition(":")
        return CodeBlockPayload(language, code)

    if kind == TokenKind.TODO_ITEM:
        m = _TODO_SYNTAX.match(packed)
        if m:
            return TodoPayload(m.group(2).strip(), m.group(1) in "xX")
        return TodoPayload(packed.strip(), False)

    return packed
