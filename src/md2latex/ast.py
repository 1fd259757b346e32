"""AST node types for parsed Markdown documents."""

from __future__ import annotations

from dataclasses import dataclass

from md2latex.tokens import Span


@dataclass(frozen=True, slots=True)
class Header:
    """Section heading; level 1 is the outermost."""

    level: int
    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class Paragraph:
    """Text running to the end of its line."""

    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class Text:
    """Text run followed by an inline construct on the same line."""

    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class Bold:
    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class Italic:
    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class Code:
    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """Fenced code; ``code`` is emitted verbatim."""

    language: str
    code: str
    span: Span


@dataclass(frozen=True, slots=True)
class Link:
    text: str
    url: str
    span: Span


@dataclass(frozen=True, slots=True)
class Image:
    alt: str
    src: str
    span: Span


@dataclass(frozen=True, slots=True)
class Blockquote:
    """Quoted lines, newline-joined with the ``>`` markers removed."""

    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class ListItem:
    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class TodoItem:
    text: str
    checked: bool
    span: Span


@dataclass(frozen=True, slots=True)
class UnorderedList:
    items: tuple[ListItem | TodoItem, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class OrderedList:
    items: tuple[ListItem | TodoItem, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class TaskList:
    """Unordered list made only of todo items."""

    items: tuple[TodoItem, ...]
    span: Span


@dataclass(frozen=True, slots=True)
class Table:
    """Pipe table rows, newline-joined, each row trimmed."""

    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class InlineMath:
    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class BlockMath:
    text: str
    span: Span


@dataclass(frozen=True, slots=True)
class LineBreak:
    span: Span


Node = (
    Header
    | Paragraph
    | Text
    | Bold
    | Italic
    | Code
    | CodeBlock
    | Link
    | Image
    | Blockquote
    | ListItem
    | TodoItem
    | UnorderedList
    | OrderedList
    | TaskList
    | Table
    | InlineMath
    | BlockMath
    | LineBreak
)


@dataclass(frozen=True, slots=True)
class Document:
    """Root document node: a flat sequence of top-level nodes."""

    children: tuple[Node, ...]
    span: Span
