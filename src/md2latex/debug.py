"""--debug token and AST dumps to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from md2latex.ast import (
    CodeBlock,
    Document,
    Header,
    Image,
    LineBreak,
    Link,
    OrderedList,
    TaskList,
    TodoItem,
    UnorderedList,
)
from md2latex.tokens import Token, TokenKind


def dump_tokens(tokens: list[Token], *, file: TextIO | None = None) -> None:
    """Print one line per token: position, kind, packed value."""
    file = file or sys.stderr
    for tok in tokens:
        if tok.type == TokenKind.EOF:
            continue
        start = tok.span.start
        file.write(f"{start.line}:{start.column} {tok.type.name} {tok.packed!r}\n")


def dump_ast(doc: Document, *, file: TextIO | None = None) -> None:
    """Print a human-readable AST tree to *file* (default: stderr)."""
    file = file or sys.stderr
    file.write("Document\n")
    for child in doc.children:
        _dump_node(child, 1, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_node(node: object, depth: int, f: TextIO) -> None:
    name = type(node).__name__
    match node:
        case UnorderedList(items=items) | OrderedList(items=items) | TaskList(items=items):
            f.write(f"{_indent(depth)}{name}\n")
            for item in items:
                _dump_node(item, depth + 1, f)
        case Header(level=level, text=text):
            f.write(f"{_indent(depth)}{name} level={level} {text!r}\n")
        case TodoItem(text=text, checked=checked):
            f.write(f"{_indent(depth)}{name} [{'x' if checked else ' '}] {text!r}\n")
        case Link(text=text, url=url):
            f.write(f"{_indent(depth)}{name}({text!r} -> {url!r})\n")
        case Image(alt=alt, src=src):
            f.write(f"{_indent(depth)}{name}({alt!r} -> {src!r})\n")
        case CodeBlock(language=language, code=code):
            f.write(f"{_indent(depth)}{name} language={language!r} {code!r}\n")
        case LineBreak():
            f.write(f"{_indent(depth)}{name}\n")
        case _:
            f.write(f"{_indent(depth)}{name}({getattr(node, 'text', '')!r})\n")
