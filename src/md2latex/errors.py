"""Error and warning types with formatted source context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from md2latex.tokens import Position, Span


def _snippet(
    severity: str,
    message: str,
    source: str,
    start: Position,
    end: Position | None,
    filename: str,
) -> str:
    """Render a rustc-style snippet: message, location arrow, source line, carets."""
    lines = source.splitlines(keepends=True)
    line_idx = start.line - 1
    col = start.column

    # Build the source line (strip trailing newline for display)
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    # Underline the full span when on one line, otherwise to end of line
    if end is None:
        underline_len = max(1, min(2, len(source_line) - col + 1))
    elif end.line == start.line:
        underline_len = max(1, end.column - col)
    else:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"{severity}: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised in strict mode on the first unterminated construct."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.md") -> str:
        return _snippet("error", self.message, self.source, self.position, None, filename)


class ParseError(Exception):
    """Raised on the first parse error, with span and source context."""

    def __init__(self, message: str, span: Span, source: str) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.md") -> str:
        return _snippet(
            "error", self.message, self.source, self.span.start, self.span.end, filename
        )


class UnknownTokenKind(ParseError):
    """A token reached the parser with a kind that has no handler."""

    def __init__(self, kind: object, span: Span, source: str) -> None:
        self.kind = kind
        name = kind.name if isinstance(kind, Enum) else str(kind)
        super().__init__(f"unknown token kind '{name}'", span, source)


@dataclass(frozen=True, slots=True)
class LexWarning:
    """Non-fatal lexer diagnostic, e.g. a construct cut off at end of input."""

    message: str
    span: Span
    source: str

    def format(self, filename: str = "input.md") -> str:
        return _snippet(
            "warning", self.message, self.source, self.span.start, self.span.end, filename
        )
