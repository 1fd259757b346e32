"""Markdown lexer — converts source text into a flat token stream."""

from __future__ import annotations

import re

from md2latex.errors import LexError, LexWarning
from md2latex.tokens import (
    CodeBlockPayload,
    HeaderPayload,
    ImagePayload,
    LinkPayload,
    Payload,
    Position,
    Span,
    TodoPayload,
    Token,
    TokenKind,
)

# Bullet (-, +, *) or ordinal (1. / 1)) list marker followed by blanks
_LIST_MARKER = re.compile(r"(?:([-+*])|\d+[.)])[ \t]+")
_TODO_BOX = re.compile(r"\[([ xX])\](?:[ \t]+|(?=\r?\n)|$)")
_LINK_OPEN = re.compile(r"\[[^\]\n]*\]\(")
_BLANK_REST = re.compile(r"[ \t]*(?:\r?\n|$)")


class Lexer:
    """Tokenize Markdown source text into a stream of Token objects.

    Unterminated constructs run to end of input. They are recorded in
    ``warnings``, or raised as ``LexError`` when ``strict`` is set.
    """

    def __init__(self, source: str, *, strict: bool = False) -> None:
        self._source = source
        self._strict = strict
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []
        self.warnings: list[LexWarning] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            self._lex_next()
        self._emit(TokenKind.EOF, "", self._current_pos())
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _at_line_start(self) -> bool:
        return self._pos == 0 or self._source[self._pos - 1] == "\n"

    def _advance_to(self, index: int) -> None:
        chunk = self._source[self._pos : index]
        newlines = chunk.count("\n")
        if newlines:
            self._line += newlines
            self._col = len(chunk) - chunk.rfind("\n")
        else:
            self._col += len(chunk)
        self._pos = index

    def _skip(self, count: int) -> None:
        self._advance_to(min(self._pos + count, len(self._source)))

    def _emit(self, kind: TokenKind, value: str | Payload, start: Position) -> Token:
        raw = self._source[start.offset : self._pos]
        tok = Token(kind, value, raw, Span(start, self._current_pos()))
        self._tokens.append(tok)
        return tok

    def _unterminated(self, what: str, start: Position) -> None:
        message = f"unterminated {what}"
        if self._strict:
            raise LexError(message, start, self._source)
        self.warnings.append(LexWarning(message, Span(start, self._current_pos()), self._source))

    # ------------------------------------------------------------------
    # Reading primitives
    # ------------------------------------------------------------------

    def _read_line(self) -> str:
        """Read to end of line, consuming the newline."""
        idx = self._source.find("\n", self._pos)
        if idx == -1:
            text = self._source[self._pos :]
            self._advance_to(len(self._source))
        else:
            text = self._source[self._pos : idx]
            self._advance_to(idx + 1)
        return text.removesuffix("\r")

    def _read_until(self, delimiter: str, what: str, start: Position) -> str:
        """Read up to *delimiter* and step past it; end of input closes *what*."""
        idx = self._source.find(delimiter, self._pos)
        if idx == -1:
            text = self._source[self._pos :]
            self._advance_to(len(self._source))
            self._unterminated(what, start)
            return text
        text = self._source[self._pos : idx]
        self._advance_to(idx + len(delimiter))
        return text

    def _skip_blank_rest(self) -> None:
        m = _BLANK_REST.match(self._source, self._pos)
        if m:
            self._advance_to(m.end())

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _lex_next(self) -> None:
        ch = self._peek()
        line_start = self._at_line_start()

        if ch == "#" and line_start:
            self._lex_header()
        elif ch == "*" and line_start and _LIST_MARKER.match(self._source, self._pos):
            self._lex_list_item()
        elif ch in "*_":
            self._lex_emphasis()
        elif ch == "`":
            self._lex_code()
        elif ch == "[" and _LINK_OPEN.match(self._source, self._pos):
            self._lex_link()
        elif ch == "!" and _LINK_OPEN.match(self._source, self._pos + 1):
            self._lex_image()
        elif ch == ">" and line_start:
            self._lex_blockquote()
        elif line_start and _LIST_MARKER.match(self._source, self._pos):
            self._lex_list_item()
        elif ch == "|" and line_start:
            self._lex_table()
        elif ch == "$":
            self._lex_math()
        elif ch == "\n" or (ch == "\r" and self._peek(1) == "\n"):
            self._lex_line_break()
        else:
            self._lex_text()

    def _interrupts(self, idx: int) -> bool:
        """True if an inline construct starts at *idx* inside a text run."""
        ch = self._source[idx]
        if ch in "`$":
            return True
        if ch == "[":
            return _LINK_OPEN.match(self._source, idx) is not None
        if ch == "!":
            return _LINK_OPEN.match(self._source, idx + 1) is not None
        if ch in "*_":
            # Emphasis only opens at a word boundary
            nxt = self._source[idx + 1 : idx + 2]
            return self._source[idx - 1].isspace() and nxt != "" and not nxt.isspace()
        return False

    # ------------------------------------------------------------------
    # Block constructs
    # ------------------------------------------------------------------

    def _lex_header(self) -> None:
        start = self._current_pos()
        level = 0
        while self._peek() == "#":
            self._skip(1)
            level += 1
        text = self._read_line().strip()
        self._emit(TokenKind.HEADER, HeaderPayload(level, text), start)

    def _lex_blockquote(self) -> None:
        start = self._current_pos()
        lines: list[str] = []
        while self._peek() == ">":
            self._skip(1)
            lines.append(self._read_line().strip())
        self._emit(TokenKind.BLOCKQUOTE, "\n".join(lines).strip(), start)

    def _lex_list_item(self) -> None:
        start = self._current_pos()
        m = _LIST_MARKER.match(self._source, self._pos)
        assert m is not None
        kind = TokenKind.UNORDERED_LIST if m.group(1) else TokenKind.ORDERED_LIST
        self._advance_to(m.end())
        self._emit(kind, "", start)

        item_start = self._current_pos()
        box = _TODO_BOX.match(self._source, self._pos)
        if box:
            self._advance_to(box.end())
            text = self._read_line().strip()
            self._emit(TokenKind.TODO_ITEM, TodoPayload(text, box.group(1) in "xX"), item_start)
        else:
            text = self._read_line().strip()
            self._emit(TokenKind.LIST_ITEM, text, item_start)

    def _lex_table(self) -> None:
        start = self._current_pos()
        rows: list[str] = []
        while self._peek() == "|":
            rows.append(self._read_line().strip())
        self._emit(TokenKind.TABLE, "\n".join(rows), start)

    def _lex_line_break(self) -> None:
        start = self._current_pos()
        self._skip(2 if self._peek() == "\r" else 1)
        self._emit(TokenKind.LINE_BREAK, "\n", start)

    def _lex_text(self) -> None:
        start = self._current_pos()
        end = self._pos + 1
        while (
            end < len(self._source)
            and self._source[end] != "\n"
            and not self._interrupts(end)
        ):
            end += 1
        text = self._source[self._pos : end]
        self._advance_to(end)

        if end < len(self._source) and self._source[end] != "\n":
            self._emit(TokenKind.TEXT, text, start)
            return
        self._skip(1)  # newline
        self._emit(TokenKind.PARAGRAPH, text.removesuffix("\r"), start)

    # ------------------------------------------------------------------
    # Code and math
    # ------------------------------------------------------------------

    def _lex_code(self) -> None:
        start = self._current_pos()
        if self._source.startswith("```", self._pos):
            self._skip(3)
            language = self._read_line().strip()
            code = self._read_until("```", "code block", start)
            # Newline before the closing fence belongs to the fence
            code = code.removesuffix("\n").removesuffix("\r")
            self._skip_blank_rest()
            self._emit(TokenKind.CODE_BLOCK, CodeBlockPayload(language, code), start)
            return

        self._skip(1)
        text = self._read_until("`", "inline code", start)
        self._emit(TokenKind.CODE, text, start)

    def _lex_math(self) -> None:
        start = self._current_pos()
        if self._peek(1) == "$":
            self._skip(2)
            text = self._read_until("$$", "display math", start).strip()
            self._skip_blank_rest()
            self._emit(TokenKind.BLOCK_MATH, text, start)
            return

        self._skip(1)
        text = self._read_until("$", "inline math", start)
        self._emit(TokenKind.INLINE_MATH, text, start)

    # ------------------------------------------------------------------
    # Inline constructs
    # ------------------------------------------------------------------

    def _lex_emphasis(self) -> None:
        start = self._current_pos()
        marker = self._peek()
        if self._peek(1) == marker:
            delimiter, kind, what = marker * 2, TokenKind.BOLD, "bold text"
        else:
            delimiter, kind, what = marker, TokenKind.ITALIC, "italic text"
        self._skip(len(delimiter))
        text = self._read_until(delimiter, what, start)
        self._emit(kind, text, start)

    def _lex_link(self) -> None:
        start = self._current_pos()
        self._skip(1)  # [
        text, url = self._read_target("link", start)
        self._emit(TokenKind.LINK, LinkPayload(text, url), start)

    def _lex_image(self) -> None:
        start = self._current_pos()
        self._skip(2)  # ![
        alt, src = self._read_target("image", start)
        self._emit(TokenKind.IMAGE, ImagePayload(alt, src), start)

    def _read_target(self, what: str, start: Position) -> tuple[str, str]:
        """Read ``label](target)`` after the opening bracket."""
        label = self._read_until("]", what, start)
        self._skip(1)  # (
        target = self._read_until(")", what, start)
        return label, target.strip()


def tokenize(source: str, *, strict: bool = False) -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, strict=strict).tokenize()
