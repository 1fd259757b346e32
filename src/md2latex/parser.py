"""Markdown parser — converts a token stream into a flat AST."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from md2latex.ast import (
    Blockquote,
    BlockMath,
    Bold,
    Code,
    CodeBlock,
    Document,
    Header,
    Image,
    InlineMath,
    Italic,
    LineBreak,
    Link,
    ListItem,
    Node,
    OrderedList,
    Paragraph,
    Table,
    TaskList,
    Text,
    TodoItem,
    UnorderedList,
)
from md2latex.errors import ParseError, UnknownTokenKind
from md2latex.lexer import tokenize
from md2latex.tokens import (
    CodeBlockPayload,
    HeaderPayload,
    ImagePayload,
    LinkPayload,
    Position,
    Span,
    TodoPayload,
    Token,
    TokenKind,
    unpack,
)

P = TypeVar("P")

_LIST_KINDS = frozenset({TokenKind.UNORDERED_LIST, TokenKind.ORDERED_LIST})
_ITEM_KINDS = frozenset({TokenKind.LIST_ITEM, TokenKind.TODO_ITEM})

# Kinds whose string value maps straight into a node
_TEXT_NODES: dict[TokenKind, Callable[[str, Span], Node]] = {
    TokenKind.PARAGRAPH: Paragraph,
    TokenKind.TEXT: Text,
    TokenKind.BOLD: Bold,
    TokenKind.ITALIC: Italic,
    TokenKind.CODE: Code,
    TokenKind.BLOCKQUOTE: Blockquote,
    TokenKind.TABLE: Table,
    TokenKind.INLINE_MATH: InlineMath,
    TokenKind.BLOCK_MATH: BlockMath,
}


class Parser:
    """Single-pass, one-token-lookahead parser for Markdown token streams."""

    def __init__(self, tokens: list[Token], source: str = "") -> None:
        if not tokens or tokens[-1].type != TokenKind.EOF:
            end = tokens[-1].span.end if tokens else Position(1, 1, 0)
            tokens = [*tokens, Token(TokenKind.EOF, "", "", Span(end, end))]
        self._tokens = tokens
        self._source = source
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self) -> Token:
        return self._tokens[self._pos]

    def _at_eof(self) -> bool:
        return self._pos >= len(self._tokens) - 1

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if not self._at_eof():
            self._pos += 1
        return tok

    def _prev_end(self) -> Position:
        """End position of the previously consumed token."""
        if self._pos > 0:
            return self._tokens[self._pos - 1].span.end
        return self._tokens[0].span.start

    def _payload(self, tok: Token, cls: type[P]) -> P:
        """Typed payload of *tok*, decoding a packed string if needed."""
        value = unpack(tok.type, tok.value) if isinstance(tok.value, str) else tok.value
        if not isinstance(value, cls):
            raise ParseError(
                f"malformed {tok.type.name.lower()} payload: {value!r}", tok.span, self._source
            )
        return value

    # ------------------------------------------------------------------
    # Document level
    # ------------------------------------------------------------------

    def parse(self) -> Document:
        children: list[Node] = []
        start = self._peek().span.start

        while not self._at_eof():
            children.append(self._parse_node())

        end = self._peek().span.end
        return Document(tuple(children), Span(start, end))

    def _parse_node(self) -> Node:
        tok = self._peek()
        if tok.type == TokenKind.EOF:
            raise ParseError("end of input marker before last token", tok.span, self._source)
        handler = _HANDLERS.get(tok.type)
        if handler is None:
            raise UnknownTokenKind(tok.type, tok.span, self._source)
        return handler(self)

    # ------------------------------------------------------------------
    # Node handlers
    # ------------------------------------------------------------------

    def _parse_text(self) -> Node:
        tok = self._advance()
        if not isinstance(tok.value, str):
            raise ParseError(
                f"expected text for {tok.type.name.lower()}, got {type(tok.value).__name__}",
                tok.span,
                self._source,
            )
        return _TEXT_NODES[tok.type](tok.value, tok.span)

    def _parse_header(self) -> Header:
        tok = self._advance()
        payload = self._payload(tok, HeaderPayload)
        return Header(payload.level, payload.text, tok.span)

    def _parse_code_block(self) -> CodeBlock:
        tok = self._advance()
        payload = self._payload(tok, CodeBlockPayload)
        return CodeBlock(payload.language, payload.code, tok.span)

    def _parse_link(self) -> Link:
        tok = self._advance()
        payload = self._payload(tok, LinkPayload)
        return Link(payload.text, payload.url, tok.span)

    def _parse_image(self) -> Image:
        tok = self._advance()
        payload = self._payload(tok, ImagePayload)
        return Image(payload.alt, payload.src, tok.span)

    def _parse_line_break(self) -> LineBreak:
        return LineBreak(self._advance().span)

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def _parse_list(self) -> UnorderedList | OrderedList | TaskList:
        """Group a contiguous run of list markers and items into one node.

        Items met before the first marker are absorbed into the list that
        marker opens. Grouping stops at any other token, including a marker
        of the other list kind.
        """
        start = self._peek().span.start
        items: list[ListItem | TodoItem] = []
        kind: TokenKind | None = None

        while True:
            tok = self._peek()
            if tok.type in _ITEM_KINDS:
                items.append(self._parse_item())
            elif tok.type in _LIST_KINDS and kind in (None, tok.type):
                kind = tok.type
                self._advance()
            else:
                break

        span = Span(start, self._prev_end())
        if kind == TokenKind.ORDERED_LIST:
            return OrderedList(tuple(items), span)
        if items and all(isinstance(item, TodoItem) for item in items):
            return TaskList(tuple(items), span)  # type: ignore[arg-type]
        return UnorderedList(tuple(items), span)

    def _parse_item(self) -> ListItem | TodoItem:
        tok = self._advance()
        if tok.type == TokenKind.TODO_ITEM:
            payload = self._payload(tok, TodoPayload)
            return TodoItem(payload.text, payload.checked, tok.span)
        if not isinstance(tok.value, str):
            raise ParseError("expected text for list item", tok.span, self._source)
        return ListItem(tok.value, tok.span)


_HANDLERS: dict[TokenKind, Callable[[Parser], Node]] = {
    **{kind: Parser._parse_text for kind in _TEXT_NODES},
    TokenKind.HEADER: Parser._parse_header,
    TokenKind.CODE_BLOCK: Parser._parse_code_block,
    TokenKind.LINK: Parser._parse_link,
    TokenKind.IMAGE: Parser._parse_image,
    TokenKind.UNORDERED_LIST: Parser._parse_list,
    TokenKind.ORDERED_LIST: Parser._parse_list,
    TokenKind.LIST_ITEM: Parser._parse_list,
    TokenKind.TODO_ITEM: Parser._parse_list,
    TokenKind.LINE_BREAK: Parser._parse_line_break,
}


def parse_tokens(tokens: list[Token], source: str = "") -> Document:
    """Parse an already-lexed token stream into a Document."""
    return Parser(tokens, source).parse()


def parse(source: str, *, strict: bool = False) -> Document:
    """Convenience function: tokenize and parse source text into a Document."""
    return Parser(tokenize(source, strict=strict), source).parse()
