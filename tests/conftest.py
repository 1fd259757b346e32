"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from md2latex.ast import Document
from md2latex.lexer import tokenize
from md2latex.parser import parse
from md2latex.tokens import Position, Span, Token, TokenKind

S = Span(Position(1, 1, 0), Position(1, 1, 0))


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenKind.EOF]

    return _lex


@pytest.fixture
def parse_source():
    """Return a helper that parses source and returns a Document."""

    def _parse(source: str) -> Document:
        return parse(source)

    return _parse


def tok(kind: TokenKind, value: object = "") -> Token:
    """Build a token by hand, as a caller bypassing the lexer would."""
    return Token(kind, value, "", S)  # type: ignore[arg-type]


def assert_types(tokens: list[Token], expected: list[TokenKind]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the packed token values match the expected list."""
    actual = [t.packed for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def find_tokens(tokens: list[Token], kind: TokenKind) -> list[Token]:
    """Return all tokens of the given kind."""
    return [t for t in tokens if t.type == kind]
