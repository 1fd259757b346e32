"""Markdown to LaTeX converter."""

from __future__ import annotations

__version__ = "0.1.0"


def convert(source: str, *, strict: bool = False) -> str:
    """Lex, parse, and generate a LaTeX fragment from Markdown source."""
    from md2latex.generator import generate
    from md2latex.parser import parse

    return generate(parse(source, strict=strict))
