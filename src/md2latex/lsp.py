"""Minimal LSP server for md2latex — diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from md2latex import __version__
from md2latex.errors import ParseError
from md2latex.lexer import Lexer
from md2latex.parser import parse_tokens
from md2latex.tokens import Span

server = LanguageServer(
    "md2latex-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _range(span: Span) -> Range:
    """Convert a 1-based source span to a 0-based LSP range."""
    return Range(
        start=Position(line=span.start.line - 1, character=span.start.column - 1),
        end=Position(line=span.end.line - 1, character=span.end.column - 1),
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Lex and parse the document, then publish diagnostics.

    Lexer output always parses; the error branch covers a lexer whose tokens
    carry a payload of the wrong type for their kind.
    """
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    diagnostics: list[Diagnostic] = []

    lexer = Lexer(source)
    tokens = lexer.tokenize()
    for warning in lexer.warnings:
        diagnostics.append(
            Diagnostic(
                range=_range(warning.span),
                message=warning.message,
                severity=DiagnosticSeverity.Warning,
                source="md2latex",
            )
        )

    try:
        parse_tokens(tokens, source)
    except ParseError as exc:
        diagnostics.append(
            Diagnostic(
                range=_range(exc.span),
                message=exc.message,
                severity=DiagnosticSeverity.Error,
                source="md2latex",
            )
        )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
