"""Parser tests: node building, list grouping, packed payloads, errors."""

from __future__ import annotations

from enum import Enum, auto

import pytest

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
    OrderedList,
    Paragraph,
    Table,
    TaskList,
    Text,
    TodoItem,
    UnorderedList,
)
from md2latex.errors import ParseError, UnknownTokenKind
from md2latex.parser import Parser, parse_tokens
from md2latex.tokens import HeaderPayload, LinkPayload, Token, TodoPayload, TokenKind
from tests.conftest import S, tok


class _Foreign(Enum):
    WIDGET = auto()


def _kinds(doc: Document) -> list[type]:
    return [type(child) for child in doc.children]


class TestSimpleNodes:
    def test_header(self, parse_source):
        doc = parse_source("# Title")
        header = doc.children[0]
        assert isinstance(header, Header)
        assert (header.level, header.text) == (1, "Title")

    @pytest.mark.parametrize(
        ("source", "node_type", "text"),
        [
            ("plain", Paragraph, "plain"),
            ("**b**", Bold, "b"),
            ("*i*", Italic, "i"),
            ("`c`", Code, "c"),
            ("> q", Blockquote, "q"),
            ("|a|b|", Table, "|a|b|"),
            ("$x$", InlineMath, "x"),
            ("$$y$$", BlockMath, "y"),
        ],
    )
    def test_value_maps_straight_into_node(self, parse_source, source, node_type, text):
        doc = parse_source(source)
        assert _kinds(doc) == [node_type]
        assert doc.children[0].text == text

    def test_text_run_before_inline_construct(self, parse_source):
        doc = parse_source("see `x`")
        assert _kinds(doc) == [Text, Code]

    def test_code_block(self, parse_source):
        node = parse_source("```sh\nls\n```").children[0]
        assert isinstance(node, CodeBlock)
        assert (node.language, node.code) == ("sh", "ls")

    def test_link_and_image(self, parse_source):
        doc = parse_source("[t](http://x)![a](p.png)")
        link, image = doc.children
        assert isinstance(link, Link) and (link.text, link.url) == ("t", "http://x")
        assert isinstance(image, Image) and (image.alt, image.src) == ("a", "p.png")

    def test_line_break(self, parse_source):
        doc = parse_source("a\n\nb")
        assert _kinds(doc) == [Paragraph, LineBreak, Paragraph]

    def test_empty_document(self, parse_source):
        assert parse_source("").children == ()


class TestListGrouping:
    def test_contiguous_items_form_one_list(self, parse_source):
        doc = parse_source("- a\n- b\n- c\n")
        assert _kinds(doc) == [UnorderedList]
        assert [item.text for item in doc.children[0].items] == ["a", "b", "c"]

    def test_ordered_list(self, parse_source):
        doc = parse_source("1. a\n2. b")
        assert _kinds(doc) == [OrderedList]
        assert len(doc.children[0].items) == 2

    def test_grouping_stops_at_blank_line(self, parse_source):
        doc = parse_source("- a\n\n- b")
        assert _kinds(doc) == [UnorderedList, LineBreak, UnorderedList]

    def test_grouping_stops_at_other_list_kind(self, parse_source):
        doc = parse_source("- a\n1. b\n")
        assert _kinds(doc) == [UnorderedList, OrderedList]

    def test_grouping_stops_at_paragraph(self, parse_source):
        doc = parse_source("- a\ntext\n- b")
        assert _kinds(doc) == [UnorderedList, Paragraph, UnorderedList]

    def test_all_todo_items_form_task_list(self, parse_source):
        doc = parse_source("- [ ] todo\n- [x] done")
        assert _kinds(doc) == [TaskList]
        items = doc.children[0].items
        assert [(i.text, i.checked) for i in items] == [("todo", False), ("done", True)]

    def test_mixed_items_stay_unordered(self, parse_source):
        doc = parse_source("- a\n- [ ] b")
        assert _kinds(doc) == [UnorderedList]
        assert [type(i) for i in doc.children[0].items] == [ListItem, TodoItem]

    def test_ordered_todo_list_stays_ordered(self, parse_source):
        doc = parse_source("1. [x] a")
        assert _kinds(doc) == [OrderedList]

    def test_items_before_marker_are_absorbed(self):
        tokens = [
            tok(TokenKind.TODO_ITEM, TodoPayload("t", False)),
            tok(TokenKind.UNORDERED_LIST),
            tok(TokenKind.LIST_ITEM, "b"),
            tok(TokenKind.UNORDERED_LIST),
        ]
        doc = parse_tokens(tokens)
        assert _kinds(doc) == [UnorderedList]
        assert [i.text for i in doc.children[0].items] == ["t", "b"]

    def test_items_without_marker(self):
        doc = parse_tokens([tok(TokenKind.LIST_ITEM, "a"), tok(TokenKind.LIST_ITEM, "b")])
        assert _kinds(doc) == [UnorderedList]
        assert len(doc.children[0].items) == 2

    def test_list_span_covers_all_items(self, parse_source):
        doc = parse_source("- a\n- b\n")
        span = doc.children[0].span
        assert (span.start.line, span.end.line) == (1, 3)


class TestPackedPayloads:
    @pytest.mark.parametrize("packed", ["text|http://x", "[text](http://x)"])
    def test_link_from_either_encoding(self, packed):
        (link,) = parse_tokens([tok(TokenKind.LINK, packed)]).children
        assert (link.text, link.url) == ("text", "http://x")

    @pytest.mark.parametrize("packed", ["a|p.png", "![a](p.png)"])
    def test_image_from_either_encoding(self, packed):
        (image,) = parse_tokens([tok(TokenKind.IMAGE, packed)]).children
        assert (image.alt, image.src) == ("a", "p.png")

    def test_header_from_packed(self):
        (header,) = parse_tokens([tok(TokenKind.HEADER, "2:Sub")]).children
        assert (header.level, header.text) == (2, "Sub")

    def test_code_block_from_packed(self):
        (block,) = parse_tokens([tok(TokenKind.CODE_BLOCK, "py:x = 1")]).children
        assert (block.language, block.code) == ("py", "x = 1")

    def test_todo_from_packed(self):
        (task,) = parse_tokens([tok(TokenKind.TODO_ITEM, "- [x] done")]).children
        assert isinstance(task, TaskList)
        assert task.items[0].checked is True

    def test_wrong_payload_type(self):
        with pytest.raises(ParseError, match="malformed link payload"):
            parse_tokens([tok(TokenKind.LINK, HeaderPayload(1, "x"))])

    def test_structured_payload_for_text_kind(self):
        with pytest.raises(ParseError, match="expected text for paragraph"):
            parse_tokens([tok(TokenKind.PARAGRAPH, LinkPayload("a", "b"))])


class TestUnknownTokenKind:
    def test_raises_with_kind(self):
        widget = Token(_Foreign.WIDGET, "", "", S)  # type: ignore[arg-type]
        tokens = [tok(TokenKind.PARAGRAPH, "ok"), widget]
        with pytest.raises(UnknownTokenKind, match="unknown token kind 'WIDGET'") as exc_info:
            parse_tokens(tokens)
        assert exc_info.value.kind is _Foreign.WIDGET

    def test_is_a_parse_error(self):
        with pytest.raises(ParseError):
            parse_tokens([Token(_Foreign.WIDGET, "", "", S)])  # type: ignore[arg-type]


class TestEndOfStream:
    def test_missing_eof_is_tolerated(self):
        doc = Parser([tok(TokenKind.PARAGRAPH, "p")]).parse()
        assert _kinds(doc) == [Paragraph]

    def test_no_tokens(self):
        assert Parser([]).parse().children == ()

    def test_eof_before_last_token(self):
        tokens = [tok(TokenKind.EOF), tok(TokenKind.HEADER, "1:T")]
        with pytest.raises(ParseError, match="end of input marker before last token"):
            parse_tokens(tokens)

    def test_trailing_eof_ends_stream(self):
        doc = parse_tokens([tok(TokenKind.HEADER, "1:T"), tok(TokenKind.EOF)])
        assert _kinds(doc) == [Header]
