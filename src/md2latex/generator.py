"""LaTeX generator — converts a parsed AST to a LaTeX fragment."""

from __future__ import annotations

import re
from collections.abc import Iterable

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

SECTIONING = ("section", "subsection", "subsubsection", "paragraph", "subparagraph")

UNCHECKED_MARK = r"$\square$"
CHECKED_MARK = r"$\boxtimes$"

_TODO_PREFIXES = {"- [ ]": False, "- [x]": True, "- [X]": True}

# Markdown column alignment row, e.g. |---|:-:|--:|
_ALIGN_ROW = re.compile(r"\|?\s*:?-+:?\s*(?:\|\s*:?-+:?\s*)*\|?")


def generate(doc: Document | Iterable[Node]) -> str:
    """Render every top-level node and join the results with newlines."""
    children = doc.children if isinstance(doc, Document) else doc
    return "\n".join(_render_node(node) for node in children)


# ---------------------------------------------------------------------------
# LaTeX escaping
# ---------------------------------------------------------------------------

_LATEX_SPECIAL = frozenset("&%$#_{}~^")


def escape_latex(text: str) -> str:
    """Backslash-prefix LaTeX special characters in user text.

    ``\\~`` and ``\\^`` are accent commands in text mode rather than the
    literal characters; this is kept as-is for compatibility with existing
    output.
    """
    result: list[str] = []
    for ch in text:
        if ch in _LATEX_SPECIAL:
            result.append("\\")
        result.append(ch)
    return "".join(result)


# ---------------------------------------------------------------------------
# Node dispatch
# ---------------------------------------------------------------------------


def _render_node(node: object) -> str:
    match node:
        case Header():
            return _render_header(node)
        case Paragraph(text=text):
            return f"{escape_latex(text)}\n\n"
        case Text(text=text):
            return escape_latex(text)
        case Bold(text=text):
            return f"\\textbf{{{escape_latex(text)}}}"
        case Italic(text=text):
            return f"\\textit{{{escape_latex(text)}}}"
        case Code(text=text):
            return f"\\texttt{{{escape_latex(text)}}}"
        case CodeBlock():
            return _render_code_block(node)
        case Link(text=text, url=url):
            return f"\\href{{{url}}}{{{escape_latex(text)}}}"
        case Image():
            return _render_image(node)
        case Blockquote(text=text):
            return f"\\begin{{quote}}\n{escape_latex(text)}\n\\end{{quote}}"
        case UnorderedList(items=items) | TaskList(items=items):
            return _render_list("itemize", items)
        case OrderedList(items=items):
            return _render_list("enumerate", items)
        case ListItem() | TodoItem():
            return _render_item(node)
        case Table(text=text):
            return _render_table(text)
        case InlineMath(text=text):
            return f"${text}$"
        case BlockMath(text=text):
            return f"\\[\n{text}\n\\]"
        case LineBreak():
            return "\\\\"
        case _:
            return ""


# ---------------------------------------------------------------------------
# Block renderers
# ---------------------------------------------------------------------------


def _render_header(node: Header) -> str:
    if 1 <= node.level <= len(SECTIONING):
        command = SECTIONING[node.level - 1]
    else:
        command = "section"
    return f"\\{command}{{{escape_latex(node.text)}}}"


def _render_code_block(node: CodeBlock) -> str:
    option = f"[language={node.language}]" if node.language else ""
    return f"\\begin{{lstlisting}}{option}\n{node.code}\n\\end{{lstlisting}}"


def _render_image(node: Image) -> str:
    return (
        "\\begin{figure}[h]\n"
        "\\centering\n"
        f"\\includegraphics[width=0.8\\textwidth]{{{node.src}}}\n"
        f"\\caption{{{escape_latex(node.alt)}}}\n"
        "\\end{figure}"
    )


def _render_item(item: ListItem | TodoItem) -> str:
    if isinstance(item, TodoItem):
        return _item_line(item.text, item.checked)
    return _item_line(item.text, None)


def _item_line(text: str, checked: bool | None) -> str:
    if checked is None:
        return f"\\item {escape_latex(text)}"
    mark = CHECKED_MARK if checked else UNCHECKED_MARK
    return f"\\item[{mark}] {escape_latex(text)}"


def _render_list(env: str, items: Iterable[ListItem | TodoItem]) -> str:
    lines = [_render_item(item) for item in items]
    if not lines:
        return ""
    return "\n".join([f"\\begin{{{env}}}", *lines, f"\\end{{{env}}}"])


def render_task_list(payload: str) -> str:
    """Render a ``|``-joined task payload as an itemize list.

    Compatibility entry point for callers that still hold the packed
    task-list string; parsed documents render through ``TaskList`` nodes.

    Items prefixed ``- [ ]`` get the unchecked marker, ``- [x]`` the checked
    one; anything else becomes a plain item.
    """
    lines: list[str] = []
    for entry in payload.split("|"):
        checked = _TODO_PREFIXES.get(entry[:5])
        text = entry[5:] if checked is not None else entry
        lines.append(_item_line(text.strip(), checked))
    return "\n".join(["\\begin{itemize}", *lines, "\\end{itemize}"])


def _split_row(row: str) -> list[str]:
    inner = row.strip().removeprefix("|").removesuffix("|")
    return [cell.strip() for cell in inner.split("|")]


def _render_table(text: str) -> str:
    """Render pipe-table rows as a tabular with a uniform centred column spec.

    Rules go above the first row and below the last row only.
    """
    rows = [_split_row(row) for row in text.split("\n") if not _ALIGN_ROW.fullmatch(row.strip())]
    if not rows:
        return ""

    lines = [f"\\begin{{tabular}}{{{'c' * len(rows[0])}}}", "\\hline"]
    for cells in rows:
        lines.append(" & ".join(escape_latex(cell) for cell in cells) + " \\\\")
    lines.append("\\hline")
    lines.append("\\end{tabular}")
    return "\n".join(lines)
