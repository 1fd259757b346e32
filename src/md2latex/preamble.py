"""Wrap a generated fragment into a standalone LaTeX document."""

from __future__ import annotations

from collections.abc import Iterable

# listings: CodeBlock, hyperref: Link, graphicx: Image, amssymb: todo markers
DEFAULT_PACKAGES: tuple[str, ...] = ("listings", "hyperref", "graphicx", "amssymb")


def wrap_document(
    body: str,
    documentclass: str = "article",
    packages: Iterable[str] = (),
) -> str:
    """Surround *body* with a preamble and a ``document`` environment.

    Extra packages follow the defaults; duplicates are dropped.
    """
    seen: dict[str, None] = {}
    for name in (*DEFAULT_PACKAGES, *packages):
        seen.setdefault(name.strip(), None)

    parts: list[str] = [f"\\documentclass{{{documentclass}}}\n"]
    for name in seen:
        if name:
            parts.append(f"\\usepackage{{{name}}}\n")
    parts.append("\n\\begin{document}\n")
    parts.append(body)
    if not body.endswith("\n"):
        parts.append("\n")
    parts.append("\\end{document}\n")
    return "".join(parts)
