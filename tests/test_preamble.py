"""Tests for standalone document wrapping."""

from __future__ import annotations

from md2latex.preamble import DEFAULT_PACKAGES, wrap_document


class TestWrapDocument:
    def test_default_document(self):
        assert wrap_document("body") == (
            "\\documentclass{article}\n"
            "\\usepackage{listings}\n"
            "\\usepackage{hyperref}\n"
            "\\usepackage{graphicx}\n"
            "\\usepackage{amssymb}\n"
            "\n\\begin{document}\n"
            "body\n"
            "\\end{document}\n"
        )

    def test_documentclass(self):
        assert wrap_document("x", documentclass="report").startswith("\\documentclass{report}\n")

    def test_extra_packages_deduplicated(self):
        result = wrap_document("x", packages=["hyperref", "geometry", "geometry"])
        assert result.count("\\usepackage{hyperref}") == 1
        assert result.count("\\usepackage{geometry}") == 1
        assert result.index("{amssymb}") < result.index("{geometry}")

    def test_body_trailing_newline_not_doubled(self):
        assert "body\n\\end{document}" in wrap_document("body\n")

    def test_defaults_cover_generated_commands(self):
        assert set(DEFAULT_PACKAGES) == {"listings", "hyperref", "graphicx", "amssymb"}
