"""Markdown + LaTeX rendering for generated questions, explanations and tips.

Generated text often carries Markdown bullets and inline math such as
``$\\frac{1}{2}$``. The renderer converts the Markdown to HTML on the server
and leaves the math delimiters untouched so MathJax can typeset them in the
browser. Raw HTML in generated text is not passed through.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

MATHJAX_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render a single line (an answer option) without wrapping it in <p>."""

        return self._markdown.renderInline(markdown_text.strip())


renderer = MarkdownMathRenderer()
# MarkdownIt is safe for concurrent read-only renders, so the FastAPI worker
# threads share this instance.
