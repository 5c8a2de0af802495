"""Markdown + LaTeX rendering helpers shared by the Qt preview and the browser mirror.

Architecture note:
    Math is kept as TeX inside the generated markup (``$...$`` / ``$$...$$``)
    and typeset by MathJax at display time in the browser mirror. The Qt
    preview shows the TeX source verbatim. Pre-rendering to SVG would make
    every keystroke pay for typesetting, which defeats the debounce budget.
"""

from __future__ import annotations

import html
from dataclasses import dataclass, field

from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin

from preview_app.core.errors import ParseError

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = True
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )
        # Math tokens must be claimed before emphasis rules see the underscores.
        self._markdown.use(dollarmath_plugin)
        self._markdown.renderer.rules["math_inline"] = _render_math_inline
        self._markdown.renderer.rules["math_block"] = _render_math_block

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""
        try:
            return self._markdown.render(markdown_text)
        except Exception as exc:
            raise ParseError(f"Markdown parsing failed: {exc}") from exc

    def wrap_with_mathjax(self, body_html: str, css: str = "", title: str = "MarkPreviewQt") -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{html.escape(title)}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
{css}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
{body_html}
  </body>
</html>"""


def _render_math_inline(tokens, idx, options, env):
    return f"${html.escape(tokens[idx].content)}$"


def _render_math_block(tokens, idx, options, env):
    math_body = (tokens[idx].content or "").strip("\n")
    return f'<div class="math-block">$$\n{html.escape(math_body)}\n$$</div>\n'
