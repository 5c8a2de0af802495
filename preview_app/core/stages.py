"""Builtin transform stages.

Each stage is a pure ``apply(markup, config) -> markup`` function operating on
the wrapped article markup. Stages never touch shared state; everything they
need arrives through ``config``.
"""

from __future__ import annotations

import html
import re
from itertools import count
from typing import Any, Mapping

from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

_H2_OPEN_RE = re.compile(r"<h2(?:\s[^>]*)?>")
_EXTERNAL_LINK_RE = re.compile(r'<a href="(https?://[^"]+)"([^>]*)>')
_IMG_RE = re.compile(r"<img\b(?![^>]*\bloading=)")
_LONE_IMAGE_PARAGRAPH_RE = re.compile(r'<p>(<img\b[^>]*\balt="([^"]*)"[^>]*>)</p>')
_FENCED_CODE_RE = re.compile(r'<pre><code class="language-([\w+#.-]+)">([\s\S]*?)</code></pre>')

_ROMAN_NUMERALS = (
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
)


def _to_roman(value: int) -> str:
    parts: list[str] = []
    for number, numeral in _ROMAN_NUMERALS:
        while value >= number:
            parts.append(numeral)
            value -= number
    return "".join(parts)


def _to_letters(value: int) -> str:
    letters = ""
    while value > 0:
        value, remainder = divmod(value - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def format_heading_number(index: int, style: str) -> str:
    """Format a 1-based heading index in the requested numbering style."""
    if style == "number":
        return f"{index:02d}"
    if style == "roman":
        return _to_roman(index)
    if style == "roman-lower":
        return _to_roman(index).lower()
    if style == "letter":
        return _to_letters(index)
    if style == "letter-lower":
        return _to_letters(index).lower()
    return str(index)


def heading_numbers(markup: str, config: Mapping[str, Any]) -> str:
    """Prefix every second-level heading with a running number."""
    style = str(config.get("style", "index"))
    number_format = str(config.get("format", "{}"))
    counter = count(1)

    def insert_number(match: re.Match[str]) -> str:
        label = number_format.replace("{}", format_heading_number(next(counter), style))
        return f'{match.group(0)}<span class="heading-number">{html.escape(label)}</span>'

    return _H2_OPEN_RE.sub(insert_number, markup)


def external_links(markup: str, config: Mapping[str, Any]) -> str:
    """Open external links in a new window, optionally listing them as footnotes."""
    urls: list[str] = []

    def rewrite(match: re.Match[str]) -> str:
        url, rest = match.group(1), match.group(2)
        urls.append(url)
        if "target=" in rest:
            return match.group(0)
        return f'<a href="{url}"{rest} target="_blank" rel="noopener">'

    result = _EXTERNAL_LINK_RE.sub(rewrite, markup)
    if not config.get("footnotes") or not urls:
        return result

    items = "".join(f"<li>{url}</li>" for url in urls)
    footnotes = f'<section class="link-footnotes"><h4>Links</h4><ol>{items}</ol></section>'
    head, closing, tail = result.rpartition("</section>")
    if not closing:
        return result + footnotes
    return f"{head}{footnotes}{closing}{tail}"


def images(markup: str, config: Mapping[str, Any]) -> str:
    """Lazy-load images; wrap stand-alone images in a captioned figure."""
    result = _IMG_RE.sub('<img loading="lazy"', markup)
    if not config.get("caption", False):
        return result

    def to_figure(match: re.Match[str]) -> str:
        image, alt = match.group(1), match.group(2)
        caption = f"<figcaption>{alt}</figcaption>" if alt else ""
        return f"<figure>{image}{caption}</figure>"

    return _LONE_IMAGE_PARAGRAPH_RE.sub(to_figure, result)


def tables(markup: str, config: Mapping[str, Any]) -> str:
    """Wrap tables in a horizontally scrollable container."""
    wrapper_class = str(config.get("wrapper_class", "table-wrapper"))
    return (
        markup.replace("<table>", f'<div class="{wrapper_class}"><table>')
        .replace("</table>", "</table></div>")
    )


def code_highlight(markup: str, config: Mapping[str, Any]) -> str:
    """Colour fenced code blocks with inline Pygments styles.

    Blocks without a language, or with one Pygments does not know, are left
    untouched. The ``<pre><code>`` wrapper is kept so code can still be copied.
    """
    formatter = HtmlFormatter(style=str(config.get("style", "default")), nowrap=True, noclasses=True)

    def colour(match: re.Match[str]) -> str:
        language, escaped = match.group(1), match.group(2)
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            return match.group(0)
        coloured = highlight(html.unescape(escaped), lexer, formatter)
        return f'<pre><code class="language-{language} highlight">{coloured}</code></pre>'

    return _FENCED_CODE_RE.sub(colour, markup)


BUILTIN_STAGES = {
    "heading_numbers": heading_numbers,
    "external_links": external_links,
    "images": images,
    "code_highlight": code_highlight,
    "tables": tables,
}
