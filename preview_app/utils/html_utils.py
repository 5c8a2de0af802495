"""Small helpers for pulling text back out of rendered markup."""

from __future__ import annotations

import html
import re

_CODE_BLOCK_RE = re.compile(r"<pre[^>]*>\s*<code[^>]*>([\s\S]*?)</code>\s*</pre>")
_TAG_RE = re.compile(r"<[^>]+>")


def extract_code_blocks(markup: str) -> list[str]:
    """Return the plain source of every ``<pre><code>`` block, in order.

    Highlighting spans are dropped before unescaping.
    """
    return [
        html.unescape(_TAG_RE.sub("", match.group(1))).rstrip("\n")
        for match in _CODE_BLOCK_RE.finditer(markup)
    ]


def code_block_label(code: str, max_length: int = 40) -> str:
    """Short single-line label for a code block, used in copy menus."""
    first_line = next((line.strip() for line in code.splitlines() if line.strip()), "")
    if not first_line:
        return "(empty block)"
    if len(first_line) > max_length:
        return first_line[: max_length - 1] + "…"
    return first_line
