"""Front-matter detection, stripping and parsing.

Documents may begin with a YAML block fenced by ``---`` lines::

    ---
    title: Hello
    tags: [a, b]
    ---
    # Body starts here
"""

from __future__ import annotations

import logging
import re
from typing import Any

import yaml

from preview_app.constants.preview_constants import FRONT_MATTER_DELIMITER, FRONT_MATTER_PATTERN

logger = logging.getLogger(__name__)

_FRONT_MATTER_RE = re.compile(FRONT_MATTER_PATTERN)


def strip_frontmatter(text: str) -> str:
    """Return ``text`` without its leading front-matter block, if any."""
    if not text.startswith(FRONT_MATTER_DELIMITER):
        return text
    return _FRONT_MATTER_RE.sub("", text, count=1)


def parse_frontmatter(text: str) -> dict[str, Any]:
    """Parse the leading front-matter block into a dict.

    Missing, empty or malformed blocks yield an empty dict.
    """
    if not text.startswith(FRONT_MATTER_DELIMITER):
        return {}
    match = _FRONT_MATTER_RE.match(text)
    if match is None or not match.group(1):
        return {}
    try:
        loaded = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        logger.warning("Ignoring malformed front-matter: %s", exc)
        return {}
    if not isinstance(loaded, dict):
        return {}
    return {str(key): value for key, value in loaded.items()}
