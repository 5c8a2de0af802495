"""Document text provider backed by disk plus live editor buffers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from preview_app.core.frontmatter import parse_frontmatter
from preview_app.core.models import Document

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str, str], None]


class DocumentSource:
    """Serves document snapshots and notifies subscribers of edits.

    Text typed into the editor lives in an in-memory buffer per path; disk is
    only read the first time a path is requested and written on ``save``.
    """

    def __init__(self) -> None:
        self._buffers: dict[str, str] = {}
        self._callbacks: list[ChangeCallback] = []

    def read(self, path: str) -> str:
        buffered = self._buffers.get(path)
        if buffered is not None:
            return buffered
        text = Path(path).read_text(encoding="utf-8")
        self._buffers[path] = text
        return text

    def snapshot(self, path: str) -> Document:
        return Document(path=path, text=self.read(path))

    def update_text(self, path: str, text: str) -> None:
        """Replace the buffer for ``path`` and notify subscribers."""
        if self._buffers.get(path) == text:
            return
        self._buffers[path] = text
        for callback in list(self._callbacks):
            try:
                callback(path, text)
            except Exception:
                logger.exception("Document change subscriber failed for %s", path)

    def save(self, path: str, target: Path | None = None) -> Path:
        destination = target or Path(path)
        destination.write_text(self.read(path), encoding="utf-8")
        logger.info("Saved %s", destination)
        return destination

    def on_change(self, callback: ChangeCallback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def get_frontmatter(self, path: str) -> dict[str, Any]:
        try:
            return parse_frontmatter(self.read(path))
        except OSError:
            logger.warning("Cannot read front-matter of %s", path)
            return {}
