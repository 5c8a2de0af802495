"""Coalesces bursts of document edits into single render requests."""

from __future__ import annotations

import logging
from typing import Callable

from PySide6.QtCore import QTimer

from preview_app.constants.preview_constants import DEBOUNCE_DELAY_MS

logger = logging.getLogger(__name__)


class DebounceController:
    """Debounces ``on_document_changed`` calls behind one quiet-window timer.

    Every call restarts the timer, so only the last call of a burst survives.
    When the timer fires, the newest text is compared with the last text that
    was fully processed and the render callback runs only if it differs.
    """

    def __init__(
        self,
        on_render: Callable[[str], None],
        delay_ms: int = DEBOUNCE_DELAY_MS,
        timer_factory: Callable[[], QTimer] = QTimer,
    ) -> None:
        self._on_render = on_render
        self._pending_text: str | None = None
        self._last_processed_text: str | None = None

        self._timer = timer_factory()
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(self._on_timeout)

    def on_document_changed(self, raw_text: str) -> None:
        self._pending_text = raw_text
        self._timer.start()

    def is_pending(self) -> bool:
        return self._pending_text is not None and self._timer.isActive()

    def flush(self) -> None:
        """Process a pending change now instead of waiting for the timer."""
        if self._timer.isActive():
            self._timer.stop()
            self._on_timeout()

    def mark_processed(self, text: str) -> None:
        """Record ``text`` as displayed by a path other than the timer."""
        self._last_processed_text = text

    def reset(self) -> None:
        """Forget the last processed text so the next fire always renders."""
        self._last_processed_text = None

    def teardown(self) -> None:
        self._timer.stop()
        self._pending_text = None

    def _on_timeout(self) -> None:
        text = self._pending_text
        self._pending_text = None
        if text is None:
            return
        if text == self._last_processed_text:
            logger.debug("Document unchanged since last render; skipping")
            return
        self._on_render(text)
        self._last_processed_text = text
