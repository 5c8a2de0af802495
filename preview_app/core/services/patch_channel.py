"""Direct, scroll-preserving content updates for an already mounted surface.

Going through the bridge re-applies every prop and rebuilds the surface,
which resets the scroll position and drops controls that were added after
rendering (code-block copy actions, for instance). For content-only edits the
engine writes the new markup straight into the registered target instead.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class PatchTarget(Protocol):
    """A scrollable node whose markup can be replaced synchronously."""

    def scroll_offset(self) -> int: ...

    def max_scroll_offset(self) -> int: ...

    def set_scroll_offset(self, offset: int) -> None: ...

    def set_markup(self, markup: str) -> None: ...

    def set_stylesheet(self, css: str) -> None: ...


class PatchChannel:
    """Holds the registered patch target and notifies observers after each patch."""

    def __init__(self) -> None:
        self._target: PatchTarget | None = None
        self._listeners: list[Callable[[], None]] = []

    def register_target(self, target: PatchTarget) -> None:
        self._target = target
        logger.debug("Patch target registered")

    def clear_target(self) -> None:
        self._target = None

    def is_ready(self) -> bool:
        return self._target is not None

    def on_patched(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register ``callback`` to run after every content patch; returns an unsubscriber."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def patch_content(self, markup: str) -> bool:
        """Replace the target markup, keeping the scroll offset. False if no target."""
        target = self._target
        if target is None:
            return False
        offset = target.scroll_offset()
        target.set_markup(markup)
        target.set_scroll_offset(max(0, min(offset, target.max_scroll_offset())))
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("Patch observer failed")
        return True

    def patch_style(self, css: str) -> bool:
        target = self._target
        if target is None:
            return False
        offset = target.scroll_offset()
        target.set_stylesheet(css)
        target.set_scroll_offset(max(0, min(offset, target.max_scroll_offset())))
        return True
