"""Qt adapter that mounts, updates and unmounts the preview surface."""

from __future__ import annotations

import html
import logging
from typing import Callable

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtWidgets import QLabel, QVBoxLayout, QWidget

from preview_app.constants.ui_constants import DIAGNOSTIC_HINT, DIAGNOSTIC_TITLE
from preview_app.core.models import PreviewProps
from preview_app.ui.preview_surface import PreviewSurface

logger = logging.getLogger(__name__)


def _container_layout(container: QWidget) -> QVBoxLayout:
    layout = container.layout()
    if layout is None:
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        container.setLayout(layout)
    return layout


def _clear_container(container: QWidget) -> None:
    layout = _container_layout(container)
    while layout.count():
        item = layout.takeAt(0)
        widget = item.widget()
        if widget is not None:
            widget.setParent(None)
            widget.deleteLater()


class SurfaceMountHandle:
    """Handle to one mounted :class:`PreviewSurface`.

    Completions are posted to the event loop so callers always observe them on
    a later turn, the same as a real asynchronous renderer.
    """

    def __init__(self, bridge: QtPreviewBridge, surface: PreviewSurface) -> None:
        self._bridge = bridge
        self._surface: PreviewSurface | None = surface

    @property
    def surface(self) -> PreviewSurface | None:
        return self._surface

    def update(self, props: PreviewProps, on_done: Callable[[], None]) -> None:
        if self._surface is None:
            raise RuntimeError("Preview surface has already been unmounted")
        self._surface.apply_props(props)
        QTimer.singleShot(0, on_done)

    def unmount(self) -> None:
        surface = self._surface
        self._surface = None
        if surface is None:
            return
        surface.detach_patch_channel()
        self._bridge.surface_unmounted.emit(surface)
        surface.setParent(None)
        surface.deleteLater()


class QtPreviewBridge(QObject):
    """Draws the preview surface into a container widget.

    ``surface_mounted`` fires once a new surface is in place so the host can
    register its browser as the patch target.
    """

    surface_mounted = Signal(object)
    surface_unmounted = Signal(object)

    def mount(
        self,
        container: QWidget,
        props: PreviewProps,
        on_ready: Callable[[], None],
        *,
        isolation: bool = False,
    ) -> SurfaceMountHandle:
        _clear_container(container)
        surface = PreviewSurface(container, isolated=isolation)
        surface.apply_props(props)
        _container_layout(container).addWidget(surface)
        handle = SurfaceMountHandle(self, surface)
        self.surface_mounted.emit(surface)
        QTimer.singleShot(0, on_ready)
        return handle

    def show_diagnostic(self, container: QWidget, message: str) -> None:
        _clear_container(container)
        panel = QLabel(
            f"<h3>{DIAGNOSTIC_TITLE}</h3><p>{html.escape(message)}</p><p><em>{DIAGNOSTIC_HINT}</em></p>",
            container,
        )
        panel.setWordWrap(True)
        panel.setObjectName("previewDiagnostic")
        _container_layout(container).addWidget(panel)
        logger.info("Diagnostic panel shown")
