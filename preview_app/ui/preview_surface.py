"""Mounted preview component: metadata header plus the article browser."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMenu,
    QTextBrowser,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from preview_app.constants.ui_constants import BUTTON_COPY_CODE, EMPTY_PREVIEW_MESSAGE
from preview_app.core.models import PreviewProps
from preview_app.core.services.patch_channel import PatchChannel
from preview_app.utils.html_utils import code_block_label, extract_code_blocks


class TextBrowserPatchTarget:
    """Patch target over a ``QTextBrowser``; its scroll bar updates synchronously."""

    def __init__(self, browser: QTextBrowser) -> None:
        self._browser = browser
        self._markup = ""

    @property
    def markup(self) -> str:
        return self._markup

    def scroll_offset(self) -> int:
        return self._browser.verticalScrollBar().value()

    def max_scroll_offset(self) -> int:
        return self._browser.verticalScrollBar().maximum()

    def set_scroll_offset(self, offset: int) -> None:
        self._browser.verticalScrollBar().setValue(offset)

    def set_markup(self, markup: str) -> None:
        self._markup = markup
        self._browser.setHtml(markup or f"<p><em>{EMPTY_PREVIEW_MESSAGE}</em></p>")

    def set_stylesheet(self, css: str) -> None:
        # Qt applies the default stylesheet when HTML is parsed.
        self._browser.document().setDefaultStyleSheet(css)
        self._browser.setHtml(self._markup or f"<p><em>{EMPTY_PREVIEW_MESSAGE}</em></p>")


class PreviewSurface(QWidget):
    """Header labels and a read-only article pane drawn from :class:`PreviewProps`."""

    def __init__(self, parent: QWidget | None = None, *, isolated: bool = False) -> None:
        super().__init__(parent)
        self._code_blocks: list[str] = []
        self._has_props = False
        self._document_path: str | None = None
        self._unsubscribe_patches: Callable[[], None] | None = None

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        self.setLayout(layout)

        header = QHBoxLayout()
        text_column = QVBoxLayout()
        self.title_label = QLabel(self)
        self.title_label.setStyleSheet("font-size: 16pt; font-weight: bold;")
        self.title_label.setWordWrap(True)
        self.byline_label = QLabel(self)
        self.tags_label = QLabel(self)
        text_column.addWidget(self.title_label)
        text_column.addWidget(self.byline_label)
        text_column.addWidget(self.tags_label)
        header.addLayout(text_column, stretch=1)

        self.copy_code_button = QToolButton(self)
        self.copy_code_button.setText(BUTTON_COPY_CODE)
        self.copy_code_button.setPopupMode(QToolButton.InstantPopup)
        self.copy_code_button.setMenu(QMenu(self.copy_code_button))
        header.addWidget(self.copy_code_button, alignment=Qt.AlignTop)
        layout.addLayout(header)

        self.browser = QTextBrowser(self)
        self.browser.setOpenExternalLinks(True)
        if isolated:
            # Keep the host window palette out of the article pane.
            self.browser.setPalette(QApplication.style().standardPalette())
            self.browser.setAutoFillBackground(True)
        layout.addWidget(self.browser, stretch=1)

        self.patch_target = TextBrowserPatchTarget(self.browser)

    def apply_props(self, props: PreviewProps) -> None:
        """Full re-evaluation of every prop.

        The scroll position survives unless this is the first render or a
        different document is shown.
        """
        metadata = props.metadata
        title = str(metadata.get("title") or "")
        self.title_label.setText(title)
        self.title_label.setVisible(bool(title))

        byline = " · ".join(
            part for part in (str(metadata.get("author") or ""), str(metadata.get("publish_date") or "")) if part
        )
        self.byline_label.setText(byline)
        self.byline_label.setVisible(bool(byline))

        tags = metadata.get("tags") or []
        self.tags_label.setText(" ".join(f"#{tag}" for tag in tags))
        self.tags_label.setVisible(bool(tags))

        same_document = self._has_props and props.document_path == self._document_path
        offset = self.patch_target.scroll_offset() if same_document else 0
        self.browser.document().setDefaultStyleSheet(props.css)
        self.patch_target.set_markup(props.markup)
        self.patch_target.set_scroll_offset(max(0, min(offset, self.patch_target.max_scroll_offset())))
        self._has_props = True
        self._document_path = props.document_path
        self.refresh_code_actions()

    def attach_patch_channel(self, channel: PatchChannel) -> None:
        """Rebuild the copy menu after every direct content patch."""
        self.detach_patch_channel()
        self._unsubscribe_patches = channel.on_patched(self.refresh_code_actions)

    def detach_patch_channel(self) -> None:
        if self._unsubscribe_patches is not None:
            self._unsubscribe_patches()
            self._unsubscribe_patches = None

    def refresh_code_actions(self) -> None:
        self._code_blocks = extract_code_blocks(self.patch_target.markup)
        menu = self.copy_code_button.menu()
        menu.clear()
        for index, code in enumerate(self._code_blocks):
            action = menu.addAction(f"{index + 1}. {code_block_label(code)}")
            action.triggered.connect(lambda _checked=False, text=code: self._copy(text))
        self.copy_code_button.setEnabled(bool(self._code_blocks))

    def code_blocks(self) -> list[str]:
        return list(self._code_blocks)

    def _copy(self, text: str) -> None:
        QGuiApplication.clipboard().setText(text)
