"""Qt main window: Markdown editor on the left, live preview on the right."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from preview_app.constants.about import APP_ABOUT_TEXT, APP_LICENSE, APP_NAME, APP_VERSION, HELP_TEXT
from preview_app.constants.ui_constants import (
    BUTTON_ARTICLE_INFO,
    BUTTON_COPY_HTML,
    BUTTON_OPEN,
    BUTTON_SAVE,
    BUTTON_SETTINGS,
    HELP_DIALOG_FONT_POINT_SIZE,
    MARKDOWN_FILE_FILTER,
    OPEN_DIALOG_TITLE,
    PLACEHOLDER_EDITOR,
    SAVE_DIALOG_TITLE,
    UNTITLED_DOCUMENT,
    WINDOW_TITLE,
)
from preview_app.core.preview_engine import PreviewEngine
from preview_app.core.services.document_source import DocumentSource
from preview_app.core.services.settings_store import SettingsStore
from preview_app.styling import Styles, theme_from_id
from preview_app.ui.article_info_dialog import ArticleInfoDialog
from preview_app.ui.dialog_helpers import confirm_discard_changes, show_error, show_info
from preview_app.ui.preview_bridge import QtPreviewBridge
from preview_app.ui.preview_surface import PreviewSurface
from preview_app.ui.settings_dialog import SettingsDialog

logger = logging.getLogger(__name__)


class PreviewWindow(QMainWindow):
    """Editor window wiring user input to the :class:`PreviewEngine`."""

    def __init__(
        self,
        engine: PreviewEngine,
        bridge: QtPreviewBridge,
        preview_container: QWidget,
        document_source: DocumentSource,
        settings_store: SettingsStore,
        template_names: list[str],
        mirror_url: str | None = None,
    ) -> None:
        super().__init__()
        self.engine = engine
        self.document_source = document_source
        self.settings_store = settings_store
        self.template_names = template_names
        self.mirror_url = mirror_url
        self.preview_container = preview_container

        self._path = UNTITLED_DOCUMENT
        self._dirty = False

        bridge.surface_mounted.connect(self._on_surface_mounted)
        bridge.surface_unmounted.connect(self._on_surface_unmounted)

        self._build_ui()
        self._apply_styles()

    def _build_ui(self) -> None:
        central_widget = QWidget(self)
        self.setCentralWidget(central_widget)
        root_layout = QVBoxLayout()
        central_widget.setLayout(root_layout)

        button_row = QHBoxLayout()
        for text, handler in (
            (BUTTON_OPEN, self._handle_open),
            (BUTTON_SAVE, self._handle_save),
            (BUTTON_ARTICLE_INFO, self._handle_article_info),
            (BUTTON_SETTINGS, self._handle_settings),
            (BUTTON_COPY_HTML, self._handle_copy_html),
            (f"About {APP_NAME}", self._handle_about),
            ("Help", self._handle_help),
        ):
            button = QPushButton(text, self)
            button.clicked.connect(handler)
            button_row.addWidget(button)
        button_row.addStretch()
        if self.mirror_url:
            mirror_label = QLabel(f'Browser mirror: <a href="{self.mirror_url}">{self.mirror_url}</a>', self)
            mirror_label.setOpenExternalLinks(True)
            button_row.addWidget(mirror_label)
        root_layout.addLayout(button_row)

        splitter = QSplitter(self)
        self.editor = QPlainTextEdit(splitter)
        self.editor.setPlaceholderText(PLACEHOLDER_EDITOR)
        self.editor.textChanged.connect(self._on_editor_changed)
        splitter.addWidget(self.editor)
        self.preview_container.setParent(splitter)
        splitter.addWidget(self.preview_container)
        splitter.setSizes([500, 600])
        root_layout.addWidget(splitter, stretch=1)

    # --- Document handling ---

    def load_document(self, path: str) -> None:
        """Show ``path`` in the editor and preview it immediately."""
        try:
            text = self.document_source.read(path)
        except OSError as exc:
            show_error(self, "Open failed", str(exc))
            return
        self._path = path
        self.editor.blockSignals(True)
        self.editor.setPlainText(text)
        self.editor.blockSignals(False)
        self._dirty = False
        self.engine.open_document(path)
        self._update_title()

    def start_untitled(self) -> None:
        self.document_source.update_text(UNTITLED_DOCUMENT, "")
        self.load_document(UNTITLED_DOCUMENT)

    def _on_editor_changed(self) -> None:
        self._dirty = True
        self.document_source.update_text(self._path, self.editor.toPlainText())
        self._update_title()

    def _update_title(self) -> None:
        marker = "*" if self._dirty else ""
        self.setWindowTitle(f"{marker}{Path(self._path).name} - {WINDOW_TITLE}")

    def _confirm_leave_document(self) -> bool:
        if not self._dirty:
            return True
        choice = confirm_discard_changes(self, Path(self._path).name)
        if choice is None:
            return False
        if choice:
            return self._handle_save()
        return True

    def _handle_open(self) -> None:
        if not self._confirm_leave_document():
            return
        file_path, _ = QFileDialog.getOpenFileName(
            self, OPEN_DIALOG_TITLE, str(Path.home()), MARKDOWN_FILE_FILTER
        )
        if file_path:
            self.load_document(file_path)

    def _handle_save(self) -> bool:
        target: Path | None = None
        if self._path == UNTITLED_DOCUMENT:
            file_path, _ = QFileDialog.getSaveFileName(
                self, SAVE_DIALOG_TITLE, str(Path.cwd() / UNTITLED_DOCUMENT), MARKDOWN_FILE_FILTER
            )
            if not file_path:
                return False
            target = Path(file_path)
        try:
            saved = self.document_source.save(self._path, target)
        except OSError as exc:
            show_error(self, "Save failed", str(exc))
            return False
        if target is not None:
            self.document_source.update_text(str(saved), self.editor.toPlainText())
            self._path = str(saved)
            self.engine.open_document(self._path)
        self._dirty = False
        self._update_title()
        return True

    # --- Preview surface wiring ---

    def _on_surface_mounted(self, surface: PreviewSurface) -> None:
        surface.attach_patch_channel(self.engine.patch_channel)
        self.engine.register_patch_target(surface.patch_target)

    def _on_surface_unmounted(self, _surface: PreviewSurface) -> None:
        self.engine.clear_patch_target()

    # --- Dialogs ---

    def _handle_article_info(self) -> None:
        dialog = ArticleInfoDialog(
            self.engine.metadata_override,
            self.document_source.get_frontmatter(self._path),
            self,
        )
        if dialog.exec():
            self.engine.set_metadata_override(dialog.get_override())

    def _handle_settings(self) -> None:
        dialog = SettingsDialog(self.engine.settings, self.template_names, self)
        if not dialog.exec():
            return
        settings = dialog.get_settings()
        self.engine.update_settings(settings)
        try:
            self.settings_store.save(settings)
        except OSError as exc:
            show_error(self, "Settings not saved", str(exc))
        self._apply_styles()

    def _handle_copy_html(self) -> None:
        QGuiApplication.clipboard().setText(self.engine.ensure_rendered())

    def _handle_about(self) -> None:
        details = (
            f"{APP_NAME} v{APP_VERSION}\n"
            f"License: {APP_LICENSE}\n\n"
            f"{APP_ABOUT_TEXT}"
        )
        show_info(self, f"About {APP_NAME}", details)

    def _handle_help(self) -> None:
        show_info(self, f"{APP_NAME} Help", HELP_TEXT, font_point_size=HELP_DIALOG_FONT_POINT_SIZE)

    def _apply_styles(self) -> None:
        self.setStyleSheet(Styles.get_main_window_style(theme_from_id(self.engine.settings.theme_id)))

    def closeEvent(self, event) -> None:  # noqa: N802
        if not self._confirm_leave_document():
            event.ignore()
            return
        self.engine.teardown()
        super().closeEvent(event)
