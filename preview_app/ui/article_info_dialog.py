"""Dialog for per-document metadata overrides."""

from __future__ import annotations

from typing import Any, Mapping

from PySide6.QtWidgets import (
    QCheckBox,
    QDialog,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

_FIELDS = (
    ("title", "Title"),
    ("author", "Author"),
    ("publish_date", "Publish date"),
    ("tags", "Tags (comma separated)"),
    ("epigraph", "Epigraph"),
)


class ArticleInfoDialog(QDialog):
    """Each field has an Override box.

    A ticked box with an empty field is an explicit clear: the value stays
    empty even when the front-matter provides one. An unticked box leaves the
    key out of the override entirely.
    """

    def __init__(
        self,
        override: Mapping[str, Any],
        frontmatter: Mapping[str, Any],
        parent=None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Article Info")
        self.setModal(True)
        self.setMinimumWidth(480)
        self._edits: dict[str, QLineEdit] = {}
        self._boxes: dict[str, QCheckBox] = {}

        layout = QVBoxLayout()
        self.setLayout(layout)
        grid = QGridLayout()
        grid.addWidget(QLabel("<b>Field</b>"), 0, 0)
        grid.addWidget(QLabel("<b>Value</b>"), 0, 1)
        grid.addWidget(QLabel("<b>Override</b>"), 0, 2)

        for row, (key, label) in enumerate(_FIELDS, start=1):
            edit = QLineEdit(_display(override.get(key, "")))
            edit.setPlaceholderText(_display(frontmatter.get(key, "")))
            box = QCheckBox()
            box.setChecked(key in override)
            edit.textEdited.connect(lambda _text, b=box: b.setChecked(True))
            grid.addWidget(QLabel(label), row, 0)
            grid.addWidget(edit, row, 1)
            grid.addWidget(box, row, 2)
            self._edits[key] = edit
            self._boxes[key] = box
        layout.addLayout(grid)

        hint = QLabel("Placeholders show the front-matter value used when a field is not overridden.")
        hint.setWordWrap(True)
        layout.addWidget(hint)

        button_row = QHBoxLayout()
        button_row.addStretch()
        cancel_button = QPushButton("Cancel")
        cancel_button.clicked.connect(self.reject)  # type: ignore[arg-type]
        button_row.addWidget(cancel_button)
        apply_button = QPushButton("Apply")
        apply_button.clicked.connect(self.accept)  # type: ignore[arg-type]
        apply_button.setDefault(True)
        button_row.addWidget(apply_button)
        layout.addLayout(button_row)

    def get_override(self) -> dict[str, Any]:
        override: dict[str, Any] = {}
        for key, box in self._boxes.items():
            if not box.isChecked():
                continue
            text = self._edits[key].text().strip()
            if key == "tags":
                override[key] = [tag.strip() for tag in text.split(",") if tag.strip()]
            else:
                override[key] = text
        return override


def _display(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return "" if value is None else str(value)
