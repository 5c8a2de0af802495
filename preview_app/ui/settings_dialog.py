"""Settings dialog for theme, template, author profile and transform stages."""

from __future__ import annotations

from PySide6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
)

from preview_app.core.models import PersonalInfo, RenderSettings, StageSpec
from preview_app.styling import Theme

_STAGE_LABELS = {
    "heading_numbers": "Number second-level headings",
    "external_links": "Open external links in a new window",
    "images": "Lazy-load images and caption them with their alt text",
    "code_highlight": "Colour fenced code blocks",
    "tables": "Make wide tables scrollable",
}


class SettingsDialog(QDialog):
    """Edits a copy of the current :class:`RenderSettings`; never mutates it."""

    def __init__(
        self,
        settings: RenderSettings,
        template_names: list[str],
        parent=None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setModal(True)
        self.setMinimumWidth(440)

        self._settings = settings
        self._template_names = template_names
        self._stage_boxes: dict[str, QCheckBox] = {}

        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout()
        self.setLayout(layout)

        appearance_group = QGroupBox("Appearance")
        appearance = QFormLayout()
        appearance_group.setLayout(appearance)

        self.theme_combo = QComboBox()
        for theme in Theme:
            self.theme_combo.addItem(theme.value.capitalize(), theme.value)
        index = self.theme_combo.findData(self._settings.theme_id)
        self.theme_combo.setCurrentIndex(max(index, 0))
        appearance.addRow("Theme:", self.theme_combo)

        self.theme_color_edit = QLineEdit(self._settings.theme_color or "")
        self.theme_color_edit.setPlaceholderText("#0969DA (leave empty for the theme colour)")
        appearance.addRow("Accent colour:", self.theme_color_edit)

        self.hide_heading_checkbox = QCheckBox("Hide the document's leading heading")
        self.hide_heading_checkbox.setChecked(self._settings.hide_leading_heading)
        appearance.addRow(self.hide_heading_checkbox)
        layout.addWidget(appearance_group)

        template_group = QGroupBox("Template")
        template_layout = QFormLayout()
        template_group.setLayout(template_layout)
        self.use_template_checkbox = QCheckBox("Render through a template")
        self.use_template_checkbox.setChecked(self._settings.use_template)
        template_layout.addRow(self.use_template_checkbox)
        self.template_combo = QComboBox()
        self.template_combo.addItems(self._template_names)
        if self._settings.template_id in self._template_names:
            self.template_combo.setCurrentText(self._settings.template_id)
        template_layout.addRow("Template:", self.template_combo)
        layout.addWidget(template_group)

        author_group = QGroupBox("Author Profile")
        author = QFormLayout()
        author_group.setLayout(author)
        self.default_author_checkbox = QCheckBox("Use the default author when the document names none")
        self.default_author_checkbox.setChecked(self._settings.enable_default_author_profile)
        author.addRow(self.default_author_checkbox)
        self.default_author_edit = QLineEdit(self._settings.default_author_name)
        author.addRow("Default author:", self.default_author_edit)
        info = self._settings.personal_info
        self.profile_name_edit = QLineEdit(info.name)
        self.profile_bio_edit = QLineEdit(info.bio)
        self.profile_email_edit = QLineEdit(info.email)
        self.profile_website_edit = QLineEdit(info.website)
        self.profile_avatar_edit = QLineEdit(info.avatar)
        author.addRow("Name:", self.profile_name_edit)
        author.addRow("Bio (Markdown):", self.profile_bio_edit)
        author.addRow("Email:", self.profile_email_edit)
        author.addRow("Website:", self.profile_website_edit)
        author.addRow("Avatar URL:", self.profile_avatar_edit)
        layout.addWidget(author_group)

        stages_group = QGroupBox("Transform Stages")
        stages_layout = QVBoxLayout()
        stages_group.setLayout(stages_layout)
        for stage in self._settings.stages:
            checkbox = QCheckBox(_STAGE_LABELS.get(stage.id, stage.id))
            checkbox.setChecked(stage.enabled)
            stages_layout.addWidget(checkbox)
            self._stage_boxes[stage.id] = checkbox
        layout.addWidget(stages_group)

        button_row = QHBoxLayout()
        button_row.addStretch()
        self.cancel_button = QPushButton("Cancel")
        self.cancel_button.clicked.connect(self.reject)  # type: ignore[arg-type]
        button_row.addWidget(self.cancel_button)
        self.apply_button = QPushButton("Apply")
        self.apply_button.clicked.connect(self.accept)  # type: ignore[arg-type]
        self.apply_button.setDefault(True)
        button_row.addWidget(self.apply_button)
        layout.addLayout(button_row)

    def get_settings(self) -> RenderSettings:
        """Build the new settings snapshot from the dialog fields."""
        stages = tuple(
            StageSpec(
                id=stage.id,
                enabled=self._stage_boxes[stage.id].isChecked(),
                config=dict(stage.config),
            )
            for stage in self._settings.stages
        )
        theme_color = self.theme_color_edit.text().strip() or None
        return self._settings.with_changes(
            theme_id=self.theme_combo.currentData(),
            theme_color=theme_color,
            hide_leading_heading=self.hide_heading_checkbox.isChecked(),
            use_template=self.use_template_checkbox.isChecked(),
            template_id=self.template_combo.currentText() or self._settings.template_id,
            enable_default_author_profile=self.default_author_checkbox.isChecked(),
            default_author_name=self.default_author_edit.text().strip(),
            personal_info=PersonalInfo(
                name=self.profile_name_edit.text().strip(),
                bio=self.profile_bio_edit.text().strip(),
                email=self.profile_email_edit.text().strip(),
                website=self.profile_website_edit.text().strip(),
                avatar=self.profile_avatar_edit.text().strip(),
            ),
            stages=stages,
        )
