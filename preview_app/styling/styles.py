"""Qt window stylesheet and article CSS generated from the palette."""

from __future__ import annotations

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate stylesheets based on the current theme."""

    @staticmethod
    def get_main_window_style(theme: Theme = Theme.LIGHT) -> str:
        return f"""
            QMainWindow, QDialog {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
            }}
            QWidget {{
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QPushButton {{
                background-color: {ColorPalette.BUTTON_SECONDARY_BG.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 6px 12px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.BUTTON_HOVER_BG.get(theme)};
            }}
            QLineEdit, QPlainTextEdit, QComboBox {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 4px;
            }}
            QTextBrowser {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                border: none;
            }}
        """

    @staticmethod
    def get_article_stylesheet(theme: Theme = Theme.LIGHT, theme_color: str | None = None) -> str:
        """CSS for the rendered article; ``theme_color`` overrides the accent."""
        accent = theme_color or ColorPalette.ACCENT_PRIMARY.get(theme)
        return f"""
:root {{ --primary-color: {accent}; }}
body {{
    background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
    color: {ColorPalette.TEXT_PRIMARY.get(theme)};
}}
.markpreview {{ line-height: 1.6; }}
.markpreview h1, .markpreview h2, .markpreview h3 {{ color: {accent}; }}
.markpreview a {{ color: {ColorPalette.LINK.get(theme)}; }}
.markpreview code, .markpreview pre {{
    background-color: {ColorPalette.CODE_BACKGROUND.get(theme)};
    font-family: 'Consolas', 'Menlo', monospace;
}}
.markpreview blockquote {{
    color: {ColorPalette.TEXT_SECONDARY.get(theme)};
    border-left: 4px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
    padding-left: 12px;
}}
.markpreview table {{ border-collapse: collapse; }}
.markpreview th, .markpreview td {{
    border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
    padding: 4px 8px;
}}
.markpreview .heading-number {{ color: {accent}; margin-right: 6px; }}
.markpreview figcaption {{ color: {ColorPalette.TEXT_SECONDARY.get(theme)}; font-size: 90%; }}
.markpreview-error {{
    color: {ColorPalette.ERROR.get(theme)};
    background-color: {ColorPalette.ERROR_BACKGROUND.get(theme)};
    border: 1px solid {ColorPalette.ERROR.get(theme)};
    padding: 8px;
}}
.markpreview-fallback {{ white-space: pre-wrap; }}
"""
