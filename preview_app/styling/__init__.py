"""Styling module for MarkPreviewQt."""

from .color_palette import ColorPalette, Theme, theme_from_id
from .styles import Styles

__all__ = ["ColorPalette", "Styles", "Theme", "theme_from_id"]
