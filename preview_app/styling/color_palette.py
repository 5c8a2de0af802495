"""Light and dark colour palettes for the editor window and the article."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Theme(Enum):
    """Preview theme options; the value is the persisted theme id."""
    LIGHT = "light"
    DARK = "dark"


def theme_from_id(theme_id: str) -> Theme:
    """Map a settings theme id to a :class:`Theme`, defaulting to light."""
    try:
        return Theme(theme_id)
    except ValueError:
        return Theme.LIGHT


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions."""

    TEXT_PRIMARY = ThemeColors(
        light="#1F2328",      # Near black
        dark="#E6EDF3"        # Off white
    )

    TEXT_SECONDARY = ThemeColors(
        light="#59636E",
        dark="#9198A1"
    )

    BACKGROUND_PRIMARY = ThemeColors(
        light="#FFFFFF",
        dark="#0D1117"
    )

    BACKGROUND_SECONDARY = ThemeColors(
        light="#F6F8FA",
        dark="#161B22"
    )

    CODE_BACKGROUND = ThemeColors(
        light="#EFF1F3",
        dark="#1F242C"
    )

    ACCENT_PRIMARY = ThemeColors(
        light="#0969DA",      # Blue
        dark="#4493F8"        # Lighter Blue
    )

    LINK = ThemeColors(
        light="#0969DA",
        dark="#4493F8"
    )

    ERROR = ThemeColors(
        light="#D1242F",      # Red
        dark="#F85149"        # Light Red
    )

    ERROR_BACKGROUND = ThemeColors(
        light="#FFEBE9",
        dark="#3C1618"
    )

    BORDER_PRIMARY = ThemeColors(
        light="#D1D9E0",
        dark="#3D444D"
    )

    BUTTON_SECONDARY_BG = ThemeColors(
        light="#F6F8FA",
        dark="#212830"
    )

    BUTTON_HOVER_BG = ThemeColors(
        light="#EAEEF2",
        dark="#2A313C"
    )
