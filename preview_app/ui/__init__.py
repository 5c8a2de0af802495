"""Qt UI components for the preview application."""

from .article_info_dialog import ArticleInfoDialog
from .dialog_helpers import confirm_discard_changes, show_error, show_info
from .preview_bridge import QtPreviewBridge, SurfaceMountHandle
from .preview_surface import PreviewSurface, TextBrowserPatchTarget
from .preview_window import PreviewWindow
from .settings_dialog import SettingsDialog

__all__ = [
    "ArticleInfoDialog",
    "PreviewSurface",
    "PreviewWindow",
    "QtPreviewBridge",
    "SettingsDialog",
    "SurfaceMountHandle",
    "TextBrowserPatchTarget",
    "confirm_discard_changes",
    "show_error",
    "show_info",
]
