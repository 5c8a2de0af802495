"""Exception types raised inside the rendering engine.

None of these escape :class:`preview_app.core.preview_engine.PreviewEngine`;
they are caught at the engine boundary and turned into fallback markup or a
diagnostic panel.
"""

from __future__ import annotations


class PreviewError(Exception):
    """Base class for preview rendering failures."""


class ParseError(PreviewError):
    """Raised when the Markdown source cannot be parsed."""


class StageError(PreviewError):
    """Raised when a transform stage fails during a render pass."""

    def __init__(self, stage_id: str, cause: BaseException) -> None:
        super().__init__(f"Transform stage '{stage_id}' failed: {cause}")
        self.stage_id = stage_id
        self.cause = cause


class TemplateNotFoundError(PreviewError):
    """Raised when no template matches the configured template id."""

    def __init__(self, template_id: str) -> None:
        super().__init__(f"Template '{template_id}' not found")
        self.template_id = template_id


class MountError(PreviewError):
    """Raised when the preview surface cannot be mounted or updated."""
