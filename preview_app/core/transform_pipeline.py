"""Text → markup transform pipeline.

``render`` is a pure function of (text, settings, metadata context):

1. strip the leading front-matter block,
2. parse the remaining Markdown,
3. wrap it in the article container (optionally dropping the first ``<h1>``),
4. run the enabled transform stages in their configured order,
5. optionally render the result through the configured template.

Steps 1-4 (``render_body``) depend only on the text and settings, so the
engine caches their output; step 5 (``apply_template``) runs on every pass
because the metadata context can change without the body changing.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Any, Mapping

from preview_app.constants.preview_constants import ARTICLE_CONTAINER_CLASS, ARTICLE_CONTAINER_ID
from preview_app.core.errors import ParseError, PreviewError, StageError, TemplateNotFoundError
from preview_app.core.frontmatter import strip_frontmatter
from preview_app.core.markdown_renderer import MarkdownRenderer
from preview_app.core.models import RenderSettings, StageSpec
from preview_app.core.services.stage_registry import StageRegistry
from preview_app.core.template_manager import TemplateManager

logger = logging.getLogger(__name__)

_LEADING_HEADING_RE = re.compile(r"<h1[^>]*>[\s\S]*?</h1>\n?")


def wrap_article(fragment: str, hide_leading_heading: bool) -> str:
    """Wrap a parsed fragment in the article container."""
    if hide_leading_heading:
        fragment = _LEADING_HEADING_RE.sub("", fragment, count=1)
    return (
        f'<section class="{ARTICLE_CONTAINER_CLASS}" id="{ARTICLE_CONTAINER_ID}">'
        f"{fragment}</section>"
    )


def fallback_markup(text: str, error: BaseException) -> str:
    """Visible error block shown instead of a failed render pass."""
    if isinstance(error, StageError):
        title = f"Rendering failed in stage “{error.stage_id}”"
    else:
        title = "Rendering failed"
    return (
        f'<section class="{ARTICLE_CONTAINER_CLASS}" id="{ARTICLE_CONTAINER_ID}">'
        '<div class="markpreview-error" role="alert">'
        f'<p class="markpreview-error-title">{html.escape(title)}</p>'
        f'<p class="markpreview-error-detail">{html.escape(str(error))}</p>'
        f"<pre>{html.escape(text)}</pre>"
        "</div></section>"
    )


class TransformPipeline:
    """Runs Markdown source through parsing, stages and templates."""

    def __init__(
        self,
        markdown_renderer: MarkdownRenderer,
        stage_registry: StageRegistry,
        template_manager: TemplateManager,
    ) -> None:
        self._markdown = markdown_renderer
        self._stages = stage_registry
        self._templates = template_manager

    def render(self, text: str, settings: RenderSettings, metadata_context: Mapping[str, Any]) -> str:
        """Full render pass. Never raises; failures yield :func:`fallback_markup`."""
        try:
            body = self.render_body(text, settings)
        except PreviewError as exc:
            logger.error("%s", exc)
            return fallback_markup(text, exc)
        except Exception as exc:
            logger.exception("Unexpected failure while rendering")
            return fallback_markup(text, exc)
        return self.apply_template(body, settings, metadata_context)

    def render_body(self, text: str, settings: RenderSettings) -> str:
        """Steps 1-4. Raises :class:`StageError` when a stage fails."""
        source = strip_frontmatter(text)
        try:
            fragment = self._markdown.render_fragment(source)
        except ParseError as exc:
            logger.warning("%s; showing raw text", exc)
            fragment = f'<pre class="markpreview-fallback">{html.escape(source)}</pre>'
        markup = wrap_article(fragment, settings.hide_leading_heading)
        return self.apply_stages(markup, settings.stages)

    def apply_stages(self, markup: str, stages: tuple[StageSpec, ...]) -> str:
        applied = 0
        for stage in stages:
            if not stage.enabled:
                continue
            apply = self._stages.get(stage.id)
            if apply is None:
                logger.warning("Skipping unknown transform stage '%s'", stage.id)
                continue
            try:
                markup = apply(markup, stage.config)
            except Exception as exc:
                raise StageError(stage.id, exc) from exc
            applied += 1
        logger.debug("Applied %d transform stage(s)", applied)
        return markup

    def apply_template(self, body: str, settings: RenderSettings, metadata_context: Mapping[str, Any]) -> str:
        """Steps 5-6. Falls back to ``body`` when the template is missing or broken."""
        if not settings.use_template:
            return body
        try:
            return self._templates.apply(body, settings.template_id, metadata_context)
        except TemplateNotFoundError as exc:
            logger.warning("%s; rendering without template", exc)
        except Exception:
            logger.exception("Template '%s' failed to render", settings.template_id)
        return body
