"""Facade that keeps the preview surface in sync with the edited document.

Control flow::

    edit → DebounceController → metadata resolver + TransformPipeline
         (body cached in RenderCache) → MountController (bridge mount/update)
                                      → PatchChannel (content-only patch)

Architecture note:
    Every collaborator is passed in, so the engine owns no globals and the
    tests drive it with fake timers, a fake bridge and a fake patch target.
    The rendered artifact is also published behind a lock for the browser
    mirror, which reads it from the API server thread.
"""

from __future__ import annotations

import functools
import logging
import time
from dataclasses import replace
from datetime import date
from threading import Lock
from typing import Any, Callable, Mapping

from PySide6.QtCore import QTimer

from preview_app.constants.preview_constants import DEBOUNCE_DELAY_MS, MIN_UPDATE_INTERVAL_MS
from preview_app.core.errors import StageError
from preview_app.core.frontmatter import parse_frontmatter, strip_frontmatter
from preview_app.core.metadata_resolver import build_template_context
from preview_app.core.models import MountState, PreviewProps, RenderArtifact, RenderSettings
from preview_app.core.services import stage_registry
from preview_app.core.services.debounce_controller import DebounceController
from preview_app.core.services.document_source import DocumentSource
from preview_app.core.services.mount_controller import MountController, PreviewBridge
from preview_app.core.services.patch_channel import PatchChannel, PatchTarget
from preview_app.core.services.render_cache import CacheStats, RenderCache
from preview_app.core.transform_pipeline import TransformPipeline, fallback_markup
from preview_app.styling import Styles, theme_from_id

logger = logging.getLogger(__name__)

StylesheetProvider = Callable[[RenderSettings], str]


def default_stylesheet(settings: RenderSettings) -> str:
    return Styles.get_article_stylesheet(theme_from_id(settings.theme_id), settings.theme_color)


def _logged(default: Any = None):
    """Log and swallow failures of a public engine entry point."""

    def decorator(method):
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except Exception:
                logger.exception("Preview engine call %s failed", method.__name__)
                return default

        return wrapper

    return decorator


def _same_view(a: PreviewProps, b: PreviewProps) -> bool:
    return (
        a.markup == b.markup
        and a.css == b.css
        and a.metadata == b.metadata
        and a.document_path == b.document_path
    )


class PreviewEngine:
    """Renders the current document and routes it to the preview surface."""

    def __init__(
        self,
        *,
        document_source: DocumentSource,
        settings: RenderSettings,
        pipeline: TransformPipeline,
        bridge: PreviewBridge,
        container: Any,
        patch_channel: PatchChannel | None = None,
        cache: RenderCache | None = None,
        stylesheet_provider: StylesheetProvider = default_stylesheet,
        timer_factory: Callable[[], QTimer] = QTimer,
        clock: Callable[[], float] = time.monotonic,
        today: Callable[[], date] = date.today,
        debounce_ms: int = DEBOUNCE_DELAY_MS,
        min_update_interval_ms: int = MIN_UPDATE_INTERVAL_MS,
        isolation: bool = False,
    ) -> None:
        self._documents = document_source
        self._settings = settings
        self._pipeline = pipeline
        self._patch_channel = patch_channel or PatchChannel()
        self._cache = cache or RenderCache()
        self._stylesheet_provider = stylesheet_provider
        self._today = today

        self._debounce = DebounceController(self._process, debounce_ms, timer_factory)
        self._mount = MountController(
            bridge,
            container,
            isolation=isolation,
            min_interval_ms=min_update_interval_ms,
            clock=clock,
            on_settled=self._on_settled,
        )
        # Re-dispatch after a dropped bridge request.
        self._retry_timer = timer_factory()
        self._retry_timer.setSingleShot(True)
        self._retry_timer.setInterval(min_update_interval_ms)
        self._retry_timer.timeout.connect(self._retry_dispatch)

        self._path: str | None = None
        self._text = ""
        self._override: dict[str, Any] = {}
        self._generation = 0
        self._stale = True
        self._latest: PreviewProps | None = None
        self._shown: PreviewProps | None = None

        self._lock = Lock()
        self._artifact: RenderArtifact | None = None

        self._unsubscribe_documents = self._documents.on_change(self._on_source_changed)

    # --- Read-only state ---

    @property
    def settings(self) -> RenderSettings:
        return self._settings

    @property
    def metadata_override(self) -> dict[str, Any]:
        return dict(self._override)

    @property
    def document_path(self) -> str | None:
        return self._path

    @property
    def mount_state(self) -> MountState:
        return self._mount.state

    @property
    def patch_channel(self) -> PatchChannel:
        return self._patch_channel

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def snapshot(self) -> RenderArtifact | None:
        """Latest artifact; safe to call from any thread."""
        with self._lock:
            return self._artifact

    # --- Public entry points ---

    @_logged(default="")
    def ensure_rendered(self) -> str:
        """Bring the surface up to date and return the current markup."""
        self._debounce.flush()
        if self._stale or self._latest is None:
            self._refresh()
        elif self._shown is None or not _same_view(self._shown, self._latest):
            self._present(self._latest)
        return self._latest.markup if self._latest is not None else ""

    @_logged()
    def on_document_changed(self, text: str) -> None:
        self._debounce.on_document_changed(text)

    @_logged()
    def open_document(self, path: str) -> None:
        """Switch to ``path`` and render it without waiting for the debounce window."""
        self._debounce.teardown()
        self._path = path
        self._text = self._documents.read(path)
        self._debounce.reset()
        logger.info("Previewing %s", path)
        self._refresh()

    @_logged()
    def register_patch_target(self, target: PatchTarget) -> None:
        self._patch_channel.register_target(target)

    @_logged()
    def clear_patch_target(self) -> None:
        self._patch_channel.clear_target()

    @_logged(default="")
    def get_stylesheet(self) -> str:
        return self._stylesheet_provider(self._settings)

    @_logged()
    def update_settings(self, settings: RenderSettings) -> None:
        """Install a new settings snapshot; the render cache is cleared."""
        previous = self._settings
        if settings == previous:
            return
        self._settings = settings
        self._cache.clear()
        self._stale = True
        logger.info("Render settings changed")

        theme_only = (
            previous.with_changes(theme_id=settings.theme_id, theme_color=settings.theme_color)
            == settings
        )
        if theme_only and self._mount.is_mounted() and self._shown is not None:
            css = self.get_stylesheet()
            if self._patch_channel.patch_style(css):
                self._shown = replace(self._shown, css=css)
        self._refresh()

    @_logged()
    def set_metadata_override(self, override: Mapping[str, Any]) -> None:
        self._override = dict(override)
        self._stale = True
        self._refresh()

    @_logged()
    def set_stage_enabled(self, stage_id: str, enabled: bool) -> None:
        stages = stage_registry.set_stage_enabled(self._settings.stages, stage_id, enabled)
        self.update_settings(self._settings.with_changes(stages=stages))

    @_logged()
    def configure_stage(self, stage_id: str, config: Mapping[str, Any]) -> None:
        stages = stage_registry.configure_stage(self._settings.stages, stage_id, config)
        self.update_settings(self._settings.with_changes(stages=stages))

    @_logged()
    def teardown(self) -> None:
        self._debounce.teardown()
        self._retry_timer.stop()
        self._mount.unmount()
        self._patch_channel.clear_target()
        self._shown = None
        self._unsubscribe_documents()
        logger.info("Preview engine torn down")

    # --- Rendering ---

    def _on_source_changed(self, path: str, text: str) -> None:
        if path == self._path:
            self.on_document_changed(text)

    def _refresh(self) -> None:
        self._process(self._text)
        self._debounce.mark_processed(self._text)

    @_logged()
    def _process(self, text: str) -> None:
        self._text = text
        props = self._render(text)
        self._stale = False
        self._present(props)

    def _render(self, text: str) -> PreviewProps:
        settings = self._settings
        started = time.perf_counter()
        context = build_template_context(
            self._override, parse_frontmatter(text), settings, self._today()
        )
        try:
            body = self._cache.get_or_compute(
                strip_frontmatter(text), lambda _key: self._pipeline.render_body(text, settings)
            )
        except StageError as exc:
            logger.error("Stage '%s' failed while rendering %s: %s", exc.stage_id, self._path, exc)
            body = fallback_markup(text, exc)
        except Exception as exc:
            logger.exception("Rendering %s failed", self._path)
            body = fallback_markup(text, exc)
        markup = self._pipeline.apply_template(body, settings, context)

        self._generation += 1
        props = PreviewProps(
            markup=markup,
            css=self.get_stylesheet(),
            metadata=context,
            document_path=self._path,
            generation=self._generation,
        )
        with self._lock:
            self._artifact = RenderArtifact(markup=markup, css=props.css, generation=props.generation)
        logger.debug(
            "Rendered generation %d in %.1f ms",
            props.generation,
            (time.perf_counter() - started) * 1000,
        )
        self._latest = props
        return props

    def _present(self, props: PreviewProps) -> None:
        shown = self._shown
        content_only = (
            shown is not None
            and self._mount.is_mounted()
            and not self._mount.is_updating()
            and self._patch_channel.is_ready()
            and shown.css == props.css
            and shown.metadata == props.metadata
            and shown.document_path == props.document_path
        )
        if content_only:
            if shown.markup != props.markup and self._patch_channel.patch_content(props.markup):
                self._shown = replace(shown, markup=props.markup, generation=props.generation)
            return
        if not self._mount.ensure_rendered(props) and not self._mount.is_updating():
            # Throttled rather than busy; a busy surface reports back through _on_settled.
            self._retry_timer.start()

    @_logged()
    def _on_settled(self, props: PreviewProps) -> None:
        self._shown = props
        latest = self._latest
        if latest is not None and not _same_view(props, latest):
            self._present(latest)

    @_logged()
    def _retry_dispatch(self) -> None:
        latest = self._latest
        if latest is None or (self._shown is not None and _same_view(self._shown, latest)):
            return
        self._present(latest)
