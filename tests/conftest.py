"""Qt-free fakes shared by the test suite."""

from __future__ import annotations

from datetime import date
from typing import Callable

import pytest

from preview_app.core.markdown_renderer import MarkdownRenderer
from preview_app.core.models import PreviewProps
from preview_app.core.preview_engine import PreviewEngine
from preview_app.core.services.document_source import DocumentSource
from preview_app.core.services.settings_store import default_settings
from preview_app.core.services.stage_registry import StageRegistry
from preview_app.core.template_manager import TemplateManager
from preview_app.core.transform_pipeline import TransformPipeline

TODAY = date(2024, 5, 1)


class FakeSignal:
    def __init__(self) -> None:
        self._slots: list[Callable[[], None]] = []

    def connect(self, slot: Callable[[], None]) -> None:
        self._slots.append(slot)

    def emit(self) -> None:
        for slot in list(self._slots):
            slot()


class FakeTimer:
    """Single-shot timer driven by :class:`FakeScheduler` instead of an event loop."""

    def __init__(self, scheduler: FakeScheduler) -> None:
        self._scheduler = scheduler
        self._interval = 0
        self._single_shot = False
        self.deadline: int | None = None
        self.timeout = FakeSignal()

    def setSingleShot(self, single_shot: bool) -> None:  # noqa: N802
        self._single_shot = single_shot

    def setInterval(self, interval: int) -> None:  # noqa: N802
        self._interval = interval

    def start(self) -> None:
        self.deadline = self._scheduler.now_ms + self._interval

    def stop(self) -> None:
        self.deadline = None

    def isActive(self) -> bool:  # noqa: N802
        return self.deadline is not None

    def fire(self) -> None:
        self.deadline = self._scheduler.now_ms + self._interval if not self._single_shot else None
        self.timeout.emit()


class FakeScheduler:
    """Manual clock in integer milliseconds plus the timers created against it."""

    def __init__(self) -> None:
        self.now_ms = 0
        self._timers: list[FakeTimer] = []

    def create_timer(self) -> FakeTimer:
        timer = FakeTimer(self)
        self._timers.append(timer)
        return timer

    def monotonic(self) -> float:
        return self.now_ms / 1000.0

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while True:
            due = [t for t in self._timers if t.deadline is not None and t.deadline <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.deadline)
            self.now_ms = timer.deadline
            timer.fire()
        self.now_ms = target


class FakeHandle:
    def __init__(self, bridge: FakeBridge) -> None:
        self._bridge = bridge
        self.unmounted = False

    def update(self, props: PreviewProps, on_done: Callable[[], None]) -> None:
        if self._bridge.fail_update:
            raise RuntimeError("surface vanished")
        self._bridge.updates.append(props)
        self._bridge.pending.append(on_done)

    def unmount(self) -> None:
        self.unmounted = True


class FakeBridge:
    """Records mounts and updates; completions run only when a test resolves them."""

    def __init__(self) -> None:
        self.mounts: list[PreviewProps] = []
        self.updates: list[PreviewProps] = []
        self.pending: list[Callable[[], None]] = []
        self.handles: list[FakeHandle] = []
        self.diagnostics: list[str] = []
        self.isolation_flags: list[bool] = []
        self.fail_mount = False
        self.fail_update = False

    def mount(self, container, props, on_ready, *, isolation=False):
        if self.fail_mount:
            raise RuntimeError("no display available")
        self.mounts.append(props)
        self.isolation_flags.append(isolation)
        self.pending.append(on_ready)
        handle = FakeHandle(self)
        self.handles.append(handle)
        return handle

    def show_diagnostic(self, container, message: str) -> None:
        self.diagnostics.append(message)

    def complete_all(self) -> None:
        pending, self.pending = self.pending, []
        for callback in pending:
            callback()


class FakePatchTarget:
    """Scrollable node; ``next_max`` sets the scroll range after the next markup swap.

    Like ``QTextBrowser.setHtml``, replacing markup or styles scrolls back to the top.
    """

    def __init__(self, offset: int = 0, max_offset: int = 1000) -> None:
        self.offset = offset
        self.max_offset = max_offset
        self.next_max: int | None = None
        self.markup = ""
        self.css = ""
        self.markup_writes = 0

    def scroll_offset(self) -> int:
        return self.offset

    def max_scroll_offset(self) -> int:
        return self.max_offset

    def set_scroll_offset(self, offset: int) -> None:
        self.offset = offset

    def set_markup(self, markup: str) -> None:
        self.markup = markup
        self.markup_writes += 1
        if self.next_max is not None:
            self.max_offset = self.next_max
        self.offset = 0

    def set_stylesheet(self, css: str) -> None:
        self.css = css
        self.offset = 0


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def bridge() -> FakeBridge:
    return FakeBridge()


@pytest.fixture
def markdown_renderer() -> MarkdownRenderer:
    return MarkdownRenderer()


@pytest.fixture
def pipeline(markdown_renderer: MarkdownRenderer) -> TransformPipeline:
    return TransformPipeline(markdown_renderer, StageRegistry(), TemplateManager(markdown_renderer))


@pytest.fixture
def document_source() -> DocumentSource:
    return DocumentSource()


@pytest.fixture
def make_engine(scheduler, bridge, pipeline, document_source):
    """Build a :class:`PreviewEngine` wired to the fakes; keyword overrides are passed through."""

    def factory(**overrides) -> PreviewEngine:
        options = dict(
            document_source=document_source,
            settings=default_settings(),
            pipeline=pipeline,
            bridge=bridge,
            container=object(),
            timer_factory=scheduler.create_timer,
            clock=scheduler.monotonic,
            today=lambda: TODAY,
        )
        options.update(overrides)
        return PreviewEngine(**options)

    return factory
