"""Owns the attach/detach lifecycle of the preview surface."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Protocol

from preview_app.constants.preview_constants import MIN_UPDATE_INTERVAL_MS
from preview_app.core.errors import MountError
from preview_app.core.models import MountState, PendingUpdateGuard, PreviewProps

logger = logging.getLogger(__name__)


class MountHandle(Protocol):
    """Returned by a bridge mount; the only way to reach the mounted instance."""

    def update(self, props: PreviewProps, on_done: Callable[[], None]) -> None: ...

    def unmount(self) -> None: ...


class PreviewBridge(Protocol):
    """Adapter around the UI library that draws the mounted surface."""

    def mount(
        self,
        container: Any,
        props: PreviewProps,
        on_ready: Callable[[], None],
        *,
        isolation: bool = False,
    ) -> MountHandle: ...

    def show_diagnostic(self, container: Any, message: str) -> None: ...


class MountController:
    """Chooses between a full mount and a prop update, or drops the request.

    Transitions: UNMOUNTED → MOUNTING (bridge mount issued) → MOUNTED (mount
    ready) → UNMOUNTED (``unmount``). A request arriving while a previous one
    is in flight, or sooner than ``min_interval_ms`` after the last accepted
    one, is dropped and the caller decides whether to retry.
    """

    def __init__(
        self,
        bridge: PreviewBridge,
        container: Any,
        *,
        isolation: bool = False,
        min_interval_ms: int = MIN_UPDATE_INTERVAL_MS,
        clock: Callable[[], float] = time.monotonic,
        on_settled: Callable[[PreviewProps], None] | None = None,
    ) -> None:
        self._bridge = bridge
        self._container = container
        self._isolation = isolation
        self._min_interval = min_interval_ms / 1000.0
        self._clock = clock
        self._on_settled = on_settled

        self._state = MountState.UNMOUNTED
        self._guard = PendingUpdateGuard()
        self._handle: MountHandle | None = None
        self._generation = 0

    @property
    def state(self) -> MountState:
        return self._state

    def is_mounted(self) -> bool:
        return self._state is MountState.MOUNTED

    def is_updating(self) -> bool:
        return self._guard.is_updating

    def ensure_rendered(self, props: PreviewProps) -> bool:
        """Mount or update the surface with ``props``. Returns False when dropped."""
        if self._state is MountState.MOUNTING:
            logger.debug("Surface is still mounting; ignoring render request")
            return False

        now = self._clock()
        if self._guard.is_updating:
            logger.warning("Skipping surface update: previous update still in flight")
            return False
        last = self._guard.last_update_timestamp
        if last is not None and now - last < self._min_interval:
            logger.warning("Skipping surface update: requested too soon after the last one")
            return False

        self._guard.is_updating = True
        self._guard.last_update_timestamp = now
        self._generation += 1
        generation = self._generation

        try:
            if self._state is MountState.UNMOUNTED:
                self._mount(props, generation)
            else:
                self._update(props, generation)
        except MountError as exc:
            self._fail(exc)
        return True

    def unmount(self) -> None:
        """Release the mounted instance; late bridge completions are discarded."""
        self._generation += 1
        handle = self._handle
        self._handle = None
        if handle is not None:
            try:
                handle.unmount()
            except Exception:
                logger.exception("Unmounting the preview surface failed")
        if self._state is not MountState.UNMOUNTED:
            logger.info("Preview surface unmounted")
        self._state = MountState.UNMOUNTED
        self._guard.is_updating = False

    def _mount(self, props: PreviewProps, generation: int) -> None:
        self._state = MountState.MOUNTING
        logger.info("Mounting preview surface (generation %d)", props.generation)
        try:
            self._handle = self._bridge.mount(
                self._container,
                props,
                lambda: self._on_mount_ready(generation, props),
                isolation=self._isolation,
            )
        except Exception as exc:
            raise MountError(f"Mounting the preview surface failed: {exc}") from exc

    def _update(self, props: PreviewProps, generation: int) -> None:
        if self._handle is None:
            raise MountError("Preview surface is marked mounted but has no handle")
        try:
            self._handle.update(props, lambda: self._on_update_done(generation, props))
        except Exception as exc:
            raise MountError(f"Updating the preview surface failed: {exc}") from exc

    def _on_mount_ready(self, generation: int, props: PreviewProps) -> None:
        if generation != self._generation:
            logger.debug("Discarding stale mount completion (generation %d)", generation)
            return
        self._state = MountState.MOUNTED
        self._guard.is_updating = False
        logger.info("Preview surface mounted")
        self._notify_settled(props)

    def _on_update_done(self, generation: int, props: PreviewProps) -> None:
        if generation != self._generation:
            logger.debug("Discarding stale update completion (generation %d)", generation)
            return
        self._guard.is_updating = False
        self._notify_settled(props)

    def _fail(self, exc: MountError) -> None:
        logger.error("%s", exc)
        self._handle = None
        self._state = MountState.UNMOUNTED
        self._guard.is_updating = False
        try:
            self._bridge.show_diagnostic(self._container, str(exc))
        except Exception:
            logger.exception("Could not show the preview diagnostic panel")

    def _notify_settled(self, props: PreviewProps) -> None:
        if self._on_settled is None:
            return
        try:
            self._on_settled(props)
        except Exception:
            logger.exception("Post-update callback failed")
