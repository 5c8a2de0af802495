"""Transform stage registry and reducer-style updates of the stage list."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from preview_app.core.models import StageSpec
from preview_app.core.stages import BUILTIN_STAGES

StageFunction = Callable[[str, Mapping[str, Any]], str]


class StageRegistry:
    """Maps stage ids to their pure ``apply(markup, config)`` functions."""

    def __init__(self, functions: Mapping[str, StageFunction] | None = None) -> None:
        self._functions: dict[str, StageFunction] = dict(
            BUILTIN_STAGES if functions is None else functions
        )

    def register(self, stage_id: str, function: StageFunction) -> None:
        self._functions[stage_id] = function

    def get(self, stage_id: str) -> StageFunction | None:
        return self._functions.get(stage_id)

    def stage_ids(self) -> list[str]:
        return list(self._functions)


def default_stage_list() -> tuple[StageSpec, ...]:
    """Builtin stages in their default order."""
    return (
        StageSpec(id="heading_numbers", enabled=False, config={"style": "index", "format": "{}"}),
        StageSpec(id="external_links", enabled=True, config={"footnotes": False}),
        StageSpec(id="images", enabled=True, config={"caption": True}),
        StageSpec(id="code_highlight", enabled=True, config={"style": "default"}),
        StageSpec(id="tables", enabled=True, config={}),
    )


def _index_of(stages: tuple[StageSpec, ...], stage_id: str) -> int:
    for index, stage in enumerate(stages):
        if stage.id == stage_id:
            return index
    raise KeyError(f"Unknown transform stage: {stage_id}")


def set_stage_enabled(
    stages: tuple[StageSpec, ...], stage_id: str, enabled: bool
) -> tuple[StageSpec, ...]:
    """Return a new stage list with ``stage_id`` toggled. Order is preserved."""
    index = _index_of(stages, stage_id)
    current = stages[index]
    if current.enabled == enabled:
        return stages
    updated = StageSpec(id=current.id, enabled=enabled, config=dict(current.config))
    return stages[:index] + (updated,) + stages[index + 1 :]


def configure_stage(
    stages: tuple[StageSpec, ...], stage_id: str, config: Mapping[str, Any]
) -> tuple[StageSpec, ...]:
    """Return a new stage list with ``config`` merged into the stage's config."""
    index = _index_of(stages, stage_id)
    current = stages[index]
    updated = StageSpec(id=current.id, enabled=current.enabled, config={**current.config, **config})
    return stages[:index] + (updated,) + stages[index + 1 :]
