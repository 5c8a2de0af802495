"""JSON persistence for render settings.

Architecture note:
    Settings are stored as one flat JSON object plus a ``stages`` list. The
    store never hands out mutable state: ``load`` always returns a fresh
    :class:`RenderSettings` snapshot and ``save`` only reads one.
"""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any

from preview_app.constants.preview_constants import SETTINGS_DIR_NAME, SETTINGS_FILE_NAME
from preview_app.core.models import PersonalInfo, RenderSettings, StageSpec
from preview_app.core.services.stage_registry import default_stage_list

logger = logging.getLogger(__name__)

_SCALAR_KEYS = (
    "theme_id",
    "template_id",
    "use_template",
    "hide_leading_heading",
    "theme_color",
    "enable_default_author_profile",
    "default_author_name",
)


def default_settings_path() -> Path:
    return Path.home() / ".config" / SETTINGS_DIR_NAME / SETTINGS_FILE_NAME


def default_settings() -> RenderSettings:
    return RenderSettings(stages=default_stage_list())


def settings_to_dict(settings: RenderSettings) -> dict[str, Any]:
    data: dict[str, Any] = {key: getattr(settings, key) for key in _SCALAR_KEYS}
    data["personal_info"] = settings.personal_info.as_dict()
    data["stages"] = [
        {"id": stage.id, "enabled": stage.enabled, "config": dict(stage.config)}
        for stage in settings.stages
    ]
    return data


def _stages_from_list(raw: Any) -> tuple[StageSpec, ...]:
    if not isinstance(raw, list):
        return default_stage_list()
    stages: list[StageSpec] = []
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("id"), str):
            logger.warning("Ignoring malformed stage entry: %r", entry)
            continue
        config = entry.get("config")
        stages.append(
            StageSpec(
                id=entry["id"],
                enabled=bool(entry.get("enabled", True)),
                config=dict(config) if isinstance(config, dict) else {},
            )
        )
    return tuple(stages)


def settings_from_dict(data: dict[str, Any]) -> RenderSettings:
    """Build a snapshot from ``data``; unknown keys are ignored."""
    defaults = default_settings()
    changes: dict[str, Any] = {}
    for key in _SCALAR_KEYS:
        if key in data:
            changes[key] = data[key]

    info = data.get("personal_info")
    if isinstance(info, dict):
        known = {f.name for f in fields(PersonalInfo)}
        changes["personal_info"] = PersonalInfo(
            **{k: str(v) for k, v in info.items() if k in known and v is not None}
        )
    if "stages" in data:
        changes["stages"] = _stages_from_list(data["stages"])
    return defaults.with_changes(**changes)


class SettingsStore:
    """Loads and saves :class:`RenderSettings` snapshots as JSON."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_settings_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> RenderSettings:
        if not self._path.exists():
            return default_settings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Cannot read settings from %s (%s); using defaults", self._path, exc)
            return default_settings()
        if not isinstance(data, dict):
            logger.warning("Settings file %s is not a JSON object; using defaults", self._path)
            return default_settings()
        return settings_from_dict(data)

    def save(self, settings: RenderSettings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(settings_to_dict(settings), indent=2), encoding="utf-8")
        logger.info("Settings saved to %s", self._path)
