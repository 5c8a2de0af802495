"""Domain models for the preview engine."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any

from preview_app.constants.preview_constants import DEFAULT_TEMPLATE_ID, DEFAULT_THEME_ID


class MountState(Enum):
    """Lifecycle of the preview surface attachment."""

    UNMOUNTED = auto()
    MOUNTING = auto()
    MOUNTED = auto()


@dataclass(frozen=True, slots=True)
class Document:
    """Read-only snapshot of the document being edited."""

    path: str
    text: str


@dataclass(frozen=True, slots=True)
class StageSpec:
    """One entry of the ordered transform stage list."""

    id: str
    enabled: bool = True
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PersonalInfo:
    """Author profile exposed to templates as ``personal_info``."""

    name: str = ""
    bio: str = ""
    email: str = ""
    website: str = ""
    avatar: str = ""  # data URL or remote URL

    def as_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "avatar": self.avatar,
            "bio": self.bio,
            "email": self.email,
            "website": self.website,
        }


@dataclass(frozen=True, slots=True)
class RenderSettings:
    """Immutable settings snapshot passed into every render.

    Changing a value means building a new snapshot with :meth:`with_changes`;
    the engine clears its render cache whenever it receives a new one.
    """

    theme_id: str = DEFAULT_THEME_ID
    template_id: str = DEFAULT_TEMPLATE_ID
    use_template: bool = False
    hide_leading_heading: bool = False
    theme_color: str | None = None
    enable_default_author_profile: bool = False
    default_author_name: str = ""
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    stages: tuple[StageSpec, ...] = ()

    def with_changes(self, **changes: Any) -> RenderSettings:
        return replace(self, **changes)


@dataclass(slots=True)
class PendingUpdateGuard:
    """Reentrancy guard for surface updates. Not a queue."""

    is_updating: bool = False
    last_update_timestamp: float | None = None


@dataclass(frozen=True, slots=True)
class PreviewProps:
    """Everything the mounted surface needs to draw one render generation."""

    markup: str
    css: str
    metadata: dict[str, Any]
    document_path: str | None
    generation: int


@dataclass(frozen=True, slots=True)
class RenderArtifact:
    """Latest rendered markup with the stylesheet it was rendered against."""

    markup: str
    css: str
    generation: int
