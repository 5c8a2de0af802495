"""Merge user overrides, document front-matter and computed defaults.

Precedence rules:

* Scalar fields (``title``, ``author``, ``publish_date``): if the override map
  contains the key at all, its value wins, even when empty. That is how a
  user clears a value inherited from front-matter. Otherwise a non-empty
  front-matter value applies, then a computed default, then ``""``.
* ``tags``: the override list wins only when it is non-empty. An empty
  override list does not hide front-matter tags.
* Any other override key: a non-empty value replaces the front-matter value.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from preview_app.core.models import RenderSettings

SCALAR_FIELDS: tuple[str, ...] = ("title", "author", "publish_date")
LIST_FIELDS: tuple[str, ...] = ("tags",)

# Front-matter spellings accepted for each scalar field, first match wins.
FRONTMATTER_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("title", "articleTitle"),
    "author": ("author",),
    "publish_date": ("publish_date", "publishDate", "date"),
}


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _frontmatter_value(frontmatter: Mapping[str, Any], field_name: str) -> Any:
    for key in FRONTMATTER_ALIASES.get(field_name, (field_name,)):
        value = frontmatter.get(key)
        if not _is_blank(value):
            return value
    return None


def resolve(
    override: Mapping[str, Any],
    frontmatter: Mapping[str, Any],
    defaults: Mapping[str, Any],
) -> dict[str, Any]:
    """Build the metadata context. Pure; inputs are never mutated."""
    context: dict[str, Any] = dict(frontmatter)

    for field_name in SCALAR_FIELDS:
        if field_name in override:
            context[field_name] = _as_text(override[field_name])
            continue
        inherited = _frontmatter_value(frontmatter, field_name)
        if inherited is not None:
            context[field_name] = _as_text(inherited)
        elif not _is_blank(defaults.get(field_name)):
            context[field_name] = _as_text(defaults[field_name])
        else:
            context[field_name] = ""

    for field_name in LIST_FIELDS:
        override_value = override.get(field_name)
        if isinstance(override_value, (list, tuple)) and override_value:
            context[field_name] = list(override_value)
        else:
            context[field_name] = _as_list(frontmatter.get(field_name))

    for key, value in override.items():
        if key in SCALAR_FIELDS or key in LIST_FIELDS:
            continue
        if not _is_blank(value):
            context[key] = value

    return context


def compute_defaults(settings: RenderSettings, today: date) -> dict[str, Any]:
    """Fallback values used when neither override nor front-matter has one."""
    defaults: dict[str, Any] = {"publish_date": today.isoformat()}
    if settings.enable_default_author_profile and settings.default_author_name.strip():
        defaults["author"] = settings.default_author_name.strip()
    return defaults


def build_template_context(
    override: Mapping[str, Any],
    frontmatter: Mapping[str, Any],
    settings: RenderSettings,
    today: date,
) -> dict[str, Any]:
    """Resolve metadata and add the settings-derived keys templates expect."""
    context = resolve(override, frontmatter, compute_defaults(settings, today))

    # A hidden leading heading must not come back through the template header.
    if settings.hide_leading_heading:
        context["title"] = ""

    epigraph = context.get("epigraph")
    if epigraph is None:
        context["epigraph"] = []
    elif not isinstance(epigraph, (list, tuple)):
        context["epigraph"] = [epigraph]
    else:
        context["epigraph"] = list(epigraph)

    personal_info = settings.personal_info.as_dict()
    avatar = override.get("author_avatar")
    if isinstance(avatar, str) and avatar.strip():
        personal_info["avatar"] = avatar.strip()
    context["personal_info"] = personal_info
    return context
