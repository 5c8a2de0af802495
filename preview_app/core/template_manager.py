"""Named article templates rendered with Jinja2.

Templates receive the resolved metadata context plus ``content`` (the
rendered article markup). Output is not auto-escaped because ``content`` is
already HTML; the builtin templates escape metadata fields explicitly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, Template
from markupsafe import Markup

from preview_app.constants.preview_constants import TEMPLATE_SUFFIX
from preview_app.core.errors import ParseError, TemplateNotFoundError
from preview_app.core.markdown_renderer import MarkdownRenderer

logger = logging.getLogger(__name__)

_DEFAULT_TEMPLATE = """\
<div class="markpreview-template">
{% if title %}<h1 class="article-title">{{ title | e }}</h1>{% endif %}
{% if author or publish_date %}<p class="article-meta">\
{% if author %}<span class="article-author">{{ author | e }}</span>{% endif %}\
{% if author and publish_date %} · {% endif %}\
{% if publish_date %}<span class="article-date">{{ publish_date | e }}</span>{% endif %}</p>{% endif %}
{% if epigraph %}<blockquote class="article-epigraph">{% for line in epigraph %}<p>{{ line | e }}</p>{% endfor %}</blockquote>{% endif %}
{{ content }}
{% if tags %}<p class="article-tags">{% for tag in tags %}<span class="tag">#{{ tag | e }}</span> {% endfor %}</p>{% endif %}
</div>
"""

_CARD_TEMPLATE = """\
<div class="markpreview-template card">
{% if title %}<h1 class="article-title">{{ title | e }}</h1>{% endif %}
{{ content }}
{% if personal_info.name %}<div class="author-card">
{% if personal_info.avatar %}<img class="author-avatar" src="{{ personal_info.avatar | e }}" alt="{{ personal_info.name | e }}" />{% endif %}
<p class="author-name">{{ personal_info.name | e }}</p>
{% if personal_info.bio %}<div class="author-bio">{{ personal_info.bio | markdown }}</div>{% endif %}
{% if personal_info.website %}<p class="author-website"><a href="{{ personal_info.website | e }}">{{ personal_info.website | e }}</a></p>{% endif %}
</div>{% endif %}
</div>
"""

BUILTIN_TEMPLATES: dict[str, str] = {
    "default": _DEFAULT_TEMPLATE,
    "card": _CARD_TEMPLATE,
}


class TemplateManager:
    """Registry of template sources plus a compiled-template cache."""

    def __init__(
        self,
        markdown_renderer: MarkdownRenderer,
        template_dir: Path | None = None,
    ) -> None:
        self._markdown_renderer = markdown_renderer
        self._environment = Environment(autoescape=False)
        self._environment.filters["markdown"] = self._markdown_filter
        self._sources: dict[str, str] = dict(BUILTIN_TEMPLATES)
        self._compiled: dict[str, Template] = {}
        if template_dir is not None:
            self.load_directory(template_dir)

    def load_directory(self, template_dir: Path) -> int:
        """Load every ``*.html`` file in ``template_dir``; the file stem is the id."""
        if not template_dir.is_dir():
            logger.warning("Template directory %s does not exist", template_dir)
            return 0
        loaded = 0
        for path in sorted(template_dir.glob(f"*{TEMPLATE_SUFFIX}")):
            self._sources[path.stem] = path.read_text(encoding="utf-8")
            loaded += 1
        self._compiled.clear()
        logger.info("Loaded %d template(s) from %s", loaded, template_dir)
        return loaded

    def register(self, template_id: str, source: str) -> None:
        self._sources[template_id] = source
        self._compiled.pop(template_id, None)

    def template_names(self) -> list[str]:
        return sorted(self._sources)

    def lookup(self, template_id: str) -> str | None:
        """Return the resolved template id: exact match first, then without the suffix."""
        if template_id in self._sources:
            return template_id
        cleaned = template_id.removesuffix(TEMPLATE_SUFFIX)
        if cleaned != template_id and cleaned in self._sources:
            logger.debug("Template '%s' resolved as '%s'", template_id, cleaned)
            return cleaned
        return None

    def compile(self, source: str) -> Template:
        return self._environment.from_string(source)

    def apply(self, content: str, template_id: str, context: Mapping[str, Any]) -> str:
        """Render ``content`` through the template named ``template_id``.

        Raises:
            TemplateNotFoundError: no template matches ``template_id``.
            jinja2.TemplateError: the template source is invalid.
        """
        resolved_id = self.lookup(template_id)
        if resolved_id is None:
            raise TemplateNotFoundError(template_id)
        template = self._compiled.get(resolved_id)
        if template is None:
            template = self.compile(self._sources[resolved_id])
            self._compiled[resolved_id] = template
        # content is set last so a front-matter key cannot replace the article
        data = {**context, "content": content}
        return template.render(data)

    def _markdown_filter(self, value: Any) -> Markup | str:
        if not value or not isinstance(value, str):
            return ""
        try:
            return Markup(self._markdown_renderer.render_fragment(value))
        except ParseError:
            logger.warning("Template markdown filter failed; using raw text")
            return value
