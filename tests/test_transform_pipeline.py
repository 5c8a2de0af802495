import re

import pytest

from preview_app.core.errors import StageError
from preview_app.core.models import StageSpec
from preview_app.core.services.settings_store import default_settings
from preview_app.core.services.stage_registry import StageRegistry
from preview_app.core.template_manager import TemplateManager
from preview_app.core.transform_pipeline import TransformPipeline

SOURCE = "---\ntitle: A\n---\n# Hello\nWorld"


def _explode(markup, config):
    raise RuntimeError("kaboom")


@pytest.fixture
def exploding_pipeline(markdown_renderer):
    registry = StageRegistry()
    registry.register("explode", _explode)
    return TransformPipeline(markdown_renderer, registry, TemplateManager(markdown_renderer))


def test_front_matter_and_heading_scenario(pipeline):
    markup = pipeline.render(SOURCE, default_settings(), {})

    assert len(re.findall(r"<h1[\s>]", markup)) == 1
    assert re.search(r"<h1>Hello</h1>\s*<p>World</p>", markup)
    assert "title: A" not in markup
    assert markup.startswith('<section class="markpreview" id="article-section">')


def test_hide_leading_heading_removes_only_the_first_h1(pipeline):
    settings = default_settings().with_changes(hide_leading_heading=True)

    assert "<h1" not in pipeline.render(SOURCE, settings, {})
    second = pipeline.render("# One\n\n# Two\n", settings, {})
    assert "One" not in second
    assert "<h1>Two</h1>" in second


def test_render_is_idempotent(pipeline):
    settings = default_settings().with_changes(use_template=True)
    context = {"title": "T", "tags": ["x"], "epigraph": []}
    assert pipeline.render(SOURCE, settings, context) == pipeline.render(SOURCE, settings, context)


def test_disabled_stages_are_not_executed(exploding_pipeline):
    settings = default_settings().with_changes(
        stages=default_settings().stages + (StageSpec("explode", enabled=False),)
    )
    assert "markpreview-error" not in exploding_pipeline.render("# Hi", settings, {})


def test_failing_stage_yields_escaped_fallback(exploding_pipeline):
    settings = default_settings().with_changes(stages=(StageSpec("explode"),))
    markup = exploding_pipeline.render("<b>raw</b> text", settings, {})

    assert 'class="markpreview-error"' in markup
    assert "explode" in markup
    assert "&lt;b&gt;raw&lt;/b&gt; text" in markup


def test_render_body_raises_stage_error(exploding_pipeline):
    settings = default_settings().with_changes(stages=(StageSpec("explode"),))
    with pytest.raises(StageError) as info:
        exploding_pipeline.render_body("text", settings)
    assert info.value.stage_id == "explode"


def test_stages_run_in_configured_order(markdown_renderer):
    registry = StageRegistry({
        "first": lambda markup, config: markup + "[1]",
        "second": lambda markup, config: markup + "[2]",
    })
    pipeline = TransformPipeline(markdown_renderer, registry, TemplateManager(markdown_renderer))
    settings = default_settings().with_changes(stages=(StageSpec("second"), StageSpec("first")))

    assert pipeline.render_body("x", settings).endswith("[2][1]")


def test_template_wraps_body_and_content_wins(pipeline):
    settings = default_settings().with_changes(use_template=True, template_id="default.html")
    markup = pipeline.render("Body text", settings, {"title": "T<1>", "content": "IGNORED", "tags": []})

    assert '<h1 class="article-title">T&lt;1&gt;</h1>' in markup
    assert "<p>Body text</p>" in markup
    assert "IGNORED" not in markup


def test_missing_template_falls_back_to_body(pipeline):
    settings = default_settings().with_changes(use_template=True, template_id="nope")
    markup = pipeline.render("Body", settings, {})
    assert markup == '<section class="markpreview" id="article-section"><p>Body</p>\n</section>'


def test_template_runtime_error_falls_back_to_body(markdown_renderer, caplog):
    templates = TemplateManager(markdown_renderer)
    templates.register("broken", "{{ tags + 1 }}")
    pipeline = TransformPipeline(markdown_renderer, StageRegistry(), templates)
    settings = default_settings().with_changes(use_template=True, template_id="broken")

    markup = pipeline.render("Body", settings, {"tags": ["a"]})

    assert markup == '<section class="markpreview" id="article-section"><p>Body</p>\n</section>'
    assert "Template 'broken' failed to render" in caplog.text
