import pytest

from preview_app.core.models import StageSpec
from preview_app.core.services.stage_registry import configure_stage, default_stage_list, set_stage_enabled
from preview_app.core.stages import (
    code_highlight,
    external_links,
    format_heading_number,
    heading_numbers,
    images,
    tables,
)
from preview_app.utils.html_utils import extract_code_blocks

ARTICLE = '<section class="markpreview" id="article-section">{}</section>'


@pytest.mark.parametrize(
    ("style", "index", "expected"),
    [("index", 3, "3"), ("number", 3, "03"), ("roman", 14, "XIV"), ("roman-lower", 4, "iv"),
     ("letter", 28, "AB"), ("letter-lower", 2, "b")],
)
def test_format_heading_number(style, index, expected):
    assert format_heading_number(index, style) == expected


def test_heading_numbers_prefix_each_h2():
    markup = ARTICLE.format("<h2>One</h2><p>x</p><h2>Two</h2>")
    result = heading_numbers(markup, {"style": "roman", "format": "{}."})
    assert '<h2><span class="heading-number">I.</span>One</h2>' in result
    assert '<h2><span class="heading-number">II.</span>Two</h2>' in result


def test_external_links_open_in_new_window_with_footnotes():
    markup = ARTICLE.format('<p><a href="https://example.com">ex</a> <a href="#local">here</a></p>')
    result = external_links(markup, {"footnotes": True})
    assert '<a href="https://example.com" target="_blank" rel="noopener">' in result
    assert '<a href="#local">' in result
    assert result.endswith('<li>https://example.com</li></ol></section></section>')


def test_images_lazy_load_and_caption():
    markup = ARTICLE.format('<p><img src="a.png" alt="A cat" /></p>')
    result = images(markup, {"caption": True})
    assert '<figure><img loading="lazy" src="a.png" alt="A cat" /><figcaption>A cat</figcaption></figure>' in result


def test_tables_are_wrapped():
    result = tables("<table><tr><td>1</td></tr></table>", {"wrapper_class": "scroll"})
    assert result == '<div class="scroll"><table><tr><td>1</td></tr></table></div>'


def test_stage_reducers_return_new_lists():
    stages = default_stage_list()
    toggled = set_stage_enabled(stages, "heading_numbers", True)

    assert toggled is not stages
    assert toggled[0] == StageSpec("heading_numbers", True, {"style": "index", "format": "{}"})
    assert stages[0].enabled is False
    assert [stage.id for stage in toggled] == [stage.id for stage in stages]

    configured = configure_stage(toggled, "heading_numbers", {"style": "roman"})
    assert configured[0].config == {"style": "roman", "format": "{}"}


def test_stage_reducers_reject_unknown_ids():
    with pytest.raises(KeyError):
        set_stage_enabled(default_stage_list(), "nope", True)


def test_code_highlight_colours_known_languages_only():
    markup = (
        '<pre><code class="language-python">x = &quot;a&quot; &lt; 1\n</code></pre>'
        '<pre><code class="language-no-such-lang">plain\n</code></pre>'
        "<pre><code>bare\n</code></pre>"
    )

    result = code_highlight(markup, {"style": "default"})

    assert '<pre><code class="language-python highlight">' in result
    assert "<span style=" in result
    assert '<pre><code class="language-no-such-lang">plain\n</code></pre>' in result
    assert "<pre><code>bare\n</code></pre>" in result
    assert extract_code_blocks(result) == ['x = "a" < 1', "plain", "bare"]


def test_code_highlight_is_idempotent():
    once = code_highlight('<pre><code class="language-python">pass\n</code></pre>', {})

    assert code_highlight(once, {}) == once
