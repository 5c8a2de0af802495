from preview_app.styling import Styles, Theme, theme_from_id
from preview_app.utils.html_utils import code_block_label, extract_code_blocks


def test_extract_code_blocks_unescapes_source(markdown_renderer):
    markup = markdown_renderer.render_fragment("```python\nif a < b:\n    pass\n```\n\ntext\n\n    indented\n")

    assert extract_code_blocks(markup) == ["if a < b:\n    pass", "indented"]


def test_code_block_label():
    assert code_block_label("\n  first line\nsecond") == "first line"
    assert code_block_label("") == "(empty block)"
    assert code_block_label("x" * 50, max_length=10) == "xxxxxxxxx…"


def test_theme_lookup_and_accent_override():
    assert theme_from_id("dark") is Theme.DARK
    assert theme_from_id("sepia") is Theme.LIGHT
    assert "--primary-color: #123456" in Styles.get_article_stylesheet(Theme.DARK, "#123456")
