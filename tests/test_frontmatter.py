from preview_app.core.frontmatter import parse_frontmatter, strip_frontmatter


def test_strips_leading_block_only():
    text = "---\ntitle: Hello\n---\n# Body\n\n---\nnot front-matter\n"
    assert strip_frontmatter(text) == "# Body\n\n---\nnot front-matter\n"


def test_handles_crlf_line_endings():
    text = "---\r\ntitle: Hello\r\n---\r\nBody"
    assert strip_frontmatter(text) == "Body"


def test_block_at_end_of_text():
    assert strip_frontmatter("---\ntitle: x\n---") == ""


def test_text_without_block_is_unchanged():
    assert strip_frontmatter("# Title\n---\n") == "# Title\n---\n"
    assert strip_frontmatter(" ---\ntitle: x\n---\n") == " ---\ntitle: x\n---\n"


def test_unterminated_block_is_unchanged():
    text = "---\ntitle: x\nno closing fence"
    assert strip_frontmatter(text) == text


def test_parse_returns_mapping():
    text = "---\ntitle: Hello\ntags: [a, b]\n---\nBody"
    assert parse_frontmatter(text) == {"title": "Hello", "tags": ["a", "b"]}


def test_parse_malformed_or_scalar_block_returns_empty():
    assert parse_frontmatter("---\ntitle: [unclosed\n---\n") == {}
    assert parse_frontmatter("---\njust a string\n---\n") == {}
    assert parse_frontmatter("no front-matter") == {}
