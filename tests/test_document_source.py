from preview_app.core.services.document_source import DocumentSource


def test_read_prefers_buffer_over_disk(tmp_path):
    path = tmp_path / "doc.md"
    path.write_text("on disk", encoding="utf-8")
    source = DocumentSource()

    assert source.read(str(path)) == "on disk"
    source.update_text(str(path), "edited")
    assert source.read(str(path)) == "edited"
    assert path.read_text(encoding="utf-8") == "on disk"


def test_change_callbacks_and_unsubscribe():
    source = DocumentSource()
    seen = []
    unsubscribe = source.on_change(lambda path, text: seen.append((path, text)))

    source.update_text("a.md", "one")
    source.update_text("a.md", "one")
    unsubscribe()
    source.update_text("a.md", "two")

    assert seen == [("a.md", "one")]


def test_save_writes_buffer(tmp_path):
    source = DocumentSource()
    source.update_text("untitled.md", "# Draft")
    target = tmp_path / "draft.md"

    assert source.save("untitled.md", target) == target
    assert target.read_text(encoding="utf-8") == "# Draft"


def test_get_frontmatter():
    source = DocumentSource()
    source.update_text("a.md", "---\ntitle: Hi\n---\nBody")

    assert source.get_frontmatter("a.md") == {"title": "Hi"}
    assert source.get_frontmatter("/does/not/exist.md") == {}


def test_snapshot_is_a_document():
    source = DocumentSource()
    source.update_text("a.md", "text")
    snapshot = source.snapshot("a.md")

    assert (snapshot.path, snapshot.text) == ("a.md", "text")
