"""Static metadata describing MarkPreviewQt."""

APP_NAME = "MarkPreviewQt"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "MarkPreviewQt is a live Markdown editor with a styled preview pane. "
    "Edits are rendered through themes, templates and optional transform stages "
    "while the preview keeps its scroll position."
)

HELP_TEXT = (
    "Type Markdown on the left; the preview updates after a short pause.\n\n"
    "A YAML front-matter block at the top of the document supplies metadata:\n\n"
    "---\n"
    "title: My article\n"
    "author: Alice\n"
    "tags: [notes, draft]\n"
    "---\n\n"
    "Values entered in Article Info override front-matter. Clearing a field there "
    "keeps it empty even if the front-matter has a value."
)
