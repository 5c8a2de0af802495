"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "MarkPreviewQt"
PLACEHOLDER_EDITOR: str = "Start typing Markdown. A YAML front-matter block is optional."
UNTITLED_DOCUMENT: str = "untitled.md"

OPEN_DIALOG_TITLE: str = "Open Markdown file"
SAVE_DIALOG_TITLE: str = "Save Markdown file"
MARKDOWN_FILE_FILTER: str = "Markdown files (*.md *.markdown *.txt);;All files (*.*)"

BUTTON_OPEN: str = "Open"
BUTTON_SAVE: str = "Save"
BUTTON_SETTINGS: str = "Settings"
BUTTON_ARTICLE_INFO: str = "Article Info"
BUTTON_COPY_HTML: str = "Copy HTML"
BUTTON_COPY_CODE: str = "Copy"

DIAGNOSTIC_TITLE: str = "Preview unavailable"
DIAGNOSTIC_HINT: str = "Check the application log for details. Editing again retries the preview."
EMPTY_PREVIEW_MESSAGE: str = "Nothing to preview yet."

HELP_DIALOG_FONT_POINT_SIZE: int = 11
