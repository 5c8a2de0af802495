"""Rendering and synchronization constants shared by the engine and UI."""

DEBOUNCE_DELAY_MS: int = 200
MIN_UPDATE_INTERVAL_MS: int = 100
RENDER_CACHE_CAPACITY: int = 100

FRONT_MATTER_DELIMITER: str = "---"
FRONT_MATTER_PATTERN: str = r"^---\r?\n(?:([\s\S]*?)\r?\n)?---(?:\r?\n|$)"

ARTICLE_CONTAINER_CLASS: str = "markpreview"
ARTICLE_CONTAINER_ID: str = "article-section"
TEMPLATE_SUFFIX: str = ".html"
DEFAULT_TEMPLATE_ID: str = "default"
DEFAULT_THEME_ID: str = "light"

SETTINGS_DIR_NAME: str = "markpreview"
SETTINGS_FILE_NAME: str = "settings.json"
LOG_LEVEL_ENV_VAR: str = "MARKPREVIEW_LOG_LEVEL"
