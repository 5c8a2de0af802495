"""Logging configuration helpers for the preview application."""

from __future__ import annotations

import logging
import os
from logging import Logger

from preview_app.constants.preview_constants import LOG_LEVEL_ENV_VAR


def configure_logging(level: int | str = logging.INFO) -> Logger:
    """Configure basic logging for the application and return the package logger."""
    env_level = os.environ.get(LOG_LEVEL_ENV_VAR)
    if env_level:
        level = env_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("preview_app")
