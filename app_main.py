"""Application entry point for MarkPreviewQt."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication, QWidget

from preview_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from preview_app.core.markdown_renderer import MarkdownRenderer
from preview_app.core.preview_engine import PreviewEngine
from preview_app.core.services.document_source import DocumentSource
from preview_app.core.services.settings_store import SettingsStore
from preview_app.core.services.stage_registry import StageRegistry
from preview_app.core.template_manager import TemplateManager
from preview_app.core.transform_pipeline import TransformPipeline
from preview_app.server.api_server import start_api_server
from preview_app.ui import PreviewWindow, QtPreviewBridge
from preview_app.utils.logging_config import configure_logging


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Live Markdown editor with a styled preview.")
    parser.add_argument("document", nargs="?", help="Markdown file to open")
    parser.add_argument("--templates", type=Path, help="directory of extra *.html templates")
    parser.add_argument("--settings", type=Path, help="settings JSON file to use")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="browser mirror port")
    parser.add_argument("--no-mirror", action="store_true", help="do not start the browser mirror")
    return parser.parse_args(argv)


def main() -> None:
    """Initialize logging, build the engine, start the mirror and launch the Qt UI."""
    args = _parse_args(sys.argv[1:])
    logger = configure_logging()
    logger.info("Starting MarkPreviewQt…")

    app = QApplication(sys.argv[:1])

    settings_store = SettingsStore(args.settings)
    markdown_renderer = MarkdownRenderer()
    template_manager = TemplateManager(markdown_renderer, args.templates)
    pipeline = TransformPipeline(markdown_renderer, StageRegistry(), template_manager)
    document_source = DocumentSource()
    bridge = QtPreviewBridge()
    preview_container = QWidget()

    engine = PreviewEngine(
        document_source=document_source,
        settings=settings_store.load(),
        pipeline=pipeline,
        bridge=bridge,
        container=preview_container,
    )

    mirror_url = None
    if not args.no_mirror:
        start_api_server(engine=engine, host=DEFAULT_HOST, port=args.port)
        mirror_url = f"http://{DEFAULT_HOST}:{args.port}/"

    window = PreviewWindow(
        engine=engine,
        bridge=bridge,
        preview_container=preview_container,
        document_source=document_source,
        settings_store=settings_store,
        template_names=template_manager.template_names(),
        mirror_url=mirror_url,
    )
    if args.document:
        window.load_document(str(Path(args.document).resolve()))
    else:
        window.start_untitled()
    window.resize(1200, 800)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
