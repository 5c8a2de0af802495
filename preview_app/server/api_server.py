"""FastAPI server that mirrors the current preview to a web browser."""

from __future__ import annotations

import logging
from threading import Thread

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from preview_app.constants.about import APP_NAME, APP_VERSION
from preview_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from preview_app.core.markdown_renderer import MarkdownRenderer
from preview_app.core.preview_engine import PreviewEngine

logger = logging.getLogger(__name__)

# Polls the JSON endpoint and swaps the article in place when a new
# generation arrives, keeping the reader's scroll position.
_MIRROR_SCRIPT = """
<script>
  let currentGeneration = __GENERATION__;
  async function refreshMirror() {
    try {
      const response = await fetch('/api/preview');
      if (!response.ok) return;
      const payload = await response.json();
      if (payload.generation === currentGeneration) return;
      currentGeneration = payload.generation;
      const offset = window.scrollY;
      document.querySelector('head style').textContent = payload.css;
      const container = document.getElementById('mirror');
      container.innerHTML = payload.markup;
      window.scrollTo(0, Math.min(offset, document.body.scrollHeight - window.innerHeight));
      if (window.MathJax && window.MathJax.typesetPromise) {
        window.MathJax.typesetPromise([container]).catch(err => console.warn('MathJax error:', err));
      }
    } catch (error) {
      console.error('Error fetching preview:', error);
    }
  }
  setInterval(refreshMirror, 1000);
</script>
"""


class PreviewPayload(BaseModel):
    """Latest rendered artifact."""

    markup: str
    css: str
    generation: int


class HealthPayload(BaseModel):
    status: str
    app: str
    version: str
    generation: int | None = None


def _get_engine_dependency(engine: PreviewEngine):
    def dependency() -> PreviewEngine:
        return engine

    return dependency


def create_api_app(engine: PreviewEngine, renderer: MarkdownRenderer | None = None) -> FastAPI:
    """Create a FastAPI application reading from the provided engine."""
    app = FastAPI(title=f"{APP_NAME} mirror", version=APP_VERSION)
    engine_dep = _get_engine_dependency(engine)
    page_renderer = renderer or MarkdownRenderer()

    @app.get("/", response_class=HTMLResponse)
    def serve_mirror_page(preview_engine: PreviewEngine = Depends(engine_dep)) -> str:
        artifact = preview_engine.snapshot()
        markup = artifact.markup if artifact is not None else ""
        css = artifact.css if artifact is not None else preview_engine.get_stylesheet()
        generation = artifact.generation if artifact is not None else -1
        body = (
            f'<main id="mirror">{markup}</main>\n'
            + _MIRROR_SCRIPT.replace("__GENERATION__", str(generation))
        )
        return page_renderer.wrap_with_mathjax(body, css=css, title=APP_NAME)

    @app.get("/api/preview", response_model=PreviewPayload)
    def get_preview(preview_engine: PreviewEngine = Depends(engine_dep)) -> PreviewPayload:
        artifact = preview_engine.snapshot()
        if artifact is None:
            raise HTTPException(status_code=404, detail="Nothing has been rendered yet.")
        return PreviewPayload(markup=artifact.markup, css=artifact.css, generation=artifact.generation)

    @app.get("/api/health", response_model=HealthPayload)
    def get_health(preview_engine: PreviewEngine = Depends(engine_dep)) -> HealthPayload:
        artifact = preview_engine.snapshot()
        return HealthPayload(
            status="ok",
            app=APP_NAME,
            version=APP_VERSION,
            generation=artifact.generation if artifact is not None else None,
        )

    return app


def start_api_server(
    engine: PreviewEngine,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(engine)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="PreviewMirrorServer", daemon=True)
    thread.start()
    logger.info("Browser mirror listening on http://%s:%d/", host, port)
    return thread
