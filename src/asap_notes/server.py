"""Command line entry point running the notes server."""

from __future__ import annotations

import logging
import threading
import webbrowser

import uvicorn

from .app import create_app
from .config import Settings, load_settings

logger = logging.getLogger(__name__)


def open_browser(url: str) -> None:
    try:
        if not webbrowser.open(url):
            logger.warning("Failed to open browser for %s", url)
    except webbrowser.Error as exc:
        logger.warning("Failed to open browser: %s", exc)


def run(settings: Settings) -> None:
    app = create_app(settings)
    if settings.open_browser:
        threading.Thread(target=open_browser, args=(settings.url,), daemon=True).start()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def main() -> None:
    """Run the notes server."""

    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run(settings)


if __name__ == "__main__":
    main()
