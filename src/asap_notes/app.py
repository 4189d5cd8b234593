"""FastAPI application exposing the notes folder to the browser UI."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from .config import Settings, load_settings
from .errors import NotesError
from .lifecycle import LifecycleSupervisor
from .settings import SettingsStore, SettingsUpdate
from .store import NoteStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AppContext:
    """State shared by every request handler."""

    config: Settings
    settings: SettingsStore
    notes: NoteStore
    supervisor: LifecycleSupervisor


def _ok() -> PlainTextResponse:
    return PlainTextResponse("OK")


def create_app(
    config: Settings | None = None,
    *,
    settings_store: SettingsStore | None = None,
    supervisor: LifecycleSupervisor | None = None,
) -> FastAPI:
    """Create the configured application.

    ``settings_store`` and ``supervisor`` default to ones derived from
    *config*. The settings file is loaded here, once.
    """

    config = config or load_settings()
    if settings_store is None:
        settings_store = SettingsStore(config.config_path)
        settings_store.load()
    if supervisor is None:
        supervisor = LifecycleSupervisor(
            timeout=config.heartbeat_timeout, check_interval=config.check_interval
        )

    context = AppContext(
        config=config,
        settings=settings_store,
        notes=NoteStore(settings_store),
        supervisor=supervisor,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Server started at %s", config.url)
        logger.info("Notes folder: %s", context.settings.notes_root)
        context.supervisor.start()
        try:
            yield
        finally:
            logger.info("Shutting down server...")
            context.supervisor.stop()

    app = FastAPI(title="ASAP Notes", lifespan=lifespan)
    app.state.context = context

    @app.exception_handler(NotesError)
    async def notes_error_handler(request: Request, exc: NotesError) -> Response:
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    app.mount(
        "/static",
        StaticFiles(directory=config.static_dir, check_dir=False),
        name="static",
    )

    @app.get("/")
    def index() -> Response:
        index_path = Path(config.static_dir) / "index.html"
        try:
            body = index_path.read_bytes()
        except OSError:
            return PlainTextResponse("Index file not found.", status_code=500)
        return Response(body, media_type="text/html; charset=utf-8")

    @app.get("/api/folders")
    def list_folders() -> dict[str, Any]:
        return context.notes.list_folders().to_dict()

    @app.get("/api/note")
    def read_note(path: str = "") -> Response:
        logger.debug("Reading note %r", path)
        data = context.notes.read_note(path)
        return Response(data, media_type="text/plain; charset=utf-8")

    @app.post("/api/note")
    async def write_note(request: Request, path: str = "") -> Response:
        logger.debug("Writing note %r", path)
        body = await request.body()
        await run_in_threadpool(context.notes.write_note, path, body)
        return _ok()

    @app.post("/api/folder")
    def create_folder(path: str = "") -> Response:
        context.notes.create_folder(path)
        return _ok()

    @app.get("/api/search")
    def search(q: str = "") -> list[str]:
        return context.notes.search(q).matches

    @app.get("/api/settings")
    def get_settings() -> JSONResponse:
        return JSONResponse(context.settings.current().model_dump())

    @app.post("/api/settings")
    async def update_settings(request: Request) -> Response:
        changes = SettingsUpdate.parse_body(await request.body())
        await run_in_threadpool(context.settings.update, changes)
        return _ok()

    @app.post("/api/heartbeat")
    def heartbeat() -> Response:
        context.supervisor.heartbeat()
        return _ok()

    @app.post("/api/shutdown")
    def shutdown() -> Response:
        context.supervisor.request_shutdown()
        return PlainTextResponse("Shutting down...")

    return app
