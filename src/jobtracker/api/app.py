from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from jobtracker.api.routes import build_records_router
from jobtracker.api.schemas import HealthResponse
from jobtracker.config import Settings, get_settings
from jobtracker.store.base import RecordStore
from jobtracker.store.factory import open_store
from jobtracker.web.routes import router as web_router

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: RecordStore | None = None) -> FastAPI:
    """Build the application.

    A store passed in is owned by the caller; otherwise one is opened at
    startup from ``settings`` and closed at shutdown.
    """
    settings = settings or get_settings()
    static_dir = Path(__file__).resolve().parents[1] / "web" / "static"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.store is None
        if owned:
            app.state.store = open_store(settings, create_schema=True)
        logger.info("%s serving %s backend", settings.app_name, app.state.store.backend)
        try:
            yield
        finally:
            if owned:
                app.state.store.close()
                app.state.store = None
                logger.info("Record store closed")

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.get("/health", response_model=HealthResponse)
    def health(request: Request) -> HealthResponse:
        return HealthResponse(status="ok", backend=request.app.state.store.backend)

    for collection in settings.api_collection_list:
        app.include_router(build_records_router(collection))

    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")
    # Registered last: the web router ends with the catch-all shell route.
    app.include_router(web_router)
    return app
