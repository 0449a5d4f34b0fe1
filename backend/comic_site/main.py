"""Comic Site API — FastAPI application entry point.

Invariants:
    - Routers registered explicitly: health, comics, pages
    - Logging and the database engine are set up in the lifespan, and the
      engine is disposed on shutdown
    - Uploaded page images are served read-only under settings.upload_url_prefix
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from comic_site.api.error_handlers import register_error_handlers
from comic_site.api.routes import comics, health, pages
from comic_site.config import Settings, get_settings
from comic_site.infrastructure import database
from comic_site.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Comic Site API started")
    try:
        yield
    finally:
        await manager.dispose()
        logger.info("Comic Site API stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Comic Site API", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    app.include_router(health.router)
    app.include_router(comics.router)
    app.include_router(pages.router)
    register_error_handlers(app)

    app.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )
    return app


app = create_app()
