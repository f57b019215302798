"""Article Desk API — FastAPI application entry point.

Invariants:
    - Settings loaded at import: a missing/malformed MONGODB_URI aborts before serving traffic
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to {"success": false, "error": ...}
    - Store and asset storage initialized on startup, closed on shutdown (lifespan)

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Store connects lazily on first request, not at startup: a store outage at boot
      does not keep the process from starting, the next request retries
    - Local uploads served by StaticFiles under upload_url_prefix (check_dir=False:
      the directory is created on startup or on first upload)
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from article_desk.api.error_handlers import register_error_handlers
from article_desk.api.routes import articles, health, upload
from article_desk.config import get_settings
from article_desk.infrastructure.asset_storage import (
    close_asset_storage, init_asset_storage,
)
from article_desk.infrastructure.database import close_store, init_store
from article_desk.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_store(settings)
    init_asset_storage(settings)
    if settings.upload_storage == "local":
        os.makedirs(settings.upload_dir, exist_ok=True)
    logger.info("Article Desk API started")
    yield
    await close_asset_storage()
    await close_store()
    logger.info("Article Desk API shutting down")


app = FastAPI(title="Article Desk API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(health.router)
app.include_router(articles.router)
app.include_router(upload.router)

if settings.upload_storage == "local":
    app.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=settings.upload_dir, check_dir=False),
        name="uploads",
    )
