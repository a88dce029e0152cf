"""FieldAR Store API - FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map FieldARError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Storage root resolved and base folders ensured on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Root resolution failure (RootDirectoryUnavailableError) aborts startup:
      it is fatal, nothing downstream can recover from it
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fieldar.api.dependencies import get_machine_store
from fieldar.api.error_handlers import register_error_handlers
from fieldar.infrastructure.observability import setup_logging
from fieldar.config import get_settings
from fieldar.api.routes import health, machines, overlay_images

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    store = app.dependency_overrides.get(get_machine_store, get_machine_store)()
    await store.ensure_base_folders_exist()
    logger.info(f"FieldAR store API started (root: {store.paths.root_folder})")
    yield
    logger.info("FieldAR store API shutting down")


app = FastAPI(
    title="FieldAR Store API", version="1.0.0", lifespan=lifespan,
)

# CORS - configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes - explicit registration
app.include_router(health.router)
app.include_router(machines.router)
app.include_router(overlay_images.router)

register_error_handlers(app)
