"""GenStudio API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map GenStudioError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, generator, store and controller built once in the lifespan;
      the controller is hydrated before the first request is served

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Controller lives on app.state: explicit ownership, swapped freely in tests
    - SQLite gets create_all on startup for zero-config local runs; Postgres relies on alembic
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from genstudio.api.error_handlers import register_error_handlers
from genstudio.api.routes import health, workspace
from genstudio.config import Settings, get_settings
from genstudio.infrastructure.database import DatabaseSessionManager, init_db
from genstudio.infrastructure.observability import setup_logging
from genstudio.services.code_generation_client import AnthropicCodeGenerator
from genstudio.services.session_controller import GenerationSessionController
from genstudio.services.workspace_store import SqlWorkspaceStore

logger = logging.getLogger(__name__)


def create_controller(
    settings: Settings, db_manager: DatabaseSessionManager,
) -> GenerationSessionController:
    """Wire generator + store into a controller (not yet hydrated)."""
    return GenerationSessionController(
        generator=AnthropicCodeGenerator.from_settings(settings),
        store=SqlWorkspaceStore(db_manager, settings.workspace_slot),
        coding_floor_ms=settings.coding_floor_ms,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_url.startswith("sqlite"):
        await db_manager.create_tables()

    controller = create_controller(settings, db_manager)
    await controller.hydrate()
    app.state.controller = controller
    logger.info("GenStudio API started")
    yield
    logger.info("GenStudio API shutting down")
    await db_manager.dispose()


app = FastAPI(
    title="GenStudio API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(workspace.router)

register_error_handlers(app)
