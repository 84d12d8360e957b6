"""Guesso API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map GuessoError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Logging and the database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py (ADR: import fan-out < 10)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from guesso import __version__
from guesso.api.error_handlers import register_error_handlers
from guesso.api.routes import health, integrations, room_actions, room_lifecycle, room_state
from guesso.config import get_settings
from guesso.infrastructure.database import init_db
from guesso.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Guesso API started")
    yield
    await manager.dispose()
    logger.info("Guesso API shutting down")


app = FastAPI(title="Guesso API", version=__version__, lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration
app.include_router(health.router)
app.include_router(room_lifecycle.router)
app.include_router(room_actions.router)
app.include_router(room_state.router)
app.include_router(integrations.router)

register_error_handlers(app)
