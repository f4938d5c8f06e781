"""DAO Manager API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DaoManagerError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and DaoService initialized on startup via lifespan context manager,
      engine disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - One DaoService per process: the aggregate cache lives as long as the app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dao_manager.api.dependencies import build_dao_service, init_dao_service
from dao_manager.api.error_handlers import register_error_handlers
from dao_manager.api.routes import daos, health
from dao_manager.config import get_settings
from dao_manager.infrastructure.database import init_db
from dao_manager.infrastructure.observability import setup_logging

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
    init_dao_service(build_dao_service(settings, manager))
    logger.info("DAO Manager API started")
    yield
    logger.info("DAO Manager API shutting down")
    await manager.dispose()


app = FastAPI(
    title="DAO Manager API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(daos.router)

register_error_handlers(app)
