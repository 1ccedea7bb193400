"""Trust Graph API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TrustGraphError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Services built once on startup via lifespan; abandoned builds reconciled before
      the first request is served

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Container on app.state instead of module globals: tests swap it per app instance
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from trustgraph.api.error_handlers import register_error_handlers
from trustgraph.api.routes import graph, health, reviews, seeders, trust
from trustgraph.config import get_settings
from trustgraph.infrastructure.observability import setup_logging
from trustgraph.services.container import build_container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    container = build_container(settings)
    await container.builder.reconcile_stale_builds()
    app.state.container = container
    logger.info("Trust Graph API started")
    yield
    logger.info("Trust Graph API shutting down")
    await container.close()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Trust Graph API", version="1.0.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(graph.router)
    app.include_router(trust.router)
    app.include_router(seeders.router)
    app.include_router(reviews.router)

    register_error_handlers(app)
    return app


app = create_app()
