"""User API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly: welcome text, health checks, the user route table
    - Global error handlers render UserApiError per the configured error mode
    - The document store is opened in the lifespan, kept on app.state.store,
      and closed on shutdown
    - Docs (Swagger UI + OpenAPI JSON) are served under settings.docs_path and
      generated from the same route table that dispatches requests
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from user_api.api.error_handlers import register_error_handlers
from user_api.api.routes import health
from user_api.api.routes.users import build_router
from user_api.config import Settings, get_settings
from user_api.infrastructure.database import init_store
from user_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

WELCOME_TEXT = "Welcome to my API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    app.state.store = await init_store(settings)
    logger.info(f"User API started, listening on port {settings.port}")
    try:
        yield
    finally:
        logger.info("User API shutting down")
        await app.state.store.close()
        app.state.store = None


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for the given settings (defaults to the environment)."""
    settings = settings or get_settings()
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        servers=[{"url": settings.public_url}],
        docs_url=settings.docs_path,
        openapi_url=f"{settings.docs_path}/openapi.json",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.error_mode = settings.error_mode
    app.state.store = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    @app.get("/", response_class=PlainTextResponse, tags=["welcome"])
    async def welcome():
        return WELCOME_TEXT

    app.include_router(health.router)
    app.include_router(build_router(prefix=settings.api_prefix))
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
