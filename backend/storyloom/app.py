"""
Storyloom - FastAPI layout backend
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storyloom import __version__
from storyloom.config import settings
from storyloom.logging import setup_logging, get_logger
from storyloom.routers import layout
from storyloom.services.layout import LayoutService

logger = get_logger('main')


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL)
    logger.info("Starting Storyloom layout API")

    app.state.layout_service = LayoutService(
        cache_size=settings.LAYOUT_CACHE_SIZE,
        highlight_max_depth=settings.HIGHLIGHT_MAX_DEPTH,
    )
    logger.info("Services initialized")

    yield

    app.state.layout_service.clear()
    logger.info("Shutting down application")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storyloom API",
        description="Causal graph and timeline swimlane layout for story worlds",
        version=__version__,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(layout.router, prefix="/api/layout", tags=["Layout"])

    @app.get("/health")
    async def health_check():
        service = getattr(app.state, "layout_service", None)
        return {
            "status": "healthy",
            "service": "storyloom-layout",
            "caches": service.cache_stats() if service else [],
        }

    @app.get("/")
    async def root():
        return {
            "name": "Storyloom API",
            "version": __version__,
            "docs": "/docs",
            "health": "/health"
        }

    return app
