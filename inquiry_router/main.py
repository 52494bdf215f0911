"""Inquiry Router — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inquiry_router.adapters.persistence.database import engine
from inquiry_router.config import settings
from inquiry_router.infrastructure.api.routes_assignments import router as assignments_router
from inquiry_router.infrastructure.api.routes_data import router as data_router
from inquiry_router.infrastructure.api.routes_health import router as health_router
from inquiry_router.infrastructure.api.routes_inquiries import router as inquiries_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(levelname)s | %(name)s | %(message)s",
    )

    app = FastAPI(
        title="Inquiry Router",
        description="Rule-based engineer suggestion and assignment for quote inquiries",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS for the quotation front end
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix="/api")
    app.include_router(inquiries_router, prefix="/api")
    app.include_router(assignments_router, prefix="/api")
    app.include_router(data_router, prefix="/api")

    return app


app = create_app()
