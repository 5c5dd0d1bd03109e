"""
FastAPI application for the marketplace lifecycle API.

Production deployment configuration via environment variables.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.repository import BOOKINGS, LISTINGS, get_marketplace_repository
from utils.config import Config
from web.admin_routes import router as admin_router
from web.listing_routes import router as listing_router
from web.shortlet_routes import router as shortlet_router
from web.viewing_routes import router as viewing_router

logger = logging.getLogger(__name__)

# =============================================================================
# Environment Configuration
# =============================================================================

IS_PRODUCTION = os.getenv("PRODUCTION", "").lower() == "true"

# CORS configuration - locked down for production
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    # Development fallback only
    ALLOWED_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

VERSION = "0.1.0"


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the repository once the app starts serving."""
        persist_path = Path(config.data_dir) / "marketplace.json"
        repo = get_marketplace_repository(str(persist_path))
        logger.info(
            "Marketplace lifecycle API started (%d listings, %d bookings)",
            repo.count(LISTINGS),
            repo.count(BOOKINGS),
        )
        yield

    app = FastAPI(
        lifespan=lifespan,
        title="Marketplace Lifecycle API",
        description="Listing, viewing and shortlet booking lifecycle rules",
        version=VERSION,
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=config.debug and not IS_PRODUCTION,
    )

    # Healthchecks first: no dependencies, no IO
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health")
    def health():
        return {
            "status": "healthy",
            "version": VERSION,
            "environment": "production" if IS_PRODUCTION else "development",
        }

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH"],
            allow_headers=["*"],
        )

    app.include_router(listing_router)
    app.include_router(admin_router)
    app.include_router(viewing_router)
    app.include_router(shortlet_router)

    return app


# Create app instance for uvicorn
app = create_app()
