# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""FastAPI application entry point for StayLedger."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api import availability, bookings, health, maintenance, properties
from src.config import get_settings
from src.database import init_db
from src.middleware.error_handler import (
    ErrorHandlerMiddleware,
    register_exception_handlers,
)
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan handler for startup/shutdown events.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    # Startup
    setup_logging()
    await init_db()

    # Store settings in app state
    app.state.settings = get_settings()
    logger.info(
        "StayLedger started (hold TTL %dh, minimum stay %d nights)",
        app.state.settings.hold_ttl_hours,
        app.state.settings.min_stay_nights,
    )

    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application.
    """
    settings = get_settings()

    app = FastAPI(
        title="StayLedger",
        description="Availability and reservation engine for a holiday rental",
        version="0.1.0",
        docs_url="/docs" if settings.standalone_mode else None,
        redoc_url="/redoc" if settings.standalone_mode else None,
        lifespan=lifespan,
    )

    # Add middleware (order matters - first added is outermost)
    app.add_middleware(ErrorHandlerMiddleware)

    # The booking page is served from another origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health.router)
    app.include_router(properties.router)
    app.include_router(availability.router)
    app.include_router(bookings.router)
    app.include_router(maintenance.router)

    return app


# Application instance
app = create_app()
