from __future__ import annotations

"""Application factory for the FastAPI app.

Centralizes app construction (lifespan-owned state, middleware, handlers,
routers) so tests can build isolated instances with their own clock and
repository.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI

from app.adapters.rate_limit.in_memory import InMemoryRateLimitStore
from app.adapters.storage.base import AbstractSightingRepository
from app.adapters.storage.in_memory import InMemorySightingRepository
from app.api.routes import health_router, sightings_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.services.rate_limiter import FixedWindowRateLimiter
from app.services.sighting_service import SightingService
from app.services.sweeper import RateLimitSweeper

logger = logging.getLogger(__name__)


def create_app(
    *,
    clock: Callable[[], float] | None = None,
    repository: AbstractSightingRepository | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        clock: Time source for rate limiting and sweeping (defaults to time.time).
        repository: Sighting store (defaults to an in-memory repository).

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)
    if settings.app.debug:
        logging.getLogger("app").setLevel(logging.DEBUG)

    time_source = clock or time.time

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = InMemoryRateLimitStore()
        app.state.rate_limit_store = store
        app.state.rate_limiter = FixedWindowRateLimiter(
            store,
            limit=settings.app.rate_limit_max_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
            clock=time_source,
        )
        app.state.sighting_service = SightingService(
            repository or InMemorySightingRepository(clock=time_source)
        )

        sweeper = RateLimitSweeper(
            store,
            interval_seconds=settings.app.rate_limit_sweep_interval_seconds,
            clock=time_source,
        )
        app.state.rate_limit_sweeper = sweeper
        await sweeper.start()

        logger.info(
            "app.startup",
            extra={
                "app_env": settings.app_env,
                "rate_limit": settings.app.rate_limit_max_requests,
                "window_s": settings.app.rate_limit_window_seconds,
            },
        )
        try:
            yield
        finally:
            await sweeper.stop()
            logger.info("app.shutdown")

    app = FastAPI(
        title="Sightings API",
        description=(
            "Public submission form backend for sighting reports. Submissions "
            "are rate limited per client (fixed window) and returned with "
            "their quota telemetry."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(sightings_router, prefix="/api")
    app.include_router(health_router)

    return app
