from __future__ import annotations

from app.api.routes.health import router as health_router
from app.api.routes.sightings import router as sightings_router

__all__ = ["health_router", "sightings_router"]
