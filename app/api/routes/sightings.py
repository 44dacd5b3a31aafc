from fastapi import APIRouter, Depends, Request

from app.core.rate_limit import enforce_rate_limit
from app.schemas.sighting import (
    RateLimitSnapshot,
    SightingCreatedResponse,
    SightingListResponse,
    SightingStats,
)
from app.services.rate_limiter import RateLimitDecision
from app.services.sighting_service import SightingService, parse_payload
from app.utils.timestamps import to_iso8601

router = APIRouter(tags=["Sightings"])


def get_sighting_service(request: Request) -> SightingService:
    """Return the service created by the application lifespan."""
    return request.app.state.sighting_service


@router.post(
    "/sightings",
    status_code=201,
    response_model=SightingCreatedResponse,
)
async def create_sighting(
    request: Request,
    decision: RateLimitDecision = Depends(enforce_rate_limit),
    service: SightingService = Depends(get_sighting_service),
) -> SightingCreatedResponse:
    """Submit a sighting.

    The rate limit dependency runs first and charges the client's quota
    whether or not the payload turns out to be valid. Errors are rendered by
    the global exception handlers (429, 400, 500).

    Returns:
        SightingCreatedResponse: Stored record and the remaining quota.
    """
    payload = parse_payload(await request.body())
    record = service.create(payload)

    return SightingCreatedResponse(
        success=True,
        data=record,
        rate_limit=RateLimitSnapshot(
            remaining=decision.remaining,
            reset_at=to_iso8601(decision.reset_at),
        ),
    )


@router.get("/sightings", response_model=SightingListResponse)
def list_sightings(
    service: SightingService = Depends(get_sighting_service),
) -> SightingListResponse:
    """List every sighting, most recent date first."""
    return SightingListResponse(data=service.list_sightings())


@router.get("/sightings/stats", response_model=SightingStats)
def sighting_stats(
    service: SightingService = Depends(get_sighting_service),
) -> SightingStats:
    return service.stats()
