"""Pydantic schemas for sighting submissions and responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SightingCreate(CamelModel):
    """Submission payload after the required-field check.

    Optional location fields fall back to ``"Unknown"`` and the image link to
    an empty string, matching what the form stores for blank inputs.
    """

    date_of_sighting: str = Field(..., description="Date the sighting happened (YYYY-MM-DD).")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees.")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees.")
    tag: str = Field(..., description="Category tag of the sighting.")
    notes: str = Field(..., description="Free-text description of what was seen.")
    time_of_day: str | None = Field(default=None, description="Rough time of day.")
    city: str = Field(default="Unknown", description="City where it happened.")
    state: str = Field(default="Unknown", description="State where it happened.")
    image_link: str = Field(default="", description="Optional link to a picture.")


class SightingRecord(SightingCreate):
    """A sighting as stored by the repository."""

    id: int = Field(..., description="Identifier assigned by the store.")
    created_at: str = Field(..., description="ISO-8601 UTC time the record was stored.")


class RateLimitSnapshot(CamelModel):
    """Quota left for the client after this submission."""

    remaining: int = Field(..., ge=0)
    reset_at: str = Field(..., description="ISO-8601 UTC time the window resets.")


class SightingCreatedResponse(CamelModel):
    success: bool = True
    data: SightingRecord
    rate_limit: RateLimitSnapshot


class SightingListResponse(CamelModel):
    data: list[SightingRecord] = Field(default_factory=list)


class SightingStats(CamelModel):
    """Summary figures shown above the sightings table."""

    total_sightings: int = 0
    most_recent_date: str = "N/A"
    most_ghostly_city: str = "N/A"
