"""Sighting submission service.

Turns an admitted request body into a stored sighting:
- Body parsing (malformed bodies count as empty payloads)
- Required-field validation and optional-field defaults
- Delegation to the repository, with storage failures surfaced as
  ``PersistenceAppError``

Read-side helpers (listing and summary stats) live here as well so routes
never talk to the repository directly.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from typing import Any, Mapping

from pydantic import ValidationError

from app.adapters.storage.base import AbstractSightingRepository
from app.core.errors import PersistenceAppError, ValidationAppError
from app.schemas.sighting import SightingCreate, SightingRecord, SightingStats
from app.utils.text_normalizer import is_blank, normalize_text

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("dateOfSighting", "latitude", "longitude", "tag", "notes")
OPTIONAL_FIELDS = ("timeOfDay", "city", "state", "imageLink")


def parse_payload(body: bytes) -> dict[str, Any]:
    """Decode a JSON request body into a mapping.

    A body that is not JSON, or not a JSON object, yields an empty dict so it
    fails validation like a payload with no fields at all.

    Args:
        body: Raw request body.

    Returns:
        Decoded JSON object, or ``{}`` when the body is malformed.
    """
    try:
        payload = json.loads(body or b"null")
    except (ValueError, UnicodeDecodeError):
        logger.warning("sighting.malformed_body", extra={"body_bytes": len(body)})
        return {}

    if not isinstance(payload, dict):
        logger.warning(
            "sighting.malformed_body",
            extra={"body_bytes": len(body), "json_type": type(payload).__name__},
        )
        return {}
    return payload


def _clean(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def build_sighting(payload: Mapping[str, Any]) -> SightingCreate:
    """Validate a submission payload and apply defaults.

    Args:
        payload: Decoded request body using camelCase keys.

    Returns:
        SightingCreate ready to be stored.

    Raises:
        ValidationAppError: If required fields are missing or values are invalid.
    """
    missing = [name for name in REQUIRED_FIELDS if is_blank(payload.get(name))]
    if missing:
        raise ValidationAppError(
            code="missing_required_fields",
            message="Missing required fields",
            details={"fields": missing},
        )

    data = {name: _clean(payload[name]) for name in REQUIRED_FIELDS}
    if isinstance(data["notes"], str):
        data["notes"] = normalize_text(data["notes"])

    # Blank optional fields fall back to the model defaults
    for name in OPTIONAL_FIELDS:
        if not is_blank(payload.get(name)):
            data[name] = _clean(payload[name])

    try:
        return SightingCreate.model_validate(data)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise ValidationAppError(
            code="invalid_field_values",
            message="Invalid field values",
            details={"fields": fields},
        ) from exc


def calculate_stats(sightings: list[SightingRecord]) -> SightingStats:
    """Summarize sightings ordered newest first.

    The most ghostly city is the ``"city, state"`` pair with the most
    sightings; ties go to the pair seen first.
    """
    if not sightings:
        return SightingStats()

    city_counts = Counter(f"{s.city}, {s.state}" for s in sightings)
    most_ghostly_city, _ = city_counts.most_common(1)[0]

    return SightingStats(
        total_sightings=len(sightings),
        most_recent_date=sightings[0].date_of_sighting or "N/A",
        most_ghostly_city=most_ghostly_city,
    )


class SightingService:
    """Validates and stores sightings through a repository.

    Attributes:
        repository: Persistence backend for sightings.
    """

    def __init__(self, repository: AbstractSightingRepository) -> None:
        self.repository = repository

    def create(self, payload: Mapping[str, Any]) -> SightingRecord:
        """Validate ``payload`` and store it.

        Args:
            payload: Decoded request body.

        Returns:
            The stored SightingRecord.

        Raises:
            ValidationAppError: If the payload is incomplete or invalid.
            PersistenceAppError: If the repository fails. Not retried.
        """
        try:
            sighting = build_sighting(payload)
        except ValidationAppError as exc:
            logger.info(
                "sighting.validation_failed",
                extra={"error_code": exc.code, "fields": (exc.details or {}).get("fields", [])},
            )
            raise

        try:
            record = self.repository.insert(sighting)
        except PersistenceAppError as exc:
            logger.error(
                "sighting.persistence_failed",
                extra={"error_code": exc.code, "error_type": type(exc).__name__},
            )
            raise
        except Exception as exc:
            logger.exception(
                "sighting.persistence_failed",
                extra={"error_code": "storage_error", "error_type": type(exc).__name__},
            )
            raise PersistenceAppError(
                code="storage_error",
                message="Failed to save sighting",
            ) from exc

        logger.info(
            "sighting.created",
            extra={"sighting_id": record.id, "tag": record.tag},
        )
        return record

    def list_sightings(self) -> list[SightingRecord]:
        """Return all sightings, newest ``dateOfSighting`` first."""
        try:
            return self.repository.query(order_by="date_of_sighting", descending=True)
        except PersistenceAppError:
            raise
        except Exception as exc:
            logger.exception("sighting.query_failed", extra={"error_type": type(exc).__name__})
            raise PersistenceAppError(
                code="storage_error",
                message="Failed to load sightings",
            ) from exc

    def stats(self) -> SightingStats:
        return calculate_stats(self.list_sightings())
