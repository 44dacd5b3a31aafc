"""In-memory sighting repository.

Records live for the lifetime of the process. Suitable for development,
tests and single-instance demos.
"""

from __future__ import annotations

import itertools
import threading
import time
from typing import Callable

from app.adapters.storage.base import AbstractSightingRepository
from app.core.errors import PersistenceAppError
from app.schemas.sighting import SightingCreate, SightingRecord
from app.utils.timestamps import to_iso8601


class InMemorySightingRepository(AbstractSightingRepository):
    """Thread-safe list of sightings with incrementing ids."""

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._records: list[SightingRecord] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def insert(self, sighting: SightingCreate) -> SightingRecord:
        with self._lock:
            record = SightingRecord(
                **sighting.model_dump(),
                id=next(self._ids),
                created_at=to_iso8601(self._clock()),
            )
            self._records.append(record)
            return record

    def query(self, *, order_by: str = "date_of_sighting", descending: bool = True) -> list[SightingRecord]:
        if order_by not in SightingRecord.model_fields:
            raise PersistenceAppError(
                code="invalid_order_by",
                message=f"Cannot order sightings by '{order_by}'",
            )

        with self._lock:
            records = list(self._records)

        # None sorts last regardless of direction
        present = [r for r in records if getattr(r, order_by) is not None]
        missing = [r for r in records if getattr(r, order_by) is None]
        present.sort(key=lambda r: getattr(r, order_by), reverse=descending)
        return present + missing
