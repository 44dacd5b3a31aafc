"""Sighting repository interface.

The submission flow only needs ``insert``; the read side needs ``query``.
Concrete stores (in-memory, Postgres, a hosted table API) sit behind this.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from app.schemas.sighting import SightingCreate, SightingRecord


class AbstractSightingRepository(ABC):
    """Interface for sighting persistence backends."""

    @abstractmethod
    def insert(self, sighting: SightingCreate) -> SightingRecord:
        """Store a sighting and return it as stored.

        Raises:
            PersistenceAppError: If the backend fails to store the record.
        """
        raise NotImplementedError

    @abstractmethod
    def query(self, *, order_by: str = "date_of_sighting", descending: bool = True) -> list[SightingRecord]:
        """Return all stored sightings sorted by ``order_by``.

        Raises:
            PersistenceAppError: If the backend fails to read records.
        """
        raise NotImplementedError
