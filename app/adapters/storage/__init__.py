"""Sighting persistence adapters."""

from app.adapters.storage.base import AbstractSightingRepository
from app.adapters.storage.in_memory import InMemorySightingRepository

__all__ = [
    "AbstractSightingRepository",
    "InMemorySightingRepository",
]
