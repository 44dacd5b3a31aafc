"""In-memory rate limit store.

Notes:
- Per-process only: running multiple workers multiplies the effective limit
  (each worker enforces the quota on its own).
- Thread-safe: a single re-entrant lock guards the whole table.
"""

from __future__ import annotations

import threading
from contextlib import AbstractContextManager

from app.adapters.rate_limit.base import AbstractRateLimitStore, RateWindowRecord


class InMemoryRateLimitStore(AbstractRateLimitStore):
    """Process-local table of client windows guarded by one coarse lock.

    Contention is expected to be tiny (a handful of submissions per hour per
    client), so every key shares the same ``threading.RLock``. The lock is
    re-entrant so a caller holding ``lock(key)`` can still use ``get``/``set``.

    Important:
        If the API runs with multiple workers (e.g., several Uvicorn/Gunicorn
        processes), each worker keeps its own table and the effective global
        limit becomes ``limit * workers``. Swap this class for a shared store
        implementing ``AbstractRateLimitStore`` to enforce a global quota.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, RateWindowRecord] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"InMemoryRateLimitStore(size={len(self)})"

    def lock(self, key: str) -> AbstractContextManager[object]:
        return self._lock

    def get(self, key: str) -> RateWindowRecord | None:
        with self._lock:
            return self._records.get(key)

    def set(self, key: str, record: RateWindowRecord) -> None:
        with self._lock:
            self._records[key] = record

    def sweep(self, now: float) -> int:
        with self._lock:
            expired_keys = [k for k, record in self._records.items() if record.reset_at < now]
            for key in expired_keys:
                del self._records[key]
            return len(expired_keys)
