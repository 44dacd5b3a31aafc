"""Rate limit store interfaces.

The limiter depends on this abstraction (not the concrete implementation)
so the process-local table can be swapped for a shared key-value store
(e.g., Redis) without touching the limiter or the HTTP layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass


@dataclass(frozen=True)
class RateWindowRecord:
    """One client's current counting window.

    Attributes:
        count: Accepted requests so far in this window (1..limit).
        reset_at: UNIX epoch seconds at which the window expires.
    """

    count: int
    reset_at: float

    def is_expired(self, now: float) -> bool:
        """A window is over once ``now`` reaches its reset time."""
        return self.reset_at <= now


class AbstractRateLimitStore(ABC):
    """Mapping of client key to its current window.

    Implementations must make ``lock(key)`` cover every read-modify-write a
    caller performs for that key, and ``sweep`` must honour the same lock so
    it never evicts an entry that is being updated.
    """

    @abstractmethod
    def get(self, key: str) -> RateWindowRecord | None:
        """Return the stored window for ``key`` or None."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, record: RateWindowRecord) -> None:
        """Replace the stored window for ``key``."""
        raise NotImplementedError

    @abstractmethod
    def sweep(self, now: float) -> int:
        """Remove every window whose ``reset_at`` is before ``now``.

        Returns:
            Number of evicted entries (informational only).
        """
        raise NotImplementedError

    @abstractmethod
    def lock(self, key: str) -> AbstractContextManager[object]:
        """Return a context manager serializing access to ``key``."""
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError
