"""Fixed-window submission limiter.

Each client key gets a window that starts with its first accepted request
and lasts ``window_seconds``. Up to ``limit`` requests are admitted inside the
window; later ones are denied without touching the stored window until it
expires and the next request opens a fresh one.

Being a fixed window, a burst straddling a window boundary can admit up to
``2 * limit`` requests in a short span. That trade-off is accepted.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimitStore, RateWindowRecord
from app.utils.timestamps import seconds_until


@dataclass(frozen=True)
class RateLimitDecision:
    """Result of a rate limit check.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Requests left in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window resets.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after_seconds: int | None = None


class FixedWindowRateLimiter:
    """Decision engine counting admissions per key over a store."""

    def __init__(
        self,
        store: AbstractRateLimitStore,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            store: Backing table of client windows.
            limit: Maximum number of admitted requests per window.
            window_seconds: Length of a window in seconds.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._store = store
        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def check(self, key: str, now: float | None = None) -> RateLimitDecision:
        """Admit or deny one request for ``key``.

        Args:
            key: Client key (see ``app.core.client_identifier``).
            now: UNIX time in seconds; defaults to the limiter clock.

        Returns:
            RateLimitDecision describing the outcome and remaining quota.
        """
        if now is None:
            now = self._clock()

        with self._store.lock(key):
            record = self._store.get(key)

            if record is None or record.is_expired(now):
                record = RateWindowRecord(count=1, reset_at=now + self._window_seconds)
                self._store.set(key, record)
                return self._allowed(record)

            if record.count < self._limit:
                record = RateWindowRecord(count=record.count + 1, reset_at=record.reset_at)
                self._store.set(key, record)
                return self._allowed(record)

            return RateLimitDecision(
                allowed=False,
                limit=self._limit,
                remaining=0,
                reset_at=record.reset_at,
                retry_after_seconds=seconds_until(record.reset_at, now),
            )

    def _allowed(self, record: RateWindowRecord) -> RateLimitDecision:
        return RateLimitDecision(
            allowed=True,
            limit=self._limit,
            remaining=max(0, self._limit - record.count),
            reset_at=record.reset_at,
        )
