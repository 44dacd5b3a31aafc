"""Background eviction of expired rate limit windows.

Expired windows are already replaced lazily on a client's next request, so
the sweeper only bounds memory when many distinct clients come and go.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimitStore

logger = logging.getLogger(__name__)


class RateLimitSweeper:
    """Periodic task calling ``store.sweep(now)``.

    Owned by the application lifespan: ``start()`` on startup and ``stop()``
    on shutdown.
    """

    def __init__(
        self,
        store: AbstractRateLimitStore,
        *,
        interval_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self._store = store
        self._interval = interval_seconds
        self._clock = clock
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> int:
        """Evict expired windows now and return how many were removed."""
        evicted = self._store.sweep(self._clock())
        logger.debug(
            "rate_limit.sweep",
            extra={"evicted": evicted, "size": len(self._store)},
        )
        return evicted

    async def start(self) -> None:
        """Start the background sweep loop."""
        if self._task is not None:
            logger.debug("rate_limit.sweeper_already_running")
            return

        self._stop_event.clear()
        self._task = asyncio.create_task(self._run())
        logger.info("rate_limit.sweeper_started", extra={"interval_s": self._interval})

    async def stop(self) -> None:
        """Stop the background sweep loop, cancelling it if it does not exit."""
        if self._task is None:
            return

        self._stop_event.set()
        try:
            await asyncio.wait_for(self._task, timeout=5.0)
        except asyncio.TimeoutError:
            logger.warning("rate_limit.sweeper_stop_timeout")
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        finally:
            self._task = None
            logger.info("rate_limit.sweeper_stopped")

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                # Interval elapsed without a stop request
                pass
            else:
                break

            try:
                self.sweep_once()
            except Exception:
                logger.exception("rate_limit.sweep_failed")
