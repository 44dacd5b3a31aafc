"""Tests for the background rate limit sweeper."""

import asyncio
from unittest.mock import MagicMock, Mock

import pytest

from app.adapters.rate_limit.base import RateWindowRecord
from app.adapters.rate_limit.in_memory import InMemoryRateLimitStore
from app.services.sweeper import RateLimitSweeper


def _store_with_windows() -> InMemoryRateLimitStore:
    store = InMemoryRateLimitStore()
    store.set("expired", RateWindowRecord(count=3, reset_at=100.0))
    store.set("active", RateWindowRecord(count=1, reset_at=500.0))
    return store


def test_sweep_once_evicts_expired_windows() -> None:
    store = _store_with_windows()
    sweeper = RateLimitSweeper(store, interval_seconds=300, clock=Mock(return_value=200.0))

    assert sweeper.sweep_once() == 1
    assert store.get("expired") is None
    assert store.get("active") is not None


def test_background_loop_sweeps_until_stopped() -> None:
    store = _store_with_windows()
    sweeper = RateLimitSweeper(store, interval_seconds=0.01, clock=Mock(return_value=200.0))

    async def scenario() -> None:
        await sweeper.start()
        assert sweeper.running is True
        await asyncio.sleep(0.1)
        await sweeper.stop()

    asyncio.run(scenario())

    assert store.get("expired") is None
    assert store.get("active") is not None
    assert sweeper.running is False


def test_loop_survives_failing_sweep() -> None:
    calls = []

    def flaky_sweep(now: float) -> int:
        calls.append(now)
        if len(calls) == 1:
            raise RuntimeError("boom")
        return 0

    store = MagicMock()
    store.sweep.side_effect = flaky_sweep
    store.__len__.return_value = 0
    sweeper = RateLimitSweeper(store, interval_seconds=0.01, clock=Mock(return_value=1.0))

    async def scenario() -> None:
        await sweeper.start()
        await asyncio.sleep(0.1)
        await sweeper.stop()

    asyncio.run(scenario())

    assert len(calls) >= 2


def test_stop_before_start_is_noop() -> None:
    sweeper = RateLimitSweeper(InMemoryRateLimitStore(), interval_seconds=300)

    asyncio.run(sweeper.stop())

    assert sweeper.running is False


def test_start_twice_keeps_single_task() -> None:
    sweeper = RateLimitSweeper(InMemoryRateLimitStore(), interval_seconds=300)

    async def scenario() -> None:
        await sweeper.start()
        first = sweeper._task
        await sweeper.start()
        assert sweeper._task is first
        await sweeper.stop()

    asyncio.run(scenario())


def test_invalid_interval() -> None:
    with pytest.raises(ValueError):
        RateLimitSweeper(InMemoryRateLimitStore(), interval_seconds=0)
