"""Conversions between epoch seconds and the wire formats used in responses."""

from __future__ import annotations

import math
from datetime import datetime, timezone


def to_epoch_ms(timestamp: float) -> int:
    """Convert UNIX seconds to integer epoch milliseconds."""
    return int(round(timestamp * 1000))


def to_iso8601(timestamp: float) -> str:
    """Format UNIX seconds as an ISO-8601 UTC string with millisecond precision.

    Examples:
        >>> to_iso8601(0)
        '1970-01-01T00:00:00.000Z'
    """
    moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def seconds_until(reset_at: float, now: float) -> int:
    """Whole seconds from ``now`` until ``reset_at``, rounded up and never negative."""
    return max(0, int(math.ceil(reset_at - now)))
