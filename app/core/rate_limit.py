"""Rate limiting dependency for FastAPI routes.

This module wires the limiter into the HTTP layer.

Design goals:
- Minimal coupling: routes depend on a dependency function only.
- Swap-friendly: the limiter reads and writes through an abstract store.
- Lifecycle-owned state: the limiter lives on ``app.state`` and is created by
  the application lifespan, not at import time.

Strategy: fixed window per client key derived from proxy headers. The
budget is charged when the request is admitted, before the payload is looked
at, so a rejected payload still costs one submission.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Depends, Request, Response

from app.core.client_identifier import get_client_key
from app.core.errors import RateLimitAppError
from app.services.rate_limiter import FixedWindowRateLimiter, RateLimitDecision
from app.utils.timestamps import to_epoch_ms

logger = logging.getLogger(__name__)


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    """Return the limiter created by the application lifespan."""
    return request.app.state.rate_limiter


def _hash_limiter_key(key: str) -> str:
    """Hash the client key for logging without exposing addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def rate_limit_headers(decision: RateLimitDecision) -> dict[str, str]:
    """Build the X-RateLimit-* (and Retry-After when blocked) headers."""
    headers = {
        "X-RateLimit-Limit": str(decision.limit),
        "X-RateLimit-Remaining": str(decision.remaining),
        "X-RateLimit-Reset": str(to_epoch_ms(decision.reset_at)),
    }
    if not decision.allowed:
        headers["Retry-After"] = str(decision.retry_after_seconds or 0)
    return headers


async def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> RateLimitDecision:
    """FastAPI dependency enforcing the submission quota.

    Consumes one unit from the client's budget. Quota headers are attached to
    the route's response; routes also receive the decision for the body.

    Args:
        request: FastAPI request.
        response: Response the route will return (headers are added to it).
        limiter: Limiter resolved from application state.

    Returns:
        RateLimitDecision: The admitted request's quota snapshot.

    Raises:
        RateLimitAppError: When the client exceeded its quota (HTTP 429).
    """
    key = get_client_key(request.headers)
    key_hash = _hash_limiter_key(key)

    decision = limiter.check(key)
    if decision.allowed:
        logger.info(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": decision.limit,
                "remaining": decision.remaining,
                "window_s": limiter.window_seconds,
            },
        )
        response.headers.update(rate_limit_headers(decision))
        return decision

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "limit": decision.limit,
            "window_s": limiter.window_seconds,
            "retry_after_s": decision.retry_after_seconds,
        },
    )
    raise RateLimitAppError(
        code="rate_limit_exceeded",
        message="Too many submissions. Please try again later.",
        decision=decision,
    )
