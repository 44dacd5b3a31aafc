"""Client key resolution from proxy headers.

The service sits behind proxies/CDNs, so the socket peer is not the client.
The first usable header wins:

1. ``X-Forwarded-For``: first entry of the comma-separated chain
2. ``X-Real-IP``
3. ``CF-Connecting-IP``

Requests carrying none of them share the ``"unknown"`` bucket.
"""

from __future__ import annotations

from typing import Mapping

UNKNOWN_CLIENT = "unknown"

FORWARDED_FOR_HEADER = "x-forwarded-for"
REAL_IP_HEADER = "x-real-ip"
CF_CONNECTING_IP_HEADER = "cf-connecting-ip"


def get_client_key(headers: Mapping[str, str]) -> str:
    """Derive a stable client key from request headers.

    Args:
        headers: Request header mapping (Starlette ``Headers`` or a plain dict).

    Returns:
        str: Client address, or ``"unknown"`` when no header identifies it.

    Examples:
        >>> get_client_key({"X-Forwarded-For": "1.2.3.4, 10.0.0.1"})
        '1.2.3.4'
        >>> get_client_key({})
        'unknown'
    """
    # Repeated header lines: the first occurrence wins
    lowered: dict[str, str] = {}
    for name, value in headers.items():
        lowered.setdefault(name.lower(), value)

    forwarded = lowered.get(FORWARDED_FOR_HEADER)
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    for header in (REAL_IP_HEADER, CF_CONNECTING_IP_HEADER):
        value = (lowered.get(header) or "").strip()
        if value:
            return value

    return UNKNOWN_CLIENT
