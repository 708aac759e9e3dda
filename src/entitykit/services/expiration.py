"""Expiration policy for cached entities and index results.

Expirations are absolute epoch seconds; ``Cache.NEVER_EXPIRES`` (0) marks
an entry that never goes stale.
"""

from __future__ import annotations

import time
from typing import Callable

from entitykit.shared.constants import Cache

Clock = Callable[[], float]


def current_time(clock: Clock = time.time) -> int:
    """Return the clock reading as whole epoch seconds."""
    return int(clock())


def compute_expiration(
    ttl_seconds: int,
    caching_enabled: bool,
    clock: Clock = time.time,
) -> int | None:
    """Compute the absolute expiration for an entry written now.

    Args:
        ttl_seconds: Configured time-to-live in seconds
        caching_enabled: Whether entity caching is switched on
        clock: Time source returning epoch seconds

    Returns:
        None when caching is disabled (the caller must not cache),
        ``Cache.NEVER_EXPIRES`` for a zero TTL, otherwise now + ttl.
    """
    if not caching_enabled:
        return None
    if ttl_seconds == Cache.NEVER_EXPIRES:
        return Cache.NEVER_EXPIRES
    return current_time(clock) + ttl_seconds


def is_expired(expiration: int | None, clock: Clock = time.time) -> bool:
    """Return True when an entry with this expiration must not be served.

    An absent expiration and the never-expires sentinel are never expired.
    """
    if expiration is None or expiration == Cache.NEVER_EXPIRES:
        return False
    return current_time(clock) > expiration
