"""Time helpers and the read-time expiry rule for relayed messages."""
from __future__ import annotations

import math
import time
from datetime import datetime, timezone
from typing import Any, Optional, Union

Millis = Union[int, float]


def now_ms() -> int:
    """Return the current wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


def utc_timestamp() -> str:
    # e.g. 2025-01-01T12:00:00.000Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def expires_at_for(ttl_seconds: Any, now: Millis) -> Optional[Millis]:
    """Absolute expiry instant for a TTL given in seconds.

    Only a real, positive number enables expiry; anything else (missing,
    zero, negative, strings, booleans) means the record never expires.
    So does a TTL whose expiry instant is not representable as a finite
    JSON number.
    """
    if isinstance(ttl_seconds, bool) or not isinstance(ttl_seconds, (int, float)):
        return None
    if not ttl_seconds > 0:
        return None
    expires_at = now + ttl_seconds * 1000
    try:
        if not math.isfinite(expires_at):
            return None
    except OverflowError:
        return None
    return expires_at


def is_active(expires_at: Optional[Millis], now: Millis) -> bool:
    return expires_at is None or expires_at > now
