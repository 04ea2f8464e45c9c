# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

import time
from collections.abc import Mapping

# Bucket shared by every request that arrives without a forwarded address
UNKNOWN_CLIENT = "unknown"


# =============================================================================
# Request Utilities
# =============================================================================

def client_identifier(headers: Mapping[str, str]) -> str:
    """
    Derive the rate-limit key for a request.

    Uses the first address of the X-Forwarded-For header set by the
    reverse proxy. Requests without the header all share one bucket.

    Example:
        client_identifier({"x-forwarded-for": "203.0.113.7, 10.0.0.1"})  # "203.0.113.7"
        client_identifier({})  # "unknown"
    """
    forwarded = headers.get("x-forwarded-for") or ""
    first = forwarded.split(",")[0].strip()
    return first or UNKNOWN_CLIENT


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)
