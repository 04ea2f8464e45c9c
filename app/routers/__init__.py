# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - suppliers.py: Supplier registration form endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import suppliers

__all__ = [
    "health",
    "suppliers",
]
