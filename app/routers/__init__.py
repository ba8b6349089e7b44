# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - memory_wall.py: Memory wall (photo + metadata) endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import memory_wall

__all__ = [
    "health",
    "memory_wall",
]
