"""HTTP routes for XtreamEPG"""

from .addon import router as addon_router
from .health import router as health_router

__all__ = [
    "addon_router",
    "health_router",
]
