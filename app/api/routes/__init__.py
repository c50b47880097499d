"""Routes module exports."""

from app.api.routes.health import router as health_router
from app.api.routes.insights import router as insights_router

__all__ = [
    "health_router",
    "insights_router",
]
