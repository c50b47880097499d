"""API module exports."""

from app.api.routes import health_router, insights_router
from app.api.deps import Orchestrator, check_api_rate_limit

__all__ = [
    # Routers
    "health_router",
    "insights_router",
    # Dependencies
    "Orchestrator",
    "check_api_rate_limit",
]
