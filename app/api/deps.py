"""API dependencies for FastAPI routes."""

from typing import Annotated

from fastapi import Depends, Request

from app.core.exceptions import RateLimitError
from app.services.insights import InsightOrchestrator, get_insight_orchestrator
from app.services.rate_limit import RateLimitService, get_rate_limit_service


def client_identifier(request: Request) -> str:
    """Client IP from X-Forwarded-For or the direct connection."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


async def check_api_rate_limit(
    request: Request,
    rate_limiter: Annotated[RateLimitService, Depends(get_rate_limit_service)],
) -> None:
    """Check the insight API rate limit for the calling client.

    Raises:
        RateLimitError: If rate limit exceeded
    """
    allowed, _ = await rate_limiter.check_api_limit(client_identifier(request))

    if not allowed:
        raise RateLimitError(retry_after=rate_limiter.window_seconds)


# Type aliases for cleaner route signatures
Orchestrator = Annotated[InsightOrchestrator, Depends(get_insight_orchestrator)]
