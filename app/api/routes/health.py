"""Health check and monitoring endpoints."""

import asyncio
from datetime import datetime, timezone
import time
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.api.schemas import HealthResponse, ServiceHealth
from app.core.config import get_settings
from app.services.cache import get_cache_service
from app.services.llm import get_llm_service

router = APIRouter(tags=["Health"])


def _llm_configured() -> bool:
    settings = get_settings()
    if settings.llm_provider == "gemini":
        return bool(settings.gemini_api_key)
    return bool(settings.groq_api_key)


@router.get(
    "/",
    summary="Root endpoint",
    response_description="API information and basic health status",
)
async def root() -> dict[str, Any]:
    """
    Root endpoint with API information.

    Returns basic API metadata including:
    - Application name and version
    - Current status
    - Environment name
    - Server timestamp
    """
    settings = get_settings()

    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "healthy",
        "environment": settings.environment,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "documentation": "/docs",
    }


async def _timed_health_check(
    name: str,
    check_fn: Any,
    timeout: float = 5.0
) -> tuple[str, bool, float, str | None]:
    """Execute a health check and measure its latency with timeout.

    Returns:
        Tuple of (name, healthy, latency_ms, error_message)
    """
    start = time.perf_counter()
    try:
        result = await asyncio.wait_for(check_fn(), timeout=timeout)
        latency = (time.perf_counter() - start) * 1000
        return (name, result, latency, None)
    except asyncio.TimeoutError:
        latency = (time.perf_counter() - start) * 1000
        return (name, False, latency, f"Health check timed out after {timeout}s")
    except Exception as e:
        latency = (time.perf_counter() - start) * 1000
        return (name, False, latency, str(e))


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Comprehensive health check",
    response_description="Health status of the cache and completion provider",
)
async def health_check() -> HealthResponse:
    """
    Health check endpoint for monitoring.

    - **Cache**: Upstash Redis connectivity and response time. The cache is
      optional, so an outage only degrades the service.
    - **LLM**: whether the selected completion provider has credentials.
      Without them every insight request fails, so this marks the service
      unhealthy.
    """
    settings = get_settings()
    services: dict[str, ServiceHealth] = {}
    overall_status = "healthy"

    cache_service = get_cache_service()

    if cache_service.is_available:
        _, healthy, latency, error = await _timed_health_check("cache", cache_service.check_health)
        cache_details: dict[str, Any] = {"type": "redis", "provider": "upstash"}
        if error:
            cache_details["error"] = error
        services["cache"] = ServiceHealth(
            status="healthy" if healthy else "degraded",
            latency_ms=round(latency, 2),
            details=cache_details,
        )
        if not healthy:
            overall_status = "degraded"
    else:
        services["cache"] = ServiceHealth(
            status="degraded",
            details={"type": "redis", "provider": "not configured"},
        )
        overall_status = "degraded"

    llm_configured = _llm_configured()
    services["llm"] = ServiceHealth(
        status="healthy" if llm_configured else "unhealthy",
        details={**get_llm_service().describe(), "configured": llm_configured},
    )
    if not llm_configured:
        overall_status = "unhealthy"

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        version=settings.app_version,
        services=services,
    )


@router.get(
    "/health/live",
    summary="Liveness probe",
    response_description="Simple liveness check for orchestrators",
)
async def liveness() -> dict[str, str]:
    """
    Liveness probe endpoint.

    Returns 200 if the service process is running. This is a lightweight
    check that doesn't verify external dependencies.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get(
    "/health/cache",
    summary="Cache health check",
    response_description="Detailed cache connectivity status",
)
async def cache_health() -> JSONResponse:
    """
    Check cache (Redis/Upstash) connectivity and response time.

    Returns detailed cache health information including:
    - Connection status
    - Response latency
    - Provider information
    - Error details if unhealthy
    """
    cache_service = get_cache_service()

    if not cache_service.is_available:
        return JSONResponse(
            status_code=status.HTTP_200_OK,  # Cache is optional, degraded is OK
            content={
                "service": "cache",
                "type": "redis",
                "provider": "not configured",
                "status": "degraded",
                "message": "Cache service is not configured",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    _, healthy, latency, error = await _timed_health_check("cache", cache_service.check_health)

    response_data: dict[str, Any] = {
        "service": "cache",
        "type": "redis",
        "provider": "upstash",
        "status": "healthy" if healthy else "degraded",
        "latency_ms": round(latency, 2),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    if error:
        response_data["error"] = error

    return JSONResponse(status_code=status.HTTP_200_OK, content=response_data)
