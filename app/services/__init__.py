"""Services module exports."""

from app.services.cache import CacheService, get_cache_service
from app.services.insights import InsightOrchestrator, get_insight_orchestrator
from app.services.llm import LLMService, get_llm_service
from app.services.rate_limit import RateLimitService, get_rate_limit_service
from app.services.reddit import RedditFetcher, get_reddit_fetcher

__all__ = [
    # Cache
    "CacheService",
    "get_cache_service",
    # Insights
    "InsightOrchestrator",
    "get_insight_orchestrator",
    # LLM
    "LLMService",
    "get_llm_service",
    # Rate Limiting
    "RateLimitService",
    "get_rate_limit_service",
    # Reddit
    "RedditFetcher",
    "get_reddit_fetcher",
]
