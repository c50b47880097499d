"""Insight Orchestrator - cached, evidence-backed synthesis per endpoint.

Coordinates each request between:
- Request validation (before any I/O)
- Cache Service (response lookup and write-back)
- Reddit Fetcher (discussion evidence, parallel branches)
- LLM Service (exactly one synthesis call per operation)
- Normalizer (fence stripping, JSON parsing, shape coercion)

Fetch branches degrade to empty evidence on failure. Synthesis and parse
failures abort the operation and are never cached.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from app.core.exceptions import FetchFailure
from app.core.logging import get_logger
from app.services import normalizer, prompts, sources, validation
from app.services.cache import (
    KEY_PREFIX_BUDGET,
    KEY_PREFIX_COMPARE,
    KEY_PREFIX_DOCUMENTS,
    KEY_PREFIX_OVERALL,
    KEY_PREFIX_PROFILE_MATCH,
    KEY_PREFIX_UNIVERSITY_SCORE,
    TTL_BUDGET,
    TTL_COMPARE,
    TTL_DOCUMENTS,
    TTL_OVERALL,
    TTL_PROFILE_MATCH,
    TTL_UNIVERSITY_SCORE,
    CacheService,
    get_cache_service,
)
from app.services.llm import LLMService, get_llm_service
from app.services.reddit import (
    DEFAULT_WINDOW_SECONDS,
    RedditFetcher,
    get_reddit_fetcher,
    living_cost_query,
    university_query,
)

logger = get_logger(__name__)
T = TypeVar("T")

SNIPPETS_PER_UNIVERSITY = 3
THREADS_PER_QUERY = 3


async def fetch_or_empty(
    fetch: Awaitable[list[T]],
    branch: str,
    **log_context: Any,
) -> list[T]:
    """Await a fetch branch, mapping ``FetchFailure`` to an empty collection."""
    try:
        return await fetch
    except FetchFailure as e:
        logger.warning(
            "Fetch branch failed, continuing without its data",
            branch=branch,
            error=e.message,
            **log_context,
        )
        return []


class InsightOrchestrator:
    """Runs the validate → cache → fetch → synthesize → normalize → cache flow."""

    def __init__(
        self,
        cache_service: CacheService | None = None,
        fetcher: RedditFetcher | None = None,
        llm_service: LLMService | None = None,
    ) -> None:
        self.cache_service = cache_service or get_cache_service()
        self.fetcher = fetcher or get_reddit_fetcher()
        self.llm_service = llm_service or get_llm_service()

    async def _cached(
        self,
        key_parts: list[Any],
        ttl: int,
        produce: Callable[[], Awaitable[dict[str, Any]]],
    ) -> dict[str, Any]:
        """Serve from cache, or produce, cache and return a fresh result."""
        prefix, *parts = key_parts
        entry = await self.cache_service.get_response(prefix, *parts)
        if entry is not None and isinstance(entry.data, dict):
            logger.info("Serving cached response", operation=prefix)
            return {**entry.data, "cachedAt": entry.cached_at}

        result = await produce()
        await self.cache_service.set_response(prefix, *parts, data=result, ttl_seconds=ttl)
        return result

    async def _synthesize(self, request: prompts.SynthesisRequest) -> dict[str, Any]:
        raw = await self.llm_service.complete(request)
        return normalizer.parse_completion(raw)

    # ========== Operations ==========

    async def university_score(self, name: Any, country: Any = None) -> dict[str, Any]:
        """Score a university from light Reddit snippets."""
        name, country = validation.validate_university_score(name, country)

        async def produce() -> dict[str, Any]:
            snippets = await fetch_or_empty(
                self.fetcher.fetch_light_snippets(
                    university_query(name, country), SNIPPETS_PER_UNIVERSITY, DEFAULT_WINDOW_SECONDS
                ),
                "university_snippets",
                university=name,
            )
            parsed = await self._synthesize(
                prompts.university_score_request(name, country, [s.to_dict() for s in snippets])
            )
            result = normalizer.normalize_university_score(parsed)
            if country:
                result["country"] = country
            else:
                result.pop("country", None)
            return result

        return await self._cached(
            [KEY_PREFIX_UNIVERSITY_SCORE, name, country], TTL_UNIVERSITY_SCORE, produce
        )

    async def profile_match(self, profile: dict[str, Any]) -> dict[str, Any]:
        """Group recommended universities into safe/moderate/ambitious."""
        cleaned = validation.validate_profile(profile)

        async def produce() -> dict[str, Any]:
            parsed = await self._synthesize(prompts.profile_match_request(cleaned))
            return normalizer.normalize_profile_buckets(parsed)

        key_parts = [
            KEY_PREFIX_PROFILE_MATCH,
            f"cgpa={cleaned['cgpa']}",
            f"degree={cleaned['degree']}",
            f"ielts={cleaned['ielts']}",
            f"budget={cleaned['budget']}",
            f"country={cleaned['countryPreference']}",
            f"scholarship={cleaned['needScholarship']}",
            f"pr={cleaned['wantPr']}",
        ]
        return await self._cached(key_parts, TTL_PROFILE_MATCH, produce)

    async def budget_info(self, country: Any, city: Any = None) -> dict[str, Any]:
        """Visa, pre-arrival, living and part-time cost overview."""
        country, city = validation.validate_budget_info(country, city)
        location = f"{city}, {country}" if city else country

        async def produce() -> dict[str, Any]:
            threads = await fetch_or_empty(
                self.fetcher.search_thread_details(
                    living_cost_query(location), THREADS_PER_QUERY, DEFAULT_WINDOW_SECONDS
                ),
                "living_cost_threads",
                location=location,
            )
            parsed = await self._synthesize(
                prompts.budget_info_request(location, [t.to_dict() for t in threads])
            )
            result = normalizer.normalize_budget_info(parsed)
            result["sources"] = sources.budget_sources(country, location)
            return result

        return await self._cached([KEY_PREFIX_BUDGET, country, city], TTL_BUDGET, produce)

    async def overall_insight(self, university: Any, country: Any) -> dict[str, Any]:
        """One-look verdict combining university reviews and living costs."""
        university, country = validation.validate_overall_insight(university, country)

        async def produce() -> dict[str, Any]:
            university_threads, living_cost_threads = await asyncio.gather(
                fetch_or_empty(
                    self.fetcher.search_thread_details(
                        university_query(university), THREADS_PER_QUERY, DEFAULT_WINDOW_SECONDS
                    ),
                    "university_threads",
                    university=university,
                ),
                fetch_or_empty(
                    self.fetcher.search_thread_details(
                        living_cost_query(country), THREADS_PER_QUERY, DEFAULT_WINDOW_SECONDS
                    ),
                    "living_cost_threads",
                    country=country,
                ),
            )
            parsed = await self._synthesize(
                prompts.overall_insight_request(
                    university,
                    country,
                    [t.to_dict() for t in university_threads],
                    [t.to_dict() for t in living_cost_threads],
                )
            )
            result = normalizer.normalize_overall_insight(parsed, country)
            result["sources"] = sources.overall_sources(university, country)
            return result

        return await self._cached(
            [KEY_PREFIX_OVERALL, university, country], TTL_OVERALL, produce
        )

    async def required_documents(self, country: Any) -> dict[str, Any]:
        """Student visa document checklist for a country."""
        country = validation.validate_required_documents(country)

        async def produce() -> dict[str, Any]:
            parsed = await self._synthesize(prompts.required_documents_request(country))
            result = normalizer.normalize_required_documents(parsed)
            result["sources"] = sources.document_sources(country)
            return result

        return await self._cached([KEY_PREFIX_DOCUMENTS, country], TTL_DOCUMENTS, produce)

    async def compare_universities(self, universities: Any) -> dict[str, Any]:
        """Side-by-side comparison of 2-3 universities."""
        names = validation.validate_university_list(universities)

        async def produce() -> dict[str, Any]:
            snippet_sets = await asyncio.gather(
                *(
                    fetch_or_empty(
                        self.fetcher.fetch_light_snippets(
                            university_query(name), SNIPPETS_PER_UNIVERSITY, DEFAULT_WINDOW_SECONDS
                        ),
                        "comparison_snippets",
                        university=name,
                    )
                    for name in names
                )
            )
            parsed = await self._synthesize(
                prompts.compare_universities_request(
                    names, [[s.to_dict() for s in snippets] for snippets in snippet_sets]
                )
            )
            result = normalizer.normalize_comparison(parsed)
            result["sources"] = sources.comparison_sources(names)
            return result

        return await self._cached([KEY_PREFIX_COMPARE, *names], TTL_COMPARE, produce)


# Global orchestrator instance
_insight_orchestrator: InsightOrchestrator | None = None


def get_insight_orchestrator() -> InsightOrchestrator:
    """Get or create the global insight orchestrator instance."""
    global _insight_orchestrator

    if _insight_orchestrator is None:
        _insight_orchestrator = InsightOrchestrator()

    return _insight_orchestrator
