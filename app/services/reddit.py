"""Reddit thread fetcher.

Reads the public Reddit JSON endpoints:
- ``/search.json`` for listings (recency-filtered, capped, relevance order kept)
- ``{permalink}.json`` for a post and its direct replies

Every call is a single outbound GET with no retries. Any failure is raised
as ``FetchFailure`` so the caller can decide between degrading and aborting.
"""

import asyncio
import time
from dataclasses import asdict, dataclass
from typing import Any

import httpx

from app.core.config import get_settings
from app.core.exceptions import FetchFailure
from app.core.logging import get_logger

logger = get_logger(__name__)

SOURCE = "reddit"

SECONDS_PER_YEAR = 365 * 24 * 60 * 60
DEFAULT_WINDOW_SECONDS = 3 * SECONDS_PER_YEAR

SEARCH_PAGE_SIZE = 10
THREAD_COMMENT_LIMIT = 20
MAX_TOP_COMMENTS = 10
MAX_BODY_CHARS = 1500
MAX_COMMENTS_CHARS = 1500
MAX_SNIPPET_CHARS = 220


@dataclass(frozen=True)
class ListingItem:
    """A search hit as returned by the listing endpoint."""

    title: str
    permalink: str
    score: int | None
    subreddit: str | None
    created_utc: float
    selftext: str


@dataclass(frozen=True)
class ThreadSummary:
    """A post plus the text of its top-level replies, both truncated."""

    title: str
    selftext: str
    url: str
    score: int | None
    num_comments: int | None
    created_utc: float | None
    subreddit: str | None
    comments_text: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ThreadSnippet:
    """Listing-level fields only; no permalink is followed."""

    title: str
    snippet: str
    score: int | None
    subreddit: str | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def truncate(text: str | None, limit: int) -> str:
    """Return at most ``limit`` leading characters of ``text``."""
    return (text or "")[:limit]


def recency_cutoff(window_seconds: int, now: float | None = None) -> float:
    return (time.time() if now is None else now) - window_seconds


def is_recent(created_utc: Any, cutoff: float) -> bool:
    """Items without a numeric creation timestamp are never recent."""
    if isinstance(created_utc, bool) or not isinstance(created_utc, (int, float)):
        return False
    return created_utc >= cutoff


def filter_recent(
    posts: list[dict[str, Any]],
    window_seconds: int,
    now: float | None = None,
) -> list[dict[str, Any]]:
    """Keep posts created within the window, preserving order."""
    cutoff = recency_cutoff(window_seconds, now)
    return [p for p in posts if is_recent(p.get("created_utc"), cutoff)]


def university_query(name: str, country: str | None = None) -> str:
    if country and country.strip():
        return f"{name} {country.strip()} university student reviews"
    return f"{name} university student reviews"


def living_cost_query(location: str) -> str:
    return f"{location} student living costs accommodation food monthly budget"


def _listing_children(listing: Any) -> list[dict[str, Any]]:
    if not isinstance(listing, dict):
        return []
    children = (listing.get("data") or {}).get("children") or []
    return [c for c in children if isinstance(c, dict)]


def parse_thread(payload: Any, permalink: str) -> ThreadSummary:
    """Build a ThreadSummary from a ``{permalink}.json`` response body."""
    listings = payload if isinstance(payload, list) else []
    post_children = _listing_children(listings[0]) if listings else []
    post: dict[str, Any] = (post_children[0].get("data") or {}) if post_children else {}
    replies = _listing_children(listings[1]) if len(listings) > 1 else []

    bodies = [
        (c.get("data") or {}).get("body") or ""
        for c in replies
        if c.get("kind") == "t1"
    ][:MAX_TOP_COMMENTS]
    comments_text = "\n\n".join(b for b in bodies if b)

    return ThreadSummary(
        title=post.get("title") or "",
        selftext=truncate(post.get("selftext"), MAX_BODY_CHARS),
        url=f"https://www.reddit.com{post.get('permalink') or permalink}",
        score=post.get("score"),
        num_comments=post.get("num_comments"),
        created_utc=post.get("created_utc"),
        subreddit=post.get("subreddit"),
        comments_text=truncate(comments_text, MAX_COMMENTS_CHARS),
    )


class RedditFetcher:
    """Async client for Reddit's public JSON API.

    Owns one pooled ``httpx.AsyncClient`` and bounds the number of requests
    in flight so parallel branches stay polite to the upstream service.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        max_concurrency: int | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.reddit_base_url).rstrip("/")
        self._user_agent = settings.reddit_user_agent
        self._client = client
        self._semaphore = asyncio.Semaphore(max_concurrency or settings.reddit_max_concurrency)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self._base_url}{path}"
        async with self._semaphore:
            try:
                response = await self._get_client().get(
                    url,
                    params=params,
                    headers={"User-Agent": self._user_agent},
                )
            except httpx.HTTPError as e:
                raise FetchFailure(SOURCE, f"request to {path} failed: {e}") from e

        if not response.is_success:
            raise FetchFailure(SOURCE, f"{path} returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise FetchFailure(SOURCE, f"{path} returned invalid JSON") from e

    async def _search(self, query: str) -> list[dict[str, Any]]:
        payload = await self._get_json(
            "/search.json",
            {"q": query, "limit": SEARCH_PAGE_SIZE, "sort": "relevance"},
        )
        children = _listing_children(payload)
        return [c.get("data") or {} for c in children]

    async def search_threads(
        self,
        query: str,
        result_limit: int,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
    ) -> list[ListingItem]:
        """Search listings, keep recent ones in relevance order, cap the count."""
        found = await self._search(query)
        posts = filter_recent(found, window_seconds)[:result_limit]
        logger.debug("Reddit search", query=query, found=len(found), kept=len(posts))
        return [
            ListingItem(
                title=p.get("title") or "",
                permalink=p.get("permalink") or "",
                score=p.get("score"),
                subreddit=p.get("subreddit"),
                created_utc=p["created_utc"],
                selftext=p.get("selftext") or "",
            )
            for p in posts
        ]

    async def fetch_thread_detail(self, permalink: str) -> ThreadSummary:
        """Fetch one post with its top-level replies."""
        payload = await self._get_json(f"{permalink.rstrip('/')}.json", {"limit": THREAD_COMMENT_LIMIT})
        return parse_thread(payload, permalink)

    async def search_thread_details(
        self,
        query: str,
        result_limit: int,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
    ) -> list[ThreadSummary]:
        """Search, then follow each hit's permalink concurrently.

        A failure in any detail fetch fails the whole call.
        """
        items = await self.search_threads(query, result_limit, window_seconds)
        return list(
            await asyncio.gather(
                *(self.fetch_thread_detail(item.permalink) for item in items if item.permalink)
            )
        )

    async def fetch_light_snippets(
        self,
        query: str,
        result_limit: int,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
    ) -> list[ThreadSnippet]:
        """Cheap search variant: listing fields only, short snippets."""
        items = await self.search_threads(query, result_limit, window_seconds)
        return [
            ThreadSnippet(
                title=item.title,
                snippet=truncate(item.selftext, MAX_SNIPPET_CHARS),
                score=item.score,
                subreddit=item.subreddit,
            )
            for item in items
        ]


# Global fetcher instance
_reddit_fetcher: RedditFetcher | None = None


def get_reddit_fetcher() -> RedditFetcher:
    """Get or create the global Reddit fetcher instance."""
    global _reddit_fetcher

    if _reddit_fetcher is None:
        _reddit_fetcher = RedditFetcher()

    return _reddit_fetcher
