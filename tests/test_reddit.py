"""Tests for the Reddit fetcher: recency filter, truncation, thread parsing."""

import time
from typing import Any

import httpx
import pytest

from app.core.exceptions import FetchFailure
from app.services.reddit import (
    DEFAULT_WINDOW_SECONDS,
    MAX_COMMENTS_CHARS,
    MAX_SNIPPET_CHARS,
    RedditFetcher,
    filter_recent,
    is_recent,
    living_cost_query,
    parse_thread,
    truncate,
    university_query,
)

DAY = 86400


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------

def _post(title: str, age_days: float, **overrides: Any) -> dict[str, Any]:
    data = {
        "title": title,
        "permalink": f"/r/studyabroad/comments/{title.lower().replace(' ', '_')}/",
        "score": 10,
        "subreddit": "studyabroad",
        "created_utc": time.time() - age_days * DAY,
        "selftext": f"Body of {title}",
        "num_comments": 3,
        **overrides,
    }
    return {"kind": "t3", "data": data}


def _listing(*children: dict[str, Any]) -> dict[str, Any]:
    return {"kind": "Listing", "data": {"children": list(children)}}


def _comment(body: str, kind: str = "t1") -> dict[str, Any]:
    return {"kind": kind, "data": {"body": body}}


def _fetcher(handler) -> RedditFetcher:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RedditFetcher(client=client, base_url="https://reddit.test", max_concurrency=2)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

class TestRecencyFilter:
    def test_keeps_only_posts_inside_window_in_order(self):
        now = 1_700_000_000
        posts = [
            {"title": "a", "created_utc": now - 10},
            {"title": "b", "created_utc": now - DEFAULT_WINDOW_SECONDS - 1},
            {"title": "c", "created_utc": now - DEFAULT_WINDOW_SECONDS},
            {"title": "d", "created_utc": now - 5 * DAY},
        ]
        kept = filter_recent(posts, DEFAULT_WINDOW_SECONDS, now=now)
        assert [p["title"] for p in kept] == ["a", "c", "d"]

    @pytest.mark.parametrize("value", [None, "1700000000", True, [], {}])
    def test_non_numeric_timestamps_are_not_recent(self, value):
        assert is_recent(value, 0) is False

    def test_missing_timestamp_dropped(self):
        assert filter_recent([{"title": "x"}], DEFAULT_WINDOW_SECONDS) == []


class TestTruncate:
    def test_prefix_of_exact_length(self):
        text = "x" * 2000
        assert truncate(text, 1500) == text[:1500]
        assert len(truncate(text, 1500)) == 1500

    def test_short_and_empty(self):
        assert truncate("short", 1500) == "short"
        assert truncate(None, 10) == ""


class TestQueries:
    def test_university_query_with_and_without_country(self):
        assert university_query("TU Munich") == "TU Munich university student reviews"
        assert university_query("TU Munich", "Germany") == "TU Munich Germany university student reviews"
        assert university_query("TU Munich", "   ") == "TU Munich university student reviews"

    def test_living_cost_query(self):
        assert living_cost_query("Berlin, Germany").startswith("Berlin, Germany student living costs")


class TestParseThread:
    def test_only_direct_t1_replies_capped_at_ten(self):
        post = _post("Thread", 1)
        comments = [_comment(f"c{i}") for i in range(15)]
        comments.insert(2, _comment("load more", kind="more"))
        summary = parse_thread([_listing(post), _listing(*comments)], "/r/x/comments/1/")

        assert summary.comments_text.split("\n\n") == [f"c{i}" for i in range(10)]
        assert "load more" not in summary.comments_text
        assert summary.url.startswith("https://www.reddit.com/r/studyabroad/")

    def test_comment_text_truncated(self):
        post = _post("Long", 1)
        comments = [_comment("y" * 400) for _ in range(10)]
        summary = parse_thread([_listing(post), _listing(*comments)], "/r/x/")
        full = "\n\n".join(["y" * 400] * 10)
        assert summary.comments_text == full[:MAX_COMMENTS_CHARS]

    def test_malformed_payload_yields_empty_summary(self):
        summary = parse_thread({"unexpected": True}, "/r/x/comments/1/")
        assert summary.title == ""
        assert summary.comments_text == ""
        assert summary.url == "https://www.reddit.com/r/x/comments/1/"


# ---------------------------------------------------------------------------
# Fetcher against a mock transport
# ---------------------------------------------------------------------------

class TestSearchThreads:
    @pytest.mark.asyncio
    async def test_search_request_and_filtering(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_listing(
                _post("Fresh one", 10),
                _post("Ancient", 5 * 365),
                _post("Fresh two", 20),
                _post("Fresh three", 30),
                _post("Fresh four", 40),
            ))

        fetcher = _fetcher(handler)
        items = await fetcher.search_threads("tum reviews", 3)

        assert [i.title for i in items] == ["Fresh one", "Fresh two", "Fresh three"]
        request = seen[0]
        assert request.url.path == "/search.json"
        assert request.url.params["q"] == "tum reviews"
        assert request.url.params["limit"] == "10"
        assert request.url.params["sort"] == "relevance"
        assert request.headers["User-Agent"]

    @pytest.mark.asyncio
    async def test_empty_result_is_not_an_error(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, json=_listing()))
        assert await fetcher.search_threads("nothing", 3) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [403, 429, 500, 503])
    async def test_non_success_raises_fetch_failure(self, status_code: int):
        fetcher = _fetcher(lambda request: httpx.Response(status_code, text="nope"))
        with pytest.raises(FetchFailure) as exc_info:
            await fetcher.search_threads("q", 3)
        assert exc_info.value.source == "reddit"

    @pytest.mark.asyncio
    async def test_invalid_json_raises_fetch_failure(self):
        fetcher = _fetcher(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(FetchFailure):
            await fetcher.search_threads("q", 3)

    @pytest.mark.asyncio
    async def test_transport_error_raises_fetch_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        fetcher = _fetcher(handler)
        with pytest.raises(FetchFailure):
            await fetcher.search_threads("q", 3)


class TestThreadDetails:
    @pytest.mark.asyncio
    async def test_follows_each_permalink(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/search.json":
                return httpx.Response(200, json=_listing(_post("Alpha", 1), _post("Beta", 2)))
            assert request.url.path.endswith(".json")
            assert request.url.params["limit"] == "20"
            title = "Alpha" if "alpha" in request.url.path else "Beta"
            return httpx.Response(200, json=[
                _listing(_post(title, 1, selftext="z" * 3000)),
                _listing(_comment(f"{title} reply")),
            ])

        fetcher = _fetcher(handler)
        threads = await fetcher.search_thread_details("q", 3)

        assert [t.title for t in threads] == ["Alpha", "Beta"]
        assert threads[0].comments_text == "Alpha reply"
        assert len(threads[0].selftext) == 1500

    @pytest.mark.asyncio
    async def test_detail_failure_fails_whole_call(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/search.json":
                return httpx.Response(200, json=_listing(_post("Alpha", 1)))
            return httpx.Response(502)

        fetcher = _fetcher(handler)
        with pytest.raises(FetchFailure):
            await fetcher.search_thread_details("q", 3)


class TestLightSnippets:
    @pytest.mark.asyncio
    async def test_snippets_are_short_and_skip_details(self):
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json=_listing(_post("Alpha", 1, selftext="w" * 1000)))

        fetcher = _fetcher(handler)
        snippets = await fetcher.fetch_light_snippets("q", 3)

        assert paths == ["/search.json"]
        assert len(snippets) == 1
        assert snippets[0].snippet == "w" * MAX_SNIPPET_CHARS
        assert snippets[0].to_dict() == {
            "title": "Alpha",
            "snippet": "w" * MAX_SNIPPET_CHARS,
            "score": 10,
            "subreddit": "studyabroad",
        }
