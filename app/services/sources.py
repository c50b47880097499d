"""Source links attached to responses.

Built only from validated inputs, never from model output.
"""

from urllib.parse import quote

REDDIT_SEARCH_URL = "https://www.reddit.com/search/?q="
GOOGLE_SEARCH_URL = "https://www.google.com/search?q="
SKYSCANNER_URL = "https://www.skyscanner.net/transport/flights-to/"


def _source(kind: str, label: str, url: str) -> dict[str, str]:
    return {"type": kind, "label": label, "url": url}


def reddit_search(query: str) -> str:
    return REDDIT_SEARCH_URL + quote(query, safe="")


def google_search(query: str) -> str:
    return GOOGLE_SEARCH_URL + quote(query, safe="")


def budget_sources(country: str, location: str) -> list[dict[str, str]]:
    return [
        _source(
            "official",
            f"{country} official student visa information (search)",
            google_search(f"{country} official student visa fee"),
        ),
        _source(
            "official",
            f"{country} official healthcare / insurance for international students (search)",
            google_search(f"{country} mandatory health insurance for international students"),
        ),
        _source(
            "flights",
            "Flight prices (Skyscanner search)",
            f"{SKYSCANNER_URL}{quote(country, safe='')}/",
        ),
        _source(
            "community",
            "Reddit threads on student living costs",
            reddit_search(f"{location} student living costs"),
        ),
    ]


def overall_sources(university: str, country: str) -> list[dict[str, str]]:
    return [
        _source(
            "reddit",
            f"Reddit reviews about {university}",
            reddit_search(f"{university} university student"),
        ),
        _source(
            "living_costs",
            f"Reddit threads on student living costs in {country}",
            reddit_search(f"{country} student living costs"),
        ),
    ]


def document_sources(country: str) -> list[dict[str, str]]:
    return [
        _source(
            "official",
            f"{country} official student visa document requirements",
            google_search(f"{country} official student visa required documents"),
        ),
        _source(
            "official",
            f"{country} embassy/consulate student visa page",
            google_search(f"{country} embassy student visa application documents"),
        ),
    ]


def comparison_sources(universities: list[str]) -> list[dict[str, str]]:
    sources: list[dict[str, str]] = []
    for name in universities:
        sources.append(
            _source(
                "reddit",
                f"Reddit discussions about {name}",
                reddit_search(f"{name} university student"),
            )
        )
        sources.append(
            _source(
                "official",
                f"{name} official website",
                google_search(f"{name} official website"),
            )
        )
    return sources
