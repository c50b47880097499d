"""Synthesis request builders.

Each builder turns validated inputs plus fetched evidence into one
``SynthesisRequest``. The structured ``context`` is kept alongside the
rendered prompt so callers and tests can see exactly what evidence was sent.
"""

from dataclasses import dataclass, field
from typing import Any

import orjson

DEFAULT_TEMPERATURE = 0.4

_JSON_ONLY = "Respond ONLY with a JSON object. No markdown, no commentary."
_WEAK_EVIDENCE = (
    "If the discussion data is sparse or empty, say so plainly in the relevant "
    "fields and keep estimates cautious; do not invent confident claims."
)


@dataclass(frozen=True)
class SynthesisRequest:
    """A single completion call: instructions plus the evidence behind them."""

    operation: str
    system_prompt: str
    user_prompt: str
    temperature: float = DEFAULT_TEMPERATURE
    context: dict[str, Any] = field(default_factory=dict)


def _dump(value: Any) -> str:
    return orjson.dumps(value, option=orjson.OPT_INDENT_2).decode()


def university_score_request(
    name: str,
    country: str,
    snippets: list[dict[str, Any]],
) -> SynthesisRequest:
    header = f'University: "{name}"' + (f' | Country: "{country}"' if country else "")
    return SynthesisRequest(
        operation="university_score",
        system_prompt=(
            "You score universities for prospective international students using short "
            "Reddit snippets. Common nicknames refer to the university itself. "
            f"Keep output very short. {_WEAK_EVIDENCE} {_JSON_ONLY}"
        ),
        user_prompt=f"""{header}

Reddit snippets (title + snippet):
{_dump(snippets)}

Shape:
{{"name": string, "rating": 1-10, "summary": "1-2 sentences", "pros": [string, string], "cons": [string, string], "evidenceStrength": "one short phrase"}}
Include the country in "name" only if a country was given.""",
        context={"name": name, "country": country, "reddit_snippets": snippets},
    )


def profile_match_request(profile: dict[str, Any]) -> SynthesisRequest:
    def show(key: str) -> str:
        value = profile.get(key)
        return str(value) if value not in (None, "") else "N/A"

    return SynthesisRequest(
        operation="profile_match",
        system_prompt=(
            "You are an international admissions advisor. Recommend realistic, reasonably "
            "reputable universities for the given student, grouped as safe, moderate and "
            f"ambitious. {_JSON_ONLY}"
        ),
        user_prompt=f"""Student profile:
- CGPA: {show("cgpa")}
- Degree / background: {show("degree")}
- IELTS (or equivalent): {show("ielts")}
- Budget: {show("budget")}
- Country preference: {show("countryPreference")}
- Needs scholarship: {"Yes" if profile.get("needScholarship") else "No"}
- Wants PR-friendly country: {"Yes" if profile.get("wantPr") else "No"}

Suggest 3-5 English-taught universities per bucket that fit the budget, scholarship,
PR and country preferences.

Shape:
{{"safe": {{"universities": [{{"name": string, "country": string, "city": string (optional), "reason": "1-2 sentences"}}]}},
 "moderate": {{"universities": [...]}},
 "ambitious": {{"universities": [...]}}}}""",
        context={"profile": profile},
    )


def budget_info_request(
    location: str,
    living_cost_threads: list[dict[str, Any]],
) -> SynthesisRequest:
    return SynthesisRequest(
        operation="budget_info",
        system_prompt=(
            "You summarise approximate costs for international students. Use the Reddit "
            "threads mainly for monthly living costs and lifestyle. For visa fees, insurance "
            "and flights use general knowledge and warn that figures must be checked on "
            "official websites. Never claim to have browsed any website. "
            f"{_WEAK_EVIDENCE} {_JSON_ONLY}"
        ),
        user_prompt=f"""Location: {location}

Reddit living-cost threads (post + top comments):
{_dump(living_cost_threads)}

Cover visa and mandatory fees, pre-arrival costs outside tuition, monthly living
ranges (local currency and USD) with cost drivers, part-time work limits and wages,
and a clear disclaimer that all numbers are approximate.

Shape:
{{"location": string,
 "visa": {{"feeRangeLocal": string, "feeRangeUsd": string, "insuranceOrHealthCharge": string, "notes": string}},
 "preArrival": {{"accommodationDeposit": string, "flightRangeUsd": string, "otherUpfrontCosts": string}},
 "living": {{"monthlyRangeLocal": string, "monthlyRangeUsd": string, "drivers": [string], "redditSummary": string, "evidenceStrength": string}},
 "partTime": {{"maxHoursPerWeekTerm": string, "maxHoursPerWeekVacation": string, "hourlyRangeLocal": string, "hourlyRangeUsd": string, "notes": string}},
 "disclaimer": string}}""",
        context={"location": location, "living_cost_threads": living_cost_threads},
    )


def overall_insight_request(
    university: str,
    country: str,
    university_threads: list[dict[str, Any]],
    living_cost_threads: list[dict[str, Any]],
) -> SynthesisRequest:
    return SynthesisRequest(
        operation="overall_insight",
        system_prompt=(
            "You advise international applicants in crisp phrases, not paragraphs. Cover "
            "yearly all-in cost ballparks in INR, USD and EUR, placements and ROI, an "
            "acceptance-rate estimate (note it varies by program and is unofficial), and "
            f"the overall student mood. {_WEAK_EVIDENCE} {_JSON_ONLY}"
        ),
        user_prompt=f"""University: {university}
Country: {country}

Reddit threads about the university (post + comments):
{_dump(university_threads)}

Reddit threads about student living costs in the country:
{_dump(living_cost_threads)}

Shape:
{{"university": string, "country": string,
 "isWorthItVerdict": "one short line", "reviewMood": "one short line",
 "yearlyCostInr": string, "yearlyCostUsd": string, "yearlyCostEur": string,
 "acceptanceRate": "1-2 lines", "difficultyLevel": "one line",
 "quickNotes": ["3-4 very short notes"],
 "similarUniversities": [{{"name": string, "country": string}}]}}
List 3-5 similar universities by prestige, focus or location, using full names.""",
        context={
            "university": university,
            "country": country,
            "university_threads": university_threads,
            "living_cost_threads": living_cost_threads,
        },
    )


def required_documents_request(country: str) -> SynthesisRequest:
    return SynthesisRequest(
        operation="required_documents",
        system_prompt=(
            "You are an expert on international student visa requirements. List the "
            "documents a student visa application needs, including common items (transcripts, "
            "language scores, financial proof, passport, photos) and country-specific ones. "
            f"{_JSON_ONLY}"
        ),
        user_prompt=f"""Country: {country}

Give a 2-3 sentence summary, a full checklist with short descriptions, the same
documents grouped by category (Academic, Financial, Identity, Health, Other), accepted
formats, and important country-specific notes.

Shape:
{{"country": "{country}", "summary": string,
 "documents": [{{"name": string, "description": string, "notes": string (optional)}}],
 "categories": {{"<category>": [{{"name": string, "description": string}}]}},
 "importantNotes": [string]}}""",
        temperature=0.3,
        context={"country": country},
    )


COMPARISON_CRITERIA = (
    "Academic Quality & Reputation",
    "Student Life & Campus Experience",
    "Career Outcomes & Job Prospects",
    "Value for Money",
)


def compare_universities_request(
    universities: list[str],
    snippets_by_university: list[list[dict[str, Any]]],
) -> SynthesisRequest:
    lines = []
    for idx, (name, snippets) in enumerate(zip(universities, snippets_by_university), start=1):
        text = " | ".join(f'"{s.get("title", "")}" {(s.get("snippet") or "")[:180]}' for s in snippets)
        lines.append(f"{idx}. {name}: {text or 'No Reddit data'}")
    criteria = " ".join(f"{i}) {c}" for i, c in enumerate(COMPARISON_CRITERIA, start=1))

    return SynthesisRequest(
        operation="compare_universities",
        system_prompt=(
            "Compare universities using Reddit snippets and general knowledge. Use exactly "
            f"one short sentence per description. {_WEAK_EVIDENCE} {_JSON_ONLY}"
        ),
        user_prompt=f"""Compare these {len(universities)} universities:

{chr(10).join(lines)}

Criteria: {criteria}

For each university and criterion give a 1-10 rating and one sentence, then a
one-sentence summary and two short insights.

Shape:
{{"comparison": [{{"name": string, "points": [{{"rating": number, "description": string}}]}}],
 "comparisonPoints": [{{"name": string}}],
 "summary": string,
 "insights": [string, string]}}""",
        context={
            "universities": universities,
            "reddit_snippets": snippets_by_university,
        },
    )
