"""Completion output cleanup and shape coercion."""

import json
import re
from typing import Any

from app.core.exceptions import ParseFailure
from app.core.logging import get_logger

logger = get_logger(__name__)

_LEADING_FENCE = re.compile(r"^\s*```[\w-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")

PROFILE_BUCKETS = ("safe", "moderate", "ambitious")


def strip_code_fences(text: str) -> str:
    """Remove a wrapping Markdown code fence (and its language tag)."""
    cleaned = _LEADING_FENCE.sub("", text or "", count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_completion(text: str | None) -> dict[str, Any]:
    """Parse completion text as a JSON object.

    Raises:
        ParseFailure: If the cleaned text is not a JSON object
    """
    cleaned = strip_code_fences(text or "") or "{}"
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Completion output is not JSON", error=str(e), content=cleaned[:500])
        raise ParseFailure() from e

    if not isinstance(parsed, dict):
        logger.error("Completion output is not a JSON object", kind=type(parsed).__name__)
        raise ParseFailure("Completion output is not a JSON object")

    return parsed


def ensure_list(data: dict[str, Any], *fields: str) -> dict[str, Any]:
    """Replace absent or non-list fields with empty lists, in place."""
    for name in fields:
        if not isinstance(data.get(name), list):
            data[name] = []
    return data


def _clean_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_similar_universities(raw: Any, default_country: str) -> list[dict[str, str]]:
    """Coerce to ``[{name, country}]``; entries without a usable name are dropped."""
    if not isinstance(raw, list):
        return []

    result = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            continue
        name = item["name"].strip()
        if not name:
            continue
        result.append({"name": name, "country": _clean_str(item.get("country")) or default_country})
    return result


def normalize_categories(raw: Any) -> dict[str, list[Any]]:
    if not isinstance(raw, dict):
        return {}
    return {str(k): (v if isinstance(v, list) else []) for k, v in raw.items()}


def normalize_profile_buckets(data: dict[str, Any]) -> dict[str, Any]:
    """Each bucket becomes ``{"universities": [...]}`` with named entries only."""
    for bucket in PROFILE_BUCKETS:
        section = data.get(bucket)
        raw = section.get("universities") if isinstance(section, dict) else None
        universities = []
        for item in raw if isinstance(raw, list) else []:
            if not isinstance(item, dict) or not _clean_str(item.get("name")):
                continue
            universities.append({**item, "name": _clean_str(item["name"])})
        data[bucket] = {**(section if isinstance(section, dict) else {}), "universities": universities}
    return data


def normalize_university_score(data: dict[str, Any]) -> dict[str, Any]:
    return ensure_list(data, "pros", "cons")


def normalize_budget_info(data: dict[str, Any]) -> dict[str, Any]:
    living = data.get("living")
    if isinstance(living, dict):
        ensure_list(living, "drivers")
    return data


def normalize_overall_insight(data: dict[str, Any], country: str) -> dict[str, Any]:
    ensure_list(data, "quickNotes")
    data["similarUniversities"] = normalize_similar_universities(
        data.get("similarUniversities"), country
    )
    return data


def normalize_required_documents(data: dict[str, Any]) -> dict[str, Any]:
    ensure_list(data, "documents", "importantNotes")
    data["categories"] = normalize_categories(data.get("categories"))
    return data


def normalize_comparison(data: dict[str, Any]) -> dict[str, Any]:
    ensure_list(data, "comparison", "comparisonPoints", "insights")
    for entry in data["comparison"]:
        if isinstance(entry, dict):
            ensure_list(entry, "points")
    return data
