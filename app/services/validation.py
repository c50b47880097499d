"""Request validation rules.

Pure and synchronous: nothing here touches the network or the cache.
Each rule raises ``InvalidInput`` carrying the message shown to the user.
"""

from typing import Any

from app.core.exceptions import InvalidInput

MIN_COMPARE = 2
MAX_COMPARE = 3


def optional_text(value: Any) -> str:
    """Trimmed string, or ``""`` for anything that is not a string."""
    return value.strip() if isinstance(value, str) else ""


def require_text(value: Any, message: str) -> str:
    """Return the trimmed value, or raise when it is missing or blank."""
    text = optional_text(value)
    if not text:
        raise InvalidInput(message)
    return text


def validate_university_list(values: Any) -> list[str]:
    """Accept 2-3 universities; blanks are dropped before the minimum check."""
    if not isinstance(values, list) or len(values) < MIN_COMPARE:
        raise InvalidInput("At least 2 universities are required")

    if len(values) > MAX_COMPARE:
        raise InvalidInput("Maximum 3 universities can be compared")

    names = [text for text in map(optional_text, values) if text]
    if len(names) < MIN_COMPARE:
        raise InvalidInput("At least 2 valid university names are required")

    return names


def validate_university_score(name: Any, country: Any) -> tuple[str, str]:
    return require_text(name, "Missing university name"), optional_text(country)


def validate_budget_info(country: Any, city: Any) -> tuple[str, str]:
    return require_text(country, "Country is required"), optional_text(city)


def validate_overall_insight(university: Any, country: Any) -> tuple[str, str]:
    message = "University and country are required"
    return require_text(university, message), require_text(country, message)


def validate_required_documents(country: Any) -> str:
    return require_text(country, "Country is required")


def validate_profile(profile: dict[str, Any]) -> dict[str, Any]:
    """Profile fields are all optional; text is trimmed and flags coerced."""
    cleaned: dict[str, Any] = {}
    for key in ("cgpa", "degree", "ielts", "budget", "countryPreference"):
        value = profile.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        cleaned[key] = optional_text(value)
    cleaned["needScholarship"] = bool(profile.get("needScholarship"))
    cleaned["wantPr"] = bool(profile.get("wantPr"))
    return cleaned
