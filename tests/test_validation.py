"""Tests for request validation rules."""

import pytest

from app.core.exceptions import InvalidInput
from app.services.validation import (
    validate_budget_info,
    validate_overall_insight,
    validate_profile,
    validate_required_documents,
    validate_university_list,
    validate_university_score,
)


class TestUniversityList:
    @pytest.mark.parametrize("values, message", [
        ([], "At least 2 universities are required"),
        (["A"], "At least 2 universities are required"),
        (None, "At least 2 universities are required"),
        ("A, B", "At least 2 universities are required"),
        (["A", "B", "C", "D"], "Maximum 3 universities can be compared"),
        (["A", "  "], "At least 2 valid university names are required"),
        (["A", None, ""], "At least 2 valid university names are required"),
    ], ids=["empty", "one", "none", "string", "four", "one-blank", "blank-and-none"])
    def test_rejected(self, values, message: str):
        with pytest.raises(InvalidInput) as exc_info:
            validate_university_list(values)
        assert exc_info.value.message == message
        assert exc_info.value.status_code == 400

    def test_accepts_two_and_trims(self):
        assert validate_university_list([" MIT ", "Stanford"]) == ["MIT", "Stanford"]

    def test_blank_dropped_when_two_remain(self):
        assert validate_university_list(["MIT", "", "ETH Zurich"]) == ["MIT", "ETH Zurich"]


class TestRequiredFields:
    def test_university_score_requires_name(self):
        with pytest.raises(InvalidInput, match="Missing university name"):
            validate_university_score("   ", "UK")

    def test_university_score_country_optional(self):
        assert validate_university_score(" Oxford ", None) == ("Oxford", "")

    @pytest.mark.parametrize("country", [None, "", "   ", 42])
    def test_budget_requires_country(self, country):
        with pytest.raises(InvalidInput, match="Country is required"):
            validate_budget_info(country, "Berlin")

    def test_budget_city_optional(self):
        assert validate_budget_info("Germany", None) == ("Germany", "")

    @pytest.mark.parametrize("university, country", [("", "UK"), ("Oxford", ""), (None, None)])
    def test_overall_requires_both(self, university, country):
        with pytest.raises(InvalidInput, match="University and country are required"):
            validate_overall_insight(university, country)

    def test_documents_require_country(self):
        with pytest.raises(InvalidInput, match="Country is required"):
            validate_required_documents(None)
        assert validate_required_documents(" Canada ") == "Canada"


class TestProfile:
    def test_numbers_become_strings_and_flags_coerce(self):
        cleaned = validate_profile({
            "cgpa": 8.5,
            "degree": " B.Tech CSE ",
            "ielts": "7",
            "budget": None,
            "countryPreference": "Germany",
            "needScholarship": 1,
        })
        assert cleaned == {
            "cgpa": "8.5",
            "degree": "B.Tech CSE",
            "ielts": "7",
            "budget": "",
            "countryPreference": "Germany",
            "needScholarship": True,
            "wantPr": False,
        }

    def test_empty_profile_is_valid(self):
        cleaned = validate_profile({})
        assert cleaned["cgpa"] == ""
        assert cleaned["wantPr"] is False
