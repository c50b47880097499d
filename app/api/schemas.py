"""Pydantic schemas for API requests and responses.

Request bodies are deliberately lenient: every field is optional so that
missing or blank values reach the validation layer and produce a 400 with
a specific reason.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================
# Insight Request Schemas
# ============================================================

class UniversityScoreRequest(BaseModel):
    """Schema for scoring a single university."""

    name: str | None = None
    country: str | None = None


class ProfileMatchRequest(BaseModel):
    """Schema for profile-based university matching."""

    cgpa: str | float | None = None
    degree: str | None = None
    ielts: str | float | None = None
    budget: str | float | None = None
    country_preference: str | None = Field(default=None, alias="countryPreference")
    need_scholarship: bool = Field(default=False, alias="needScholarship")
    want_pr: bool = Field(default=False, alias="wantPr")

    model_config = ConfigDict(populate_by_name=True)

    def to_profile(self) -> dict[str, Any]:
        """Profile dict keyed by the public (camelCase) field names."""
        return self.model_dump(by_alias=True)


class BudgetInfoRequest(BaseModel):
    """Schema for a country / city cost overview."""

    country: str | None = None
    city: str | None = None


class OverallInsightRequest(BaseModel):
    """Schema for the one-look university verdict."""

    university: str | None = None
    country: str | None = None


class RequiredDocumentsRequest(BaseModel):
    """Schema for the visa document checklist."""

    country: str | None = None


class CompareUniversitiesRequest(BaseModel):
    """Schema for comparing 2-3 universities."""

    universities: list[str | None] | None = None


# ============================================================
# Common Response Schemas
# ============================================================

class ErrorResponse(BaseModel):
    """Schema for error responses."""

    error: str = Field(..., json_schema_extra={"example": "Country is required"})


# ============================================================
# Health Check Schemas
# ============================================================

class ServiceHealth(BaseModel):
    """Schema for individual service health."""

    status: str = Field(..., pattern=r"^(healthy|unhealthy|degraded)$")
    latency_ms: float | None = None
    details: dict[str, Any] | None = None


class HealthResponse(BaseModel):
    """Schema for health check response."""

    status: str = Field(..., pattern=r"^(healthy|unhealthy|degraded)$")
    timestamp: datetime
    version: str
    services: dict[str, ServiceHealth]
