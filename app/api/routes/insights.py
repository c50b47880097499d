"""Insight API endpoints.

Every endpoint validates its body, serves a cached response when one
exists, and otherwise gathers Reddit evidence and runs one completion.
Responses are plain JSON objects; cached ones carry ``cachedAt``.
"""

from typing import Any

from fastapi import APIRouter, Depends

from app.api.deps import Orchestrator, check_api_rate_limit
from app.api.schemas import (
    BudgetInfoRequest,
    CompareUniversitiesRequest,
    ErrorResponse,
    OverallInsightRequest,
    ProfileMatchRequest,
    RequiredDocumentsRequest,
    UniversityScoreRequest,
)

router = APIRouter(
    prefix="/api",
    tags=["Insights"],
    dependencies=[Depends(check_api_rate_limit)],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
        500: {"model": ErrorResponse, "description": "Synthesis or parse failure"},
    },
)


@router.post("/university-score", summary="Score a university")
async def university_score(
    orchestrator: Orchestrator,
    body: UniversityScoreRequest | None = None,
) -> dict[str, Any]:
    """Overall score, pros and cons from recent student discussions."""
    body = body or UniversityScoreRequest()
    return await orchestrator.university_score(body.name, body.country)


@router.post("/profile-match", summary="Match universities to a student profile")
async def profile_match(
    orchestrator: Orchestrator,
    body: ProfileMatchRequest | None = None,
) -> dict[str, Any]:
    """Safe, moderate and ambitious university suggestions."""
    body = body or ProfileMatchRequest()
    return await orchestrator.profile_match(body.to_profile())


@router.post("/budget-info", summary="Study and living cost overview")
async def budget_info(
    orchestrator: Orchestrator,
    body: BudgetInfoRequest | None = None,
) -> dict[str, Any]:
    """Visa, pre-arrival, living and part-time figures for a country or city."""
    body = body or BudgetInfoRequest()
    return await orchestrator.budget_info(body.country, body.city)


@router.post("/overall-insight", summary="One-look university verdict")
async def overall_insight(
    orchestrator: Orchestrator,
    body: OverallInsightRequest | None = None,
) -> dict[str, Any]:
    """Verdict, quick notes and similar universities."""
    body = body or OverallInsightRequest()
    return await orchestrator.overall_insight(body.university, body.country)


@router.post("/required-documents", summary="Student visa document checklist")
async def required_documents(
    orchestrator: Orchestrator,
    body: RequiredDocumentsRequest | None = None,
) -> dict[str, Any]:
    body = body or RequiredDocumentsRequest()
    return await orchestrator.required_documents(body.country)


@router.post("/compare-universities", summary="Compare 2-3 universities")
async def compare_universities(
    orchestrator: Orchestrator,
    body: CompareUniversitiesRequest | None = None,
) -> dict[str, Any]:
    """Side-by-side comparison across fixed criteria."""
    body = body or CompareUniversitiesRequest()
    return await orchestrator.compare_universities(body.universities)
