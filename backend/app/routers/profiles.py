"""Company profile router: analyze, list, view and edit endpoints."""

from fastapi import APIRouter, Depends

from app.config import get_settings
from app.errors import InvalidInputError
from app.models.company_profile import (
    AnalyzeRequest,
    ProfileListResponse,
    ProfileResponse,
    ProfileSummary,
    UpdateProfileRequest,
)
from app.services.company_profiler import CompanyProfileAnalyzer, get_profile_analyzer

router = APIRouter(prefix="/api", tags=["profiles"])


@router.post("/analyze")
async def analyze(
    request: AnalyzeRequest,
    analyzer: CompanyProfileAnalyzer = Depends(get_profile_analyzer),
) -> ProfileResponse:
    """Analyze a company website, or return the stored profile for it.

    ``cached`` is ``true`` when the normalized URL was already known and no
    fetch or LLM call was made.
    """
    if not isinstance(request.url, str) or not request.url.strip():
        raise InvalidInputError("Body must include a non-empty string 'url' field.")

    result = await analyzer.analyze(request.url)
    return ProfileResponse.from_record(result.record, cached=result.cached)


@router.get("/profiles")
async def list_profiles(
    analyzer: CompanyProfileAnalyzer = Depends(get_profile_analyzer),
) -> ProfileListResponse:
    """List recently analyzed profiles, newest first."""
    records = await analyzer.list_recent(get_settings().profile_history_limit)
    return ProfileListResponse(
        items=[ProfileSummary.from_record(record) for record in records]
    )


@router.get("/profiles/{profile_id}")
async def get_profile(
    profile_id: str,
    analyzer: CompanyProfileAnalyzer = Depends(get_profile_analyzer),
) -> ProfileSummary:
    record = await analyzer.get(profile_id)
    return ProfileSummary.from_record(record)


@router.put("/profiles/{profile_id}")
async def update_profile(
    profile_id: str,
    request: UpdateProfileRequest,
    analyzer: CompanyProfileAnalyzer = Depends(get_profile_analyzer),
) -> ProfileResponse:
    """Save user edits to a profile and optionally move it to a new URL."""
    if not isinstance(request.profile, dict):
        raise InvalidInputError("Body must include a 'profile' object.")

    url = request.url if isinstance(request.url, str) else None
    updated = await analyzer.update(profile_id, url, request.profile)
    return ProfileResponse.from_record(updated, cached=True)
