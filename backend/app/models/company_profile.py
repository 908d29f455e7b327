"""Company profile data models."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field


class CompanyProfile(BaseModel):
    """
    Canonical company intelligence record.

    String fields use ``None`` when no value is known. List fields are
    trimmed, free of empty entries and deduplicated case-insensitively.
    Instances are built through ``normalize_profile`` so AI output and
    client edits get the same sanitization.
    """

    company_name: Optional[str] = Field(None, description="Company name")
    company_description: Optional[str] = Field(
        None, description="Short plain-language company description"
    )
    service_lines: list[str] = Field(
        default_factory=list, description="Products / service lines offered"
    )
    tier1_keywords: list[str] = Field(
        default_factory=list, description="Primary keywords describing the company"
    )
    tier2_keywords: list[str] = Field(
        default_factory=list, description="Secondary / long-tail keywords"
    )
    emails: list[str] = Field(
        default_factory=list, description="Contact emails found on the site"
    )
    poc: Optional[str] = Field(None, description="Point of contact")


class StoredProfile(BaseModel):
    """A ``CompanyProfile`` persisted under its normalized URL."""

    id: str
    url: str = Field(..., description="URL as submitted by the user")
    normalized_url: str = Field(..., description="Canonical URL, unique per profile")
    profile: CompanyProfile
    created_at: datetime
    updated_at: datetime


# =============================================================================
# API request / response models
# =============================================================================


class AnalyzeRequest(BaseModel):
    """Request body for ``POST /api/analyze``."""

    url: Optional[Any] = None


class UpdateProfileRequest(BaseModel):
    """Request body for ``PUT /api/profiles/{id}``.

    ``profile`` is kept loosely typed: it goes through ``normalize_profile``
    rather than pydantic validation.
    """

    url: Optional[Any] = None
    profile: Optional[Any] = None


class ProfileSummary(BaseModel):
    """Stored profile as listed by ``GET /api/profiles``."""

    id: str
    url: str
    normalized_url: str
    profile: CompanyProfile
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record: StoredProfile, **extra: Any):
        return cls(
            id=record.id,
            url=record.url,
            normalized_url=record.normalized_url,
            profile=record.profile,
            created_at=record.created_at,
            updated_at=record.updated_at,
            **extra,
        )


class ProfileResponse(ProfileSummary):
    """Single profile plus whether it was served from the URL cache."""

    cached: bool


class ProfileListResponse(BaseModel):
    """Recent profiles, newest first."""

    items: list[ProfileSummary] = Field(default_factory=list)
