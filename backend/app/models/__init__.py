from app.models.company_profile import (
    AnalyzeRequest,
    CompanyProfile,
    ProfileListResponse,
    ProfileResponse,
    ProfileSummary,
    StoredProfile,
    UpdateProfileRequest,
)

__all__ = [
    # Domain models
    "CompanyProfile",
    "StoredProfile",
    # API models
    "AnalyzeRequest",
    "UpdateProfileRequest",
    "ProfileSummary",
    "ProfileResponse",
    "ProfileListResponse",
]
