from app.services.company_profiler import (
    AnalyzeResult,
    CompanyProfileAnalyzer,
    get_profile_analyzer,
    reset_profile_analyzer,
)

__all__ = [
    # Company profiler
    "AnalyzeResult",
    "CompanyProfileAnalyzer",
    "get_profile_analyzer",
    "reset_profile_analyzer",
]
