"""Company profiler package: website → AI-extracted company profile.

Re-exports the public API so consumers can use::

    from app.services.company_profiler import CompanyProfileAnalyzer, get_profile_analyzer
"""

from app.services.company_profiler.analyzer import (
    AnalyzeResult,
    CompanyProfileAnalyzer,
    get_profile_analyzer,
    reset_profile_analyzer,
)

__all__ = [
    "AnalyzeResult",
    "CompanyProfileAnalyzer",
    "get_profile_analyzer",
    "reset_profile_analyzer",
]
