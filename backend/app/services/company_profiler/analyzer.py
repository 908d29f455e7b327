"""Analyze-or-reuse orchestrator for company profiles.

Coordinates collaborators (store lookup → fetch → LLM extraction →
persist) without containing any fetching, prompting or SQL itself.
Repeat analysis of a known URL is served from the store and never spends
another fetch or LLM call.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional

from app.config import get_settings
from app.errors import (
    AiMalformedError,
    AiUnavailableError,
    AiUnusableError,
    DuplicateUrlError,
    ProfileNotFoundError,
)
from app.models.company_profile import CompanyProfile, StoredProfile
from app.services.company_profiler.constants import DEFAULT_LIST_LIMIT
from app.services.company_profiler.content_extractor import ContentExtractor
from app.services.company_profiler.page_fetcher import PageFetcher
from app.services.company_profiler.profile_extractor import (
    ProfileExtractor,
    create_profile_extractor,
)
from app.services.company_profiler.profile_normalizer import (
    Unparseable,
    WrongShape,
    normalize_profile,
    parse_ai_profile,
)
from app.services.company_profiler.storage import ProfileStore, UniqueViolationError
from app.services.company_profiler.url_normalizer import normalize_url

logger = logging.getLogger(__name__)

# Singleton state
_analyzer: Optional["CompanyProfileAnalyzer"] = None
_lock = asyncio.Lock()


@dataclass
class AnalyzeResult:
    profile: CompanyProfile
    cached: bool
    record: StoredProfile


class CompanyProfileAnalyzer:
    """Turns a website URL into a stored ``CompanyProfile``."""

    def __init__(
        self,
        store: ProfileStore,
        fetcher: PageFetcher,
        extractor: ProfileExtractor,
        *,
        content_extractor: Optional[ContentExtractor] = None,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.extractor = extractor
        self.content_extractor = content_extractor or ContentExtractor()

    async def analyze(self, url: str) -> AnalyzeResult:
        """Return the stored profile for *url*, creating it on a cache miss.

        Raises:
            InvalidURLError: *url* cannot be parsed.
            UpstreamFetchError: The website could not be fetched.
            AiUnavailableError / AiMalformedError / AiUnusableError:
                The LLM produced no usable profile.
            DuplicateUrlError: A concurrent analyze stored the URL first.
        """
        normalized_url = normalize_url(url)
        original_url = url.strip()

        existing = await self.store.find_by_normalized_url(normalized_url)
        if existing:
            logger.info(f"Cache hit for {normalized_url} (profile {existing.id})")
            return AnalyzeResult(profile=existing.profile, cached=True, record=existing)

        logger.info(f"Cache miss for {normalized_url}; fetching website")
        html = await self.fetcher.fetch(normalized_url)
        content = self.content_extractor.condense(html)

        profile = await self._extract_profile(normalized_url, content)

        try:
            saved = await self.store.insert(original_url, normalized_url, profile)
        except UniqueViolationError as e:
            logger.warning(f"Concurrent analyze already stored {normalized_url}")
            raise DuplicateUrlError(
                "Another profile already exists for this website.",
                "The website was analyzed concurrently; fetch the profile list to see it.",
            ) from e

        return AnalyzeResult(profile=profile, cached=False, record=saved)

    async def _extract_profile(self, url: str, content: str) -> CompanyProfile:
        completion = await self.extractor.complete(url, content)
        if not completion:
            logger.error(f"LLM returned an empty response for {url}")
            raise AiUnavailableError("The AI provider returned an empty response.")

        parsed = parse_ai_profile(completion)
        if isinstance(parsed, Unparseable):
            logger.error(f"LLM response for {url} is not JSON: {parsed.reason}")
            raise AiMalformedError("Failed to parse the AI response as JSON.")
        if isinstance(parsed, WrongShape):
            logger.error(f"LLM response for {url} is a JSON {parsed.received_type}")
            raise AiUnusableError(
                "Failed to parse the AI response into the expected structure."
            )
        return parsed.profile

    async def get(self, profile_id: str) -> StoredProfile:
        record = await self.store.find_by_id(profile_id)
        if not record:
            raise ProfileNotFoundError("Profile not found.")
        return record

    async def list_recent(self, limit: int = DEFAULT_LIST_LIMIT) -> list[StoredProfile]:
        return await self.store.list_recent(limit)

    async def update(
        self, profile_id: str, url: Optional[str], raw_profile: Any
    ) -> StoredProfile:
        """Apply a user edit to an existing profile.

        A blank *url* keeps the stored one. An unusable *raw_profile* keeps
        the stored payload while still applying the URL change.

        Raises:
            ProfileNotFoundError: No profile has *profile_id*.
            InvalidURLError: The resulting URL cannot be parsed.
            DuplicateUrlError: Another profile owns the new normalized URL.
        """
        existing = await self.store.find_by_id(profile_id)
        if not existing:
            raise ProfileNotFoundError("Profile not found.")

        next_url = url.strip() if isinstance(url, str) and url.strip() else existing.url
        normalized_url = normalize_url(next_url)
        profile = normalize_profile(raw_profile) or existing.profile

        try:
            updated = await self.store.update(
                profile_id, next_url, normalized_url, profile
            )
        except UniqueViolationError as e:
            logger.warning(
                f"Update of profile {profile_id} conflicts on {normalized_url}"
            )
            raise DuplicateUrlError(
                "Another profile already exists for this website."
            ) from e

        if not updated:
            # Row vanished between lookup and write
            raise ProfileNotFoundError("Profile not found.")

        logger.info(f"Updated profile {profile_id}")
        return updated


# =====================================================================
# Singleton factory (thread-safe via asyncio.Lock)
# =====================================================================


async def get_profile_analyzer() -> CompanyProfileAnalyzer:
    """Get or create the singleton ``CompanyProfileAnalyzer``."""
    global _analyzer
    if _analyzer is not None:
        return _analyzer

    async with _lock:
        # Double-checked locking
        if _analyzer is not None:
            return _analyzer

        settings = get_settings()
        extractor = create_profile_extractor(settings)

        from app.db.supabase import get_async_supabase_client_async

        supabase = await get_async_supabase_client_async()

        _analyzer = CompanyProfileAnalyzer(
            store=ProfileStore(supabase),
            fetcher=PageFetcher(
                user_agent=settings.fetch_user_agent,
                timeout=settings.fetch_timeout_seconds,
            ),
            extractor=extractor,
        )

    return _analyzer


def reset_profile_analyzer() -> None:
    """Reset analyzer for testing."""
    global _analyzer
    _analyzer = None
