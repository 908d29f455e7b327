"""Shared fixtures for the Company Profiler test suite."""

import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

# Settings require Supabase credentials; tests never talk to Supabase.
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")

from app.models.company_profile import CompanyProfile, StoredProfile  # noqa: E402
from app.services.company_profiler.constants import DEFAULT_LIST_LIMIT  # noqa: E402
from app.services.company_profiler.storage import UniqueViolationError  # noqa: E402


class FakeProfileStore:
    """In-memory ``ProfileStore`` enforcing unique ``normalized_url``."""

    def __init__(self) -> None:
        self.rows: dict[str, StoredProfile] = {}
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.insert_calls = 0
        self.update_calls = 0

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _owner_of(self, normalized_url: str) -> Optional[StoredProfile]:
        for row in self.rows.values():
            if row.normalized_url == normalized_url:
                return row
        return None

    async def find_by_normalized_url(self, normalized_url: str) -> Optional[StoredProfile]:
        return self._owner_of(normalized_url)

    async def find_by_id(self, profile_id: str) -> Optional[StoredProfile]:
        return self.rows.get(profile_id)

    async def list_recent(self, limit: int = DEFAULT_LIST_LIMIT) -> list[StoredProfile]:
        ordered = sorted(self.rows.values(), key=lambda r: r.created_at, reverse=True)
        return ordered[:limit]

    async def insert(
        self, url: str, normalized_url: str, profile: CompanyProfile
    ) -> StoredProfile:
        self.insert_calls += 1
        if self._owner_of(normalized_url):
            raise UniqueViolationError(normalized_url)
        now = self._tick()
        record = StoredProfile(
            id=str(uuid.uuid4()),
            url=url,
            normalized_url=normalized_url,
            profile=profile,
            created_at=now,
            updated_at=now,
        )
        self.rows[record.id] = record
        return record

    async def update(
        self,
        profile_id: str,
        url: str,
        normalized_url: str,
        profile: CompanyProfile,
    ) -> Optional[StoredProfile]:
        self.update_calls += 1
        existing = self.rows.get(profile_id)
        if existing is None:
            return None
        owner = self._owner_of(normalized_url)
        if owner is not None and owner.id != profile_id:
            raise UniqueViolationError(normalized_url)
        record = existing.model_copy(
            update={
                "url": url,
                "normalized_url": normalized_url,
                "profile": profile,
                "updated_at": self._tick(),
            }
        )
        self.rows[profile_id] = record
        return record


@pytest.fixture
def fake_store() -> FakeProfileStore:
    return FakeProfileStore()


@pytest.fixture
def sample_profile() -> CompanyProfile:
    return CompanyProfile(
        company_name="Acme Corp",
        company_description="Acme builds industrial widgets.",
        service_lines=["Widgets", "Consulting"],
        tier1_keywords=["widgets"],
        tier2_keywords=["industrial automation"],
        emails=["hello@acme.example"],
        poc="Jane Doe",
    )
