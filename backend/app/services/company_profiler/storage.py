"""Persistence layer for company profiles (Supabase ``company_profiles``).

The table is used as a JSON cache keyed by normalized URL. Uniqueness of
``normalized_url`` is enforced by the database; a violation is reported as
``UniqueViolationError`` so callers can turn it into a conflict.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import AsyncClient

from app.models.company_profile import CompanyProfile, StoredProfile
from app.services.company_profiler.constants import (
    DEFAULT_LIST_LIMIT,
    PROFILE_COLUMNS,
    PROFILES_TABLE,
    UNIQUE_VIOLATION_CODE,
)

logger = logging.getLogger(__name__)


class UniqueViolationError(Exception):
    """The write collided with an existing ``normalized_url``."""


def is_unique_violation(error: BaseException) -> bool:
    return isinstance(error, APIError) and str(error.code) == UNIQUE_VIOLATION_CODE


class ProfileStore:
    """Reads and writes ``StoredProfile`` rows."""

    def __init__(self, supabase: AsyncClient) -> None:
        self.supabase = supabase

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def find_by_normalized_url(self, normalized_url: str) -> Optional[StoredProfile]:
        response = await (
            self.supabase.table(PROFILES_TABLE)
            .select(PROFILE_COLUMNS)
            .eq("normalized_url", normalized_url)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _map_row(response.data[0])

    async def find_by_id(self, profile_id: str) -> Optional[StoredProfile]:
        if not _is_uuid(profile_id):
            return None

        response = await (
            self.supabase.table(PROFILES_TABLE)
            .select(PROFILE_COLUMNS)
            .eq("id", profile_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _map_row(response.data[0])

    async def list_recent(self, limit: int = DEFAULT_LIST_LIMIT) -> list[StoredProfile]:
        """Most recently created profiles first."""
        response = await (
            self.supabase.table(PROFILES_TABLE)
            .select(PROFILE_COLUMNS)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_map_row(row) for row in response.data or []]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(
        self, url: str, normalized_url: str, profile: CompanyProfile
    ) -> StoredProfile:
        """Create a profile row with a fresh id.

        Raises:
            UniqueViolationError: If *normalized_url* is already stored.
        """
        row = {
            "id": str(uuid.uuid4()),
            "url": url,
            "normalized_url": normalized_url,
            "payload": profile.model_dump(),
        }
        try:
            response = await self.supabase.table(PROFILES_TABLE).insert(row).execute()
        except APIError as e:
            if is_unique_violation(e):
                raise UniqueViolationError(normalized_url) from e
            raise

        logger.info(f"Stored profile {row['id']} for {normalized_url}")
        return _map_row(response.data[0])

    async def update(
        self,
        profile_id: str,
        url: str,
        normalized_url: str,
        profile: CompanyProfile,
    ) -> Optional[StoredProfile]:
        """Overwrite url, normalized_url and payload; bump ``updated_at``.

        Returns ``None`` if no row has *profile_id*.

        Raises:
            UniqueViolationError: If *normalized_url* belongs to another row.
        """
        if not _is_uuid(profile_id):
            return None

        changes = {
            "url": url,
            "normalized_url": normalized_url,
            "payload": profile.model_dump(),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            response = await (
                self.supabase.table(PROFILES_TABLE)
                .update(changes)
                .eq("id", profile_id)
                .execute()
            )
        except APIError as e:
            if is_unique_violation(e):
                raise UniqueViolationError(normalized_url) from e
            raise

        if not response.data:
            return None
        return _map_row(response.data[0])


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _map_row(row: dict[str, Any]) -> StoredProfile:
    """Convert a table row into a ``StoredProfile``.

    Stored payloads are trusted to be canonical; they are validated, not
    re-normalized.
    """
    return StoredProfile(
        id=str(row["id"]),
        url=row["url"],
        normalized_url=row["normalized_url"],
        profile=CompanyProfile.model_validate(row.get("payload") or {}),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
