"""Named constants for the company profiler package.

Centralizes the tunable limits so they can be adjusted from one place.
"""

# ---------------------------------------------------------------------------
# Content limits (characters)
# ---------------------------------------------------------------------------
MAX_CONTENT_LENGTH = 15_000  # Condensed page text sent to the LLM

# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------
LIST_DELIMITERS = (",", ";", "\n", "•")  # comma, semicolon, newline, bullet

# ---------------------------------------------------------------------------
# LLM
# ---------------------------------------------------------------------------
LLM_RETRY_ATTEMPTS = 3

# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------
PROFILES_TABLE = "company_profiles"
PROFILE_COLUMNS = "id, url, normalized_url, payload, created_at, updated_at"
UNIQUE_VIOLATION_CODE = "23505"  # Postgres SQLSTATE unique_violation
DEFAULT_LIST_LIMIT = 50
