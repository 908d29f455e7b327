"""Profile normalization: the single gate for well-formed profiles.

``normalize_profile`` is applied to both LLM output and user edits, so no
field reaches storage without trimming and deduplication.
``parse_ai_profile`` wraps it for raw completion text and reports the
reason when the text cannot become a profile.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from app.models.company_profile import CompanyProfile
from app.services.company_profiler.coercion import to_list, to_nullable_string
from app.services.company_profiler.llm_utils import extract_json_payload

STRING_FIELDS = ("company_name", "company_description", "poc")
LIST_FIELDS = ("service_lines", "tier1_keywords", "tier2_keywords", "emails")
# Older prompt versions asked for a single "service_line" value
LEGACY_SERVICE_LINE_KEY = "service_line"


def normalize_profile(raw: Any) -> Optional[CompanyProfile]:
    """Project *raw* onto the canonical profile shape.

    Returns ``None`` when *raw* is not a mapping. Unknown keys are ignored.
    """
    if not isinstance(raw, Mapping):
        return None

    values: dict[str, Any] = {
        field: to_nullable_string(raw.get(field)) for field in STRING_FIELDS
    }
    for field in LIST_FIELDS:
        values[field] = to_list(raw.get(field))

    if "service_lines" not in raw or raw.get("service_lines") is None:
        values["service_lines"] = to_list(raw.get(LEGACY_SERVICE_LINE_KEY))

    return CompanyProfile(**values)


# =============================================================================
# Parsing raw LLM completions
# =============================================================================


@dataclass(frozen=True)
class Unparseable:
    """No JSON value could be decoded from the completion."""

    reason: str


@dataclass(frozen=True)
class WrongShape:
    """JSON decoded, but it is not an object."""

    received_type: str


@dataclass(frozen=True)
class Valid:
    profile: CompanyProfile


ProfileParse = Union[Unparseable, WrongShape, Valid]


def parse_ai_profile(text: str) -> ProfileParse:
    """Decode and normalize a completion into a ``ProfileParse`` result."""
    try:
        data = extract_json_payload(text)
    except json.JSONDecodeError as e:
        return Unparseable(reason=str(e))

    profile = normalize_profile(data)
    if profile is None:
        return WrongShape(received_type=type(data).__name__)
    return Valid(profile=profile)
