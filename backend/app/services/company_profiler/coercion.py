"""Coercion of loosely-typed AI/client values into canonical shapes.

Both helpers are total: any input produces a value, never an exception.
"""

import re
from typing import Any, Iterable, Optional

from app.services.company_profiler.constants import LIST_DELIMITERS

_SPLIT_RE = re.compile("[" + re.escape("".join(LIST_DELIMITERS)) + "]+")


def to_nullable_string(value: Any) -> Optional[str]:
    """Return the trimmed string, or ``None`` for non-strings and blanks."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def to_list(value: Any) -> list[str]:
    """Coerce *value* into an ordered, case-insensitively unique list.

    - ``None`` / ``""`` → ``[]``
    - list/tuple → each entry stringified and trimmed, blanks dropped
    - str → split on comma, semicolon, newline and bullet
    - anything else → ``[]``
    """
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        entries = [_stringify(entry).strip() for entry in value]
    elif isinstance(value, str):
        entries = [segment.strip() for segment in _SPLIT_RE.split(value)]
    else:
        return []

    return _dedupe(entries)


def _stringify(entry: Any) -> str:
    if entry is None:
        return ""
    if isinstance(entry, str):
        return entry
    if isinstance(entry, bool):
        # Match the JSON spelling the LLM produced
        return "true" if entry else "false"
    return str(entry)


def _dedupe(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if not value:
            continue
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result
