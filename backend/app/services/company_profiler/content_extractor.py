"""Pure-Python HTML condenser.

No LLM calls. Uses regex to drop script/style blocks and squeeze
whitespace so the page fits the extraction prompt budget.
"""

import re

from app.services.company_profiler.constants import MAX_CONTENT_LENGTH

_SCRIPT_RE = re.compile(r"<script[\s\S]*?</script>", re.IGNORECASE)
_STYLE_RE = re.compile(r"<style[\s\S]*?</style>", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


class ContentExtractor:
    """Condenses raw HTML into a bounded prompt payload."""

    def __init__(self, max_length: int = MAX_CONTENT_LENGTH) -> None:
        self.max_length = max_length

    def condense(self, html: str) -> str:
        """Strip script/style blocks, collapse whitespace and truncate."""
        text = _SCRIPT_RE.sub(" ", html)
        text = _STYLE_RE.sub(" ", text)
        text = _WHITESPACE_RE.sub(" ", text)
        return text[: self.max_length]
