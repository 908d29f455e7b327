"""LLM response helpers shared by the profile extractor and parser.

OpenAI JSON mode answers with bare JSON, while Anthropic models tend to
wrap it in markdown fences or add a preamble. ``extract_json_payload``
accepts all three forms.
"""

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def extract_json_payload(text: str) -> Any:
    """Decode the JSON value carried by an LLM completion.

    Tries, in order:

    1. The whole text (JSON mode output).
    2. The content of a ```json ... ``` fence.
    3. The outermost ``{...}`` span.

    Returns:
        The decoded value. It is not necessarily a dict.

    Raises:
        json.JSONDecodeError: If no candidate decodes.
    """
    stripped = text.strip()
    try:
        return json.loads(stripped)
    except json.JSONDecodeError as first_error:
        error = first_error

    fence_match = _FENCE_RE.search(stripped)
    if fence_match:
        try:
            return json.loads(fence_match.group(1))
        except json.JSONDecodeError as e:
            error = e

    object_match = _OBJECT_RE.search(stripped)
    if object_match:
        return json.loads(object_match.group(0))

    raise error
