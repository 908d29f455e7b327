"""Canonicalize user-entered website URLs into stable cache keys.

Query strings and fragments are dropped: they rarely identify a company,
and keeping them would let ``?utm_source=...`` variants bypass the cache.
Beyond that the output matches what a browser's URL parser produces:
backslashes read as slashes, dot segments resolved, hosts percent-decoded
and punycoded.
"""

import logging
import re
from urllib.parse import quote, unquote, urlsplit, urlunsplit

from app.errors import InvalidURLError

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_DEFAULT_PORTS = {"http": 80, "https": 443}
# Characters a URL host may never contain (WHATWG forbidden host code points)
_FORBIDDEN_HOST_CHARS = set(" \t\n\r#%/:<>?@[\\]^|")
_PATH_SAFE = "/%:@!$&'()*+,;=-._~"


def normalize_url(value: str) -> str:
    """Return the canonical form of *value*.

    Raises:
        InvalidURLError: If *value* cannot be parsed as an http(s) URL.
    """
    # http(s) URLs treat "\" as a path separator
    trimmed = value.strip().replace("\\", "/")
    prefixed = trimmed if _SCHEME_RE.match(trimmed) else f"https://{trimmed}"

    try:
        parts = urlsplit(prefixed)
        port = parts.port
    except ValueError as e:
        raise InvalidURLError(f"Invalid URL supplied: {value}", str(e)) from e

    host = _encode_host(parts.hostname, value)

    scheme = parts.scheme.lower()
    netloc = host
    if parts.username or parts.password:
        userinfo = parts.username or ""
        if parts.password:
            userinfo = f"{userinfo}:{parts.password}"
        netloc = f"{userinfo}@{host}"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        netloc = f"{netloc}:{port}"

    path = quote(_remove_dot_segments(parts.path), safe=_PATH_SAFE) or "/"

    normalized = urlunsplit((scheme, netloc, path, "", ""))
    logger.debug(f"Normalized {value!r} to {normalized}")
    return normalized


def _remove_dot_segments(path: str) -> str:
    """Resolve ``.`` and ``..`` segments (RFC 3986 section 5.2.4)."""
    if not path:
        return path

    output: list[str] = []
    segments = path.split("/")[1:]
    for index, segment in enumerate(segments):
        is_last = index == len(segments) - 1
        if segment == ".":
            if is_last:
                output.append("")
        elif segment == "..":
            if output:
                output.pop()
            if is_last:
                output.append("")
        else:
            output.append(segment)
    return "/" + "/".join(output)


def _encode_host(hostname: str | None, original: str) -> str:
    if not hostname:
        raise InvalidURLError(f"Invalid URL supplied: {original}", "missing host")

    if hostname.startswith("[") or ":" in hostname:
        # IPv6 literal; urlsplit already validated the brackets
        return f"[{hostname.strip('[]')}]"

    hostname = unquote(hostname)
    if not hostname or any(ch in _FORBIDDEN_HOST_CHARS for ch in hostname):
        raise InvalidURLError(
            f"Invalid URL supplied: {original}", "host contains forbidden characters"
        )

    try:
        return hostname.encode("idna").decode("ascii").lower()
    except UnicodeError as e:
        raise InvalidURLError(f"Invalid URL supplied: {original}", str(e)) from e
