"""Typed domain errors for the Company Profiler API.

Every failure the service anticipates is raised as a ``ProfilerError``
subclass carrying its HTTP status. ``app.main`` maps them to the JSON
error envelope ``{"error": ..., "details": ...}``.
"""

from typing import Optional


class ProfilerError(Exception):
    """Base class for errors that surface to API clients."""

    status_code: int = 500

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_body(self) -> dict:
        body: dict = {"error": self.message}
        if self.detail:
            body["details"] = self.detail
        return body


class InvalidInputError(ProfilerError):
    """Missing or malformed request data."""

    status_code = 400


class InvalidURLError(InvalidInputError):
    """A submitted URL could not be parsed."""


class UpstreamFetchError(ProfilerError):
    """The target website was unreachable or answered with a non-2xx status."""

    status_code = 400


class AiUnavailableError(ProfilerError):
    """The LLM call failed or returned no content."""

    status_code = 500


class AiMalformedError(ProfilerError):
    """The LLM response was not valid JSON."""

    status_code = 500


class AiUnusableError(ProfilerError):
    """The LLM response was JSON but not a profile object."""

    status_code = 500


class ProfileNotFoundError(ProfilerError):
    status_code = 404


class DuplicateUrlError(ProfilerError):
    """Another stored profile already owns the normalized URL."""

    status_code = 409
