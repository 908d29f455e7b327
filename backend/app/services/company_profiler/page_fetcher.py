"""Website fetching for profile analysis.

A plain httpx GET with a fixed identifying user agent. Failures are
reported as ``UpstreamFetchError`` since an unreachable or misconfigured
target site is a client-side problem, not a server fault.
"""

import logging
from typing import Optional

import httpx

from app.errors import UpstreamFetchError

logger = logging.getLogger(__name__)


class PageFetcher:
    """Fetches a single page and returns its body text."""

    def __init__(
        self,
        user_agent: str,
        timeout: float,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.user_agent = user_agent
        self.timeout = timeout
        self._transport = transport

    async def fetch(self, url: str) -> str:
        """GET *url* following redirects.

        Raises:
            UpstreamFetchError: On transport errors or a non-2xx response.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Fetch failed for {url}: {e}")
            raise UpstreamFetchError(
                f"Unable to retrieve content from {url}", str(e) or type(e).__name__
            ) from e

        if not resp.is_success:
            detail = f"{resp.status_code} {resp.reason_phrase}".strip()
            logger.warning(f"Fetch of {url} returned {detail}")
            raise UpstreamFetchError(
                f"Unable to retrieve content from {url}: {detail}", detail
            )

        return resp.text
