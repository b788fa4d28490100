"""
Remote fetcher for upstream catalog and image origins.
"""

import time
from typing import Optional

import httpx

from shared.errors import UpstreamError
from shared.logging import get_logger
from shared.metrics import MetricsCollector


def build_http_client(timeout: float = 10.0, user_agent: str = "pokedex-relay/1.0") -> httpx.AsyncClient:
    """Create the shared HTTP client used by the fetcher."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers={"User-Agent": user_agent},
    )


class HTTPFetcher:
    """Performs a single GET per call and returns the raw body.

    No retries are attempted. Any status outside 2xx, and any transport
    failure, is raised as ``UpstreamError`` carrying the requested URL.
    """

    def __init__(self, client: httpx.AsyncClient, metrics: Optional[MetricsCollector] = None):
        self._client = client
        self.metrics = metrics
        self.logger = get_logger("pokedex.fetcher")

    async def fetch(self, url: str) -> bytes:
        """Fetch ``url`` and return the response body."""
        start_time = time.perf_counter()
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            self.logger.warning("Upstream transport error", url=url, error=str(exc))
            self._record("error", start_time)
            raise UpstreamError(url, message=f"Upstream request failed: {exc}") from exc

        if not response.is_success:
            self.logger.warning("Upstream returned non-success status", url=url, status_code=response.status_code)
            self._record("bad_status", start_time)
            raise UpstreamError(url, status_code=response.status_code)

        self._record("ok", start_time)
        self.logger.debug("Upstream fetch completed", url=url, size=len(response.content))
        return response.content

    async def close(self):
        await self._client.aclose()

    def _record(self, outcome: str, start_time: float):
        if not self.metrics:
            return
        self.metrics.increment_counter("upstream_fetches_total", outcome=outcome)
        self.metrics.observe_histogram("upstream_fetch_duration_seconds", time.perf_counter() - start_time)
