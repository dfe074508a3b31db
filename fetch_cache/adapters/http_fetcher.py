"""
HTTP upstream fetcher.
"""

from typing import Optional

import httpx

from shared.errors import ForbiddenError, NotFoundError, UpstreamError
from shared.logging import get_logger
from ..models import FetchResult


class HttpFetcher:
    """Fetches URLs over HTTP and maps status codes onto fetch outcomes."""

    def __init__(self, base_url: Optional[str] = None, timeout: float = 10.0,
                 client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip('/') if base_url else None
        self.timeout = timeout
        self.logger = get_logger("fetch_cache.http_fetcher")
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def _resolve(self, url: str) -> str:
        if self.base_url and not url.startswith(("http://", "https://")):
            return f"{self.base_url}/{url.lstrip('/')}"
        return url

    async def __call__(self, url: str) -> FetchResult:
        target = self._resolve(url)
        try:
            response = await self._get_client().get(target, follow_redirects=True)
        except httpx.HTTPError as e:
            self.logger.error("Upstream request failed", url=target, error=str(e))
            raise UpstreamError(str(e), details={"url": target})

        if response.status_code == 200:
            self.logger.debug("Upstream fetch succeeded", url=target)
            return FetchResult(self._payload(response), dict(response.headers))

        if response.status_code == 404:
            self.logger.info("Upstream resource not found", url=target)
            raise NotFoundError(details={"url": target})

        if response.status_code == 403:
            self.logger.info("Upstream resource forbidden", url=target)
            raise ForbiddenError(details={"url": target})

        self.logger.error(
            "Upstream returned unexpected status",
            url=target,
            status_code=response.status_code
        )
        raise UpstreamError(
            f"Unexpected status {response.status_code}",
            status=response.status_code,
            details={"url": target, "body": response.text}
        )

    @staticmethod
    def _payload(response: httpx.Response):
        content_type = response.headers.get("content-type", "").split(";")[0].strip().lower()
        if content_type == "application/json" or content_type.endswith("+json"):
            return response.json()
        if content_type.startswith("text/"):
            return response.text
        return response.content

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
