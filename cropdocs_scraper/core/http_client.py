"""
Async HTTP client shared by the index fetcher and the downloader.

Built on httpx with:
- One connection pool per run
- Fixed User-Agent header
- Per-request timeouts (None = wait indefinitely)
- Pluggable transport for tests
"""

from typing import Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)


DEFAULT_USER_AGENT = "cropdocs-scraper/0.1 (+https://cropscience.bayer.co.uk)"


class HttpClient:
    """
    Async HTTP client wrapper.

    Usage:
        async with HttpClient() as client:
            response = await client.get("https://example.com")
            data = response.content
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            timeout: Default request timeout in seconds (None = no timeout)
            user_agent: User-Agent header sent with every request
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._client

    async def get(self, url: str, timeout: Optional[float] = None) -> httpx.Response:
        """
        GET request with the body fully read.

        Status codes are not checked; callers decide.

        Args:
            url: URL to fetch
            timeout: Timeout in seconds (None = no timeout)

        Returns:
            httpx.Response object
        """
        client = self._require_client()
        logger.debug("http_get", url=url)
        return await client.get(url, timeout=timeout)

    def stream(self, url: str, timeout: Optional[float] = None):
        """
        Streamed GET request, for use with 'async with'.

        Headers are available before the body is read, so responses can
        be rejected without downloading them.

        Args:
            url: URL to fetch
            timeout: Timeout in seconds (None = no timeout)

        Returns:
            Async context manager yielding httpx.Response
        """
        client = self._require_client()
        logger.debug("http_stream", url=url)
        return client.stream("GET", url, timeout=timeout)
