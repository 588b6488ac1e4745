"""
Async HTTP client for the stocking schedule page.

Built on httpx with:
- A desktop browser User-Agent (the schedule site treats other agents differently)
- A bounded request timeout
- raise_for_status on every response, so non-2xx surfaces as httpx.HTTPStatusError
"""

from typing import Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class HttpClient:
    """
    Async HTTP client.

    Usage:
        async with HttpClient() as client:
            html = await client.get_text("https://example.com")
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds
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
            headers={
                "User-Agent": self.user_agent,
                "Accept": DEFAULT_ACCEPT,
                "Accept-Language": "en-US,en;q=0.9",
            },
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def get(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
    ) -> httpx.Response:
        """
        GET request.

        Args:
            url: URL to fetch
            params: Optional query parameters
            headers: Extra headers for this request

        Returns:
            httpx.Response object

        Raises:
            httpx.HTTPError: On network failure or non-2xx status
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")

        logger.debug("http_get", url=url, params=params)

        response = await self._client.get(url, params=params, headers=headers)
        response.raise_for_status()

        return response

    async def get_text(self, url: str, **kwargs) -> str:
        """GET request returning text content."""
        response = await self.get(url, **kwargs)
        return response.text
