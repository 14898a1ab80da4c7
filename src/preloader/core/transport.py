"""HTTP transport implementation using httpx."""

import asyncio

import httpx

from ..errors import TransportError
from .protocols import Response

DEFAULT_USER_AGENT = "GemPreloader/0.1 (+https://github.com/gem-preloader)"


class HttpTransport:
    """Async repository client using httpx with connection reuse."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        max_connections: int = 100,
        max_keepalive_connections: int = 20,
    ):
        self.base_url = base_url
        self.timeout = httpx.Timeout(timeout)
        self.user_agent = user_agent
        self.limits = httpx.Limits(
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client with double-checked locking."""
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = httpx.AsyncClient(
                        base_url=self.base_url,
                        timeout=self.timeout,
                        limits=self.limits,
                        headers={"User-Agent": self.user_agent},
                        follow_redirects=True,
                    )
        return self._client

    async def _request(self, method: str, path: str) -> httpx.Response:
        client = await self._get_client()
        try:
            resp = await client.request(method, path)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"{method} {path} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e
        return resp

    async def get(self, path: str) -> bytes:
        """Fetch a resource and return its body."""
        resp = await self._request("GET", path)
        return resp.content

    async def head(self, path: str) -> Response:
        """Send a HEAD request for a resource."""
        resp = await self._request("HEAD", path)
        return Response(
            url=str(resp.url),
            status=resp.status_code,
            content=resp.content,
            headers=dict(resp.headers),
        )

    async def close(self):
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
