"""HTTP client used by the wallpaper sources.

Usage:
    from randwall.httpclient import HttpClient

    async with HttpClient() as client:
        response = await client.get("https://api.desktoppr.co/1/wallpapers/random")
        print(response.status, response.body)

Adapters only need an object with an ``async get(url) -> HttpResponse``
method (see HttpGetter), so tests can inject a scripted client.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import aiohttp
from yarl import URL

from .constants import HTTP_TIMEOUT_SECONDS, USER_AGENT

if TYPE_CHECKING:
    import logging
    from typing import Self

__all__ = [
    "ClientError",
    "HttpClient",
    "HttpGetter",
    "HttpResponse",
]

ClientError = aiohttp.ClientError


@dataclass(frozen=True, slots=True)
class HttpResponse:
    """A fully read HTTP response.

    Attributes:
        status: HTTP status code.
        url: Final URL after redirects.
        body: Response body decoded as text.
    """

    status: int
    url: str
    body: str


class HttpGetter(Protocol):
    """Anything able to perform an asynchronous GET."""

    async def get(self, url: str) -> HttpResponse: ...


class HttpClient:
    """Thin wrapper over a lazily created aiohttp.ClientSession."""

    def __init__(
        self,
        *,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        headers: dict[str, str] | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            timeout: Total timeout of a request, in seconds.
            headers: Extra default headers for all requests.
            log: Optional logger for request tracing.
        """
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = {"User-Agent": USER_AGENT, **(headers or {})}
        self._log = log
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout, headers=self._headers)
        return self._session

    async def get(self, url: str) -> HttpResponse:
        """Issue a GET request and read the whole body.

        The URL is sent as given: callers encode it beforehand. Bytes that
        do not match the declared charset are replaced, not rejected.

        Args:
            url: Already percent-encoded URL.

        Returns:
            The response status, final URL and text body.

        Raises:
            aiohttp.ClientError: On transport failures.
            asyncio.TimeoutError: When the request exceeds the timeout.
        """
        if self._log:
            self._log.debug("GET %s", url)
        session = self._get_session()
        async with session.get(URL(url, encoded=True)) as response:
            body = await response.text(errors="replace")
            return HttpResponse(status=response.status, url=str(response.url), body=body)

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.close()
