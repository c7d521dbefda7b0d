"""
HTTP Transport - The primitive the request executor dispatches through.

The media browser host supplies plugins with an HTTP capability that has
dedicated GET and POST entry points plus a generic request entry point.
``BaseTransport`` models that capability so the executor can be driven by
stubs in tests, and ``AiohttpTransport`` implements it on an aiohttp
session for running outside the host.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, Optional, Union

import aiohttp
from pydantic import BaseModel, Field

from vidplug.core.exceptions import NetworkError


logger = logging.getLogger(__name__)


Body = Union[str, bytes]


class TransportResponse(BaseModel):
    """Raw outcome of one HTTP exchange."""

    code: int = Field(..., description="HTTP status code")
    body: str = Field(default="", description="Decoded response body")
    headers: Dict[str, str] = Field(default_factory=dict, description="Response headers")
    url: str = Field(default="", description="Final request URL")

    @property
    def is_ok(self) -> bool:
        """Whether the status is in the 2xx-3xx range."""
        return 200 <= self.code < 400

    def __repr__(self) -> str:
        return f"TransportResponse(code={self.code}, url='{self.url}')"


class BaseTransport(ABC):
    """Abstract HTTP capability with the host's three entry points."""

    @abstractmethod
    async def get(self, url: str, headers: Dict[str, str], use_auth: bool = False) -> TransportResponse:
        """Perform a GET request."""
        pass

    @abstractmethod
    async def post(self, url: str, body: Body, headers: Dict[str, str], use_auth: bool = False) -> TransportResponse:
        """Perform a POST request."""
        pass

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        body: Body,
        headers: Dict[str, str],
        use_auth: bool = False,
    ) -> TransportResponse:
        """Perform a request with an arbitrary method."""
        pass

    async def cleanup(self) -> None:
        """Release any resources held by the transport."""
        pass


AuthHeaderProvider = Callable[[], Dict[str, str]]


class AiohttpTransport(BaseTransport):
    """Transport backed by a lazily created ``aiohttp.ClientSession``."""

    def __init__(
        self,
        timeout: float = 30,
        auth_headers: Optional[AuthHeaderProvider] = None,
        cookies: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the aiohttp transport.

        Args:
            timeout: Total timeout per request in seconds
            auth_headers: Called for requests made with ``use_auth`` to get
                the authentication headers to add
            cookies: Cookies sent with every request
        """
        self.timeout = timeout
        self.auth_headers = auth_headers
        self.cookies = dict(cookies or {})
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session with proper configuration."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=10,
                limit_per_host=5,
                ttl_dns_cache=300,
                use_dns_cache=True,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                cookies=self.cookies,
            )
        return self._session

    def _headers_for(self, headers: Dict[str, str], use_auth: bool) -> Dict[str, str]:
        if use_auth and self.auth_headers is not None:
            return {**headers, **self.auth_headers()}
        return dict(headers)

    async def _send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        use_auth: bool,
        body: Optional[Body] = None,
    ) -> TransportResponse:
        logger.debug(f"{method} {url}")
        try:
            async with self.session.request(
                method,
                url,
                headers=self._headers_for(headers, use_auth),
                data=body if body else None,
            ) as response:
                text = await response.text(errors="replace")
                return TransportResponse(
                    code=response.status,
                    body=text,
                    headers={k: v for k, v in response.headers.items()},
                    url=str(response.url),
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"Network error for {url}: {str(e) or e.__class__.__name__}", url=url, details=str(e))

    async def get(self, url: str, headers: Dict[str, str], use_auth: bool = False) -> TransportResponse:
        return await self._send("GET", url, headers, use_auth)

    async def post(self, url: str, body: Body, headers: Dict[str, str], use_auth: bool = False) -> TransportResponse:
        return await self._send("POST", url, headers, use_auth, body)

    async def request(
        self,
        method: str,
        url: str,
        body: Body,
        headers: Dict[str, str],
        use_auth: bool = False,
    ) -> TransportResponse:
        return await self._send(method.upper(), url, headers, use_auth, body)

    async def cleanup(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            try:
                await self._session.close()
                logger.debug("HTTP session closed")
            except Exception as e:
                logger.debug(f"Error closing HTTP session: {e}")
        self._session = None


__all__ = [
    "Body",
    "TransportResponse",
    "BaseTransport",
    "AiohttpTransport",
    "AuthHeaderProvider",
]
