"""
Request Executor - One logical HTTP request with bounded retries.

The executor merges headers, serializes the body, dispatches through the
transport, classifies the response, optionally parses JSON or HTML, and
retries failed attempts. It is the only place in the toolkit that loops on
failures; everything above it (convenience wrappers, GraphQL, API client)
configures a ``RequestDescriptor`` and delegates here.
"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vidplug.core.exceptions import APIError, NetworkError
from vidplug.network.html import parse_html
from vidplug.network.transport import BaseTransport, Body, TransportResponse


logger = logging.getLogger(__name__)


DEFAULT_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000


class RequestDescriptor(BaseModel):
    """Everything needed to execute one logical request."""

    model_config = ConfigDict(extra="forbid")

    method: str = Field(default="GET", description="HTTP method")
    url: str = Field(..., min_length=1, description="Target URL")
    headers: Dict[str, str] = Field(default_factory=dict, description="Caller headers")
    data: Any = Field(default=None, description="Body: str/bytes as-is, anything else JSON-encoded")
    use_auth: bool = Field(default=False, description="Send authentication with the request")
    parse_json: bool = Field(default=False, description="Parse the response body as JSON")
    parse_html: bool = Field(default=False, description="Parse the response body as HTML")
    throw_on_error: bool = Field(default=True, description="Raise instead of returning None on failure")
    check_api_errors: bool = Field(default=True, description="Treat a JSON 'errors' field as a failure")
    retries: int = Field(default=DEFAULT_RETRIES, ge=0, description="Additional attempts after the first")
    retry_delay: int = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0, description="Wait between attempts (ms)")

    @field_validator('method')
    @classmethod
    def normalize_method(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode='after')
    def check_parse_modes(self) -> 'RequestDescriptor':
        """JSON parsing wins when both parse modes are requested."""
        if self.parse_json and self.parse_html:
            logger.warning(f"Both parse_json and parse_html set for {self.url}; parsing as JSON")
        return self

    @property
    def attempts(self) -> int:
        """Total number of attempts, including the first."""
        return self.retries + 1


HeaderSource = Union[Mapping[str, str], Callable[[], Mapping[str, str]], None]
Sleep = Callable[[float], Awaitable[Any]]
HTMLParse = Callable[[str], Any]


def serialize_body(data: Any) -> Body:
    """Strings and bytes pass through, None becomes empty, anything else is JSON."""
    if data is None:
        return ""
    if isinstance(data, (str, bytes)):
        return data
    return json.dumps(data, separators=(",", ":"))


class RequestExecutor:
    """Executes ``RequestDescriptor``s against a transport."""

    def __init__(
        self,
        transport: BaseTransport,
        default_headers: HeaderSource = None,
        html_parser: HTMLParse = parse_html,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the request executor.

        Args:
            transport: HTTP capability to dispatch through
            default_headers: Headers sent with every request, or a callable
                returning them (read on every request)
            html_parser: Turns an HTML body into a document handle
            sleep: Delay primitive awaited between attempts (seconds)
        """
        self.transport = transport
        self._default_headers = default_headers
        self.html_parser = html_parser
        self.sleep = sleep

    def default_headers(self) -> Dict[str, str]:
        source = self._default_headers
        if source is None:
            return {}
        if callable(source):
            return dict(source())
        return dict(source)

    def build_headers(self, descriptor: RequestDescriptor) -> Dict[str, str]:
        """Default headers overlaid by the caller's; caller wins."""
        return {**self.default_headers(), **descriptor.headers}

    async def _dispatch(self, descriptor: RequestDescriptor, headers: Dict[str, str], body: Body) -> TransportResponse:
        if descriptor.method == "GET":
            return await self.transport.get(descriptor.url, headers, descriptor.use_auth)
        if descriptor.method == "POST":
            return await self.transport.post(descriptor.url, body, headers, descriptor.use_auth)
        return await self.transport.request(descriptor.method, descriptor.url, body, headers, descriptor.use_auth)

    def _parse(self, descriptor: RequestDescriptor, response: TransportResponse) -> Any:
        if descriptor.parse_json:
            payload = json.loads(response.body)
            if descriptor.check_api_errors and isinstance(payload, dict) and payload.get("errors") is not None:
                raise APIError(json.dumps(payload["errors"]), errors=payload["errors"], url=descriptor.url)
            return payload

        if descriptor.parse_html:
            return self.html_parser(response.body)

        return response

    async def execute(self, descriptor: RequestDescriptor) -> Any:
        """
        Execute a request with retries.

        Args:
            descriptor: The request to execute

        Returns:
            Parsed JSON, an HTML document handle, the raw response, or None
            when the request failed and ``throw_on_error`` is false

        Raises:
            NetworkError: On failure when ``throw_on_error`` is true
            APIError: Never directly; API errors are retried and surface as
                the cause of the final NetworkError
        """
        headers = self.build_headers(descriptor)
        body = serialize_body(descriptor.data)
        url = descriptor.url

        last_error: Optional[Exception] = None
        attempts_left = descriptor.attempts
        attempt = 0

        while attempts_left > 0:
            attempt += 1
            try:
                logger.debug(f"{descriptor.method} {url} (attempt {attempt}/{descriptor.attempts})")
                response = await self._dispatch(descriptor, headers, body)

                if not response.is_ok:
                    error = NetworkError(
                        f"Request to {url} failed with status {response.code}",
                        url=url,
                        status_code=response.code,
                        details=response.body,
                    )
                    if descriptor.throw_on_error:
                        raise error
                    logger.warning(str(error))
                    return None

                return self._parse(descriptor, response)

            except Exception as e:
                last_error = e
                attempts_left -= 1
                logger.warning(f"Request failed (attempt {attempt}): {e}")

                if attempts_left > 0 and descriptor.retry_delay > 0:
                    await self.sleep(descriptor.retry_delay / 1000)

        if descriptor.throw_on_error:
            status_code = getattr(last_error, "status_code", None)
            raise NetworkError(
                f"Request to {url} failed after {descriptor.attempts} attempts: {last_error or 'Unknown error'}",
                url=url,
                status_code=status_code,
                details=str(last_error),
            ) from last_error

        return None


__all__ = [
    "DEFAULT_RETRIES",
    "DEFAULT_RETRY_DELAY_MS",
    "RequestDescriptor",
    "RequestExecutor",
    "serialize_body",
]
