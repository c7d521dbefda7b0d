"""
Network Client - Method-specific convenience wrappers over the executor.

Each wrapper presets the method and parse flags on a fresh
``RequestDescriptor`` and hands it to the ``RequestExecutor`` unchanged.
Options are the descriptor's field names (``headers``, ``use_auth``,
``retries``, ``retry_delay``, ``throw_on_error``, ...).
"""

import logging
from typing import Any, Dict, Optional, Union

from vidplug.network.request import RequestDescriptor, RequestExecutor


logger = logging.getLogger(__name__)


JSON_ACCEPT = {"Accept": "application/json"}
JSON_CONTENT_TYPE = {"Content-Type": "application/json"}


def build_descriptor(url: str, **options: Any) -> RequestDescriptor:
    """Build a descriptor for ``url``; caller options are validated by pydantic."""
    return RequestDescriptor(url=url, **options)


def _with_headers(defaults: Dict[str, str], options: Dict[str, Any]) -> Dict[str, str]:
    """Preset headers merged under the caller's."""
    return {**defaults, **(options.pop("headers", None) or {})}


class NetworkClient:
    """HTTP, JSON, HTML and GraphQL requests with retries."""

    def __init__(self, executor: RequestExecutor):
        self.executor = executor

    async def fetch(self, url_or_descriptor: Union[str, RequestDescriptor], **options: Any) -> Any:
        """
        Perform a general HTTP request.

        Args:
            url_or_descriptor: URL string, or a complete descriptor
            **options: Descriptor fields (ignored when a descriptor is given)
        """
        if isinstance(url_or_descriptor, RequestDescriptor):
            return await self.executor.execute(url_or_descriptor)
        return await self.executor.execute(build_descriptor(url_or_descriptor, **options))

    async def get(self, url: str, **options: Any) -> Any:
        return await self.fetch(url, **{**options, "method": "GET"})

    async def post(self, url: str, data: Any = None, **options: Any) -> Any:
        return await self.fetch(url, **{**options, "method": "POST", "data": data})

    async def put(self, url: str, data: Any = None, **options: Any) -> Any:
        return await self.fetch(url, **{**options, "method": "PUT", "data": data})

    async def delete(self, url: str, **options: Any) -> Any:
        return await self.fetch(url, **{**options, "method": "DELETE"})

    async def fetch_json(self, url: str, **options: Any) -> Any:
        """Fetch and parse a JSON response (``Accept: application/json``)."""
        headers = _with_headers(JSON_ACCEPT, options)
        return await self.fetch(url, **{**options, "headers": headers, "parse_json": True})

    async def get_json(self, url: str, **options: Any) -> Any:
        """Perform a GET request and parse the JSON response."""
        return await self.fetch_json(url, **{**options, "method": "GET"})

    async def post_json(self, url: str, data: Any = None, **options: Any) -> Any:
        """POST ``data`` as JSON and parse the JSON response."""
        headers = _with_headers(JSON_CONTENT_TYPE, options)
        return await self.fetch_json(url, **{**options, "headers": headers, "method": "POST", "data": data})

    async def fetch_html(self, url: str, **options: Any) -> Any:
        """Fetch and parse an HTML response into a document handle."""
        return await self.fetch(url, **{**options, "parse_html": True})

    async def get_html(self, url: str, **options: Any) -> Any:
        """Perform a GET request and parse the HTML response."""
        return await self.fetch(url, **{**options, "method": "GET", "parse_html": True})

    async def fetch_graphql(
        self,
        endpoint: str,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        **options: Any,
    ) -> Any:
        """
        Execute a GraphQL query by POSTing ``{query, variables}``.

        Returns:
            The payload's ``data`` member when present, else the payload
        """
        headers = _with_headers(JSON_CONTENT_TYPE, options)
        payload = {"query": query, "variables": variables or {}}

        response = await self.fetch(
            endpoint,
            **{**options, "method": "POST", "headers": headers, "data": payload, "parse_json": True},
        )

        if isinstance(response, dict) and response.get("data"):
            return response["data"]
        return response


__all__ = ["NetworkClient", "build_descriptor", "JSON_ACCEPT", "JSON_CONTENT_TYPE"]
