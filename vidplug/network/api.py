"""
API Client - Platform API calls relative to the configured base URL.

All methods prepend the base URL the user selected in the plugin settings,
so plugin code only deals in endpoint paths.
"""

import logging
from typing import Any, Callable, Dict, Optional

from vidplug.network.client import NetworkClient
from vidplug.network.graphql import join_url


logger = logging.getLogger(__name__)


class APIClient:
    """Client for making requests to the platform API."""

    def __init__(self, client: NetworkClient, get_base_url: Callable[[], str]):
        """
        Initialize the API client.

        Args:
            client: Convenience network client
            get_base_url: Resolves the active base URL; consulted on every call
        """
        self.client = client
        self.get_base_url = get_base_url

    def get_url(self, endpoint: str) -> str:
        """
        Get the full URL by combining base URL with endpoint.

        Raises:
            ConfigurationError: If no base URL is configured
        """
        return join_url(self.get_base_url(), endpoint)

    async def get(self, endpoint: str, **options: Any) -> Any:
        return await self.client.get(self.get_url(endpoint), **options)

    async def post(self, endpoint: str, data: Any = None, **options: Any) -> Any:
        return await self.client.post(self.get_url(endpoint), data, **options)

    async def put(self, endpoint: str, data: Any = None, **options: Any) -> Any:
        return await self.client.put(self.get_url(endpoint), data, **options)

    async def delete(self, endpoint: str, **options: Any) -> Any:
        return await self.client.delete(self.get_url(endpoint), **options)

    async def get_json(self, endpoint: str, **options: Any) -> Any:
        return await self.client.get_json(self.get_url(endpoint), **options)

    async def post_json(self, endpoint: str, data: Any = None, **options: Any) -> Any:
        return await self.client.post_json(self.get_url(endpoint), data, **options)

    async def get_html(self, endpoint: str, **options: Any) -> Any:
        return await self.client.get_html(self.get_url(endpoint), **options)

    async def graphql(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        endpoint: str = "/graphql",
        **options: Any,
    ) -> Any:
        """Execute a GraphQL query against the API (``/graphql`` unless overridden)."""
        return await self.client.fetch_graphql(self.get_url(endpoint), query, variables, **options)

    async def request(self, endpoint: str, **options: Any) -> Any:
        """Generic request for anything the shortcuts do not cover."""
        return await self.client.fetch(self.get_url(endpoint), **options)


__all__ = ["APIClient"]
