"""
Base Source Interface - Abstract base class for content source plugins.

This module defines the contract the media browser host drives a source
through (enable, home feed, search, channels, content details, comments) and
wires every enabled source to the same network stack: settings, transport,
request executor, and the convenience, API and GraphQL clients built on it.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from vidplug.core.auth import AuthState, clear_auth_state, refresh_auth_token
from vidplug.core.config_schemas import PluginConfig
from vidplug.core.exceptions import PluginError
from vidplug.core.models import Comment, PlatformChannel, PlatformVideoDetails
from vidplug.core.settings import SourceSettings
from vidplug.network.api import APIClient
from vidplug.network.client import NetworkClient
from vidplug.network.graphql import GraphQLClient
from vidplug.network.request import RequestExecutor, Sleep
from vidplug.network.transport import AiohttpTransport, BaseTransport
from vidplug.plugins.pagers import Pager, empty_pager


logger = logging.getLogger(__name__)


# Constant naming the token endpoint for sources with anonymous auth
AUTH_TOKEN_ENDPOINT_CONSTANT = "authTokenEndpoint"


class SourceMetadata(BaseModel):
    """Metadata information for a source, taken from its config."""

    name: str = Field(..., description="Source display name")
    id: Optional[str] = Field(None, description="Plugin ID")
    version: int = Field(default=1, description="Plugin version")
    author: str = Field(default="Unknown", description="Plugin author")
    description: str = Field(default="", description="Source description")
    website: Optional[str] = Field(None, description="Platform URL")
    requires_auth: bool = Field(default=False, description="Whether the source requests auth tokens")


class BaseSource(ABC):
    """
    Abstract base class for content source plugins.

    Sources are constructed without configuration; the host calls
    ``enable`` with the plugin config, the user's settings and the saved
    state. Until then the network clients are unavailable.
    """

    def __init__(self, transport: Optional[BaseTransport] = None, sleep: Sleep = asyncio.sleep, timeout: float = 30):
        """
        Initialize the source.

        Args:
            transport: HTTP capability; an ``AiohttpTransport`` is created on
                enable when omitted
            sleep: Delay primitive used between request retries
            timeout: Request timeout in seconds for the default transport
        """
        self._transport = transport
        self._sleep = sleep
        self.timeout = timeout

        self.config: Optional[PluginConfig] = None
        self.settings = SourceSettings()
        self.auth_state = AuthState()
        self.client: Optional[NetworkClient] = None
        self.api: Optional[APIClient] = None
        self.graphql: Optional[GraphQLClient] = None
        self.enabled = False

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def metadata(self) -> SourceMetadata:
        """Get source metadata information."""
        config = self.config or PluginConfig()
        return SourceMetadata(
            name=config.name,
            id=config.id,
            version=config.version,
            author=config.author or "Unknown",
            description=config.description or "",
            website=config.platform_url or None,
            requires_auth=self.settings.get_constant(AUTH_TOKEN_ENDPOINT_CONSTANT) is not None,
        )

    @property
    def plugin_id(self) -> str:
        return (self.config.id if self.config else None) or ""

    @property
    def base_url(self) -> str:
        """The active platform base URL."""
        return self.settings.get_base_url()

    @property
    def transport(self) -> BaseTransport:
        if self._transport is None:
            self._transport = AiohttpTransport(
                timeout=self.timeout,
                auth_headers=lambda: self.auth_state.headers(),
            )
        return self._transport

    async def enable(
        self,
        config: Union[PluginConfig, Dict[str, Any]],
        settings: Optional[Dict[str, str]] = None,
        saved_state: Optional[str] = None,
    ) -> None:
        """
        Enable the source.

        Builds the network stack and restores the auth state. When the config
        names an auth token endpoint and the restored token is not valid, a
        new token is requested.

        Args:
            config: Plugin configuration (``config.json`` contents)
            settings: User setting values keyed by variable name
            saved_state: String previously returned by ``save_state``
        """
        self.config = config if isinstance(config, PluginConfig) else PluginConfig.model_validate(config)
        self.settings = SourceSettings(self.config, settings)

        executor = RequestExecutor(
            self.transport,
            default_headers=self.settings.get_default_headers,
            sleep=self._sleep,
        )
        self.client = NetworkClient(executor)
        self.api = APIClient(self.client, self.settings.get_base_url)
        self.graphql = GraphQLClient(self.client, self.settings.get_base_url)

        self.auth_state = AuthState.from_state_string(saved_state)
        token_endpoint = self.settings.get_constant(AUTH_TOKEN_ENDPOINT_CONSTANT)
        if token_endpoint and not self.auth_state.is_valid():
            self.auth_state = await refresh_auth_token(
                self.auth_state, self.client, self.base_url, endpoint=token_endpoint
            )

        self.enabled = True
        self.logger.info(f"{self} enabled")

    def disable(self) -> None:
        """Disable the source and forget credentials."""
        self.enabled = False
        self.auth_state = clear_auth_state()
        self.logger.info(f"{self} disabled")

    def save_state(self) -> str:
        """Serialize the state the host should hand back on the next enable."""
        return self.auth_state.to_state_string()

    def require_client(self) -> NetworkClient:
        """
        Get the network client of an enabled source.

        Raises:
            PluginError: If the source has not been enabled
        """
        if self.client is None:
            raise PluginError(f"{self.__class__.__name__} used before enable()", plugin_name=self.metadata.name)
        return self.client

    @abstractmethod
    async def get_home(self) -> Pager:
        """
        Get the home feed.

        Returns:
            Pager of ``PlatformVideo`` items
        """
        pass

    @abstractmethod
    async def search(self, query: str, type: Optional[str] = None, order: Optional[str] = None,
                     filters: Optional[Dict[str, List[str]]] = None) -> Pager:
        """
        Search for videos.

        Args:
            query: Search query string
            type: Content type filter
            order: Sort order
            filters: Extra platform filters

        Returns:
            Pager of ``PlatformVideo`` items
        """
        pass

    async def search_suggestions(self, query: str) -> List[str]:
        """Query completions for the search box; none by default."""
        return []

    async def search_channels(self, query: str) -> Pager:
        return empty_pager("channel search", {"query": query})

    @abstractmethod
    def is_channel_url(self, url: str) -> bool:
        pass

    @abstractmethod
    async def get_channel(self, url: str) -> PlatformChannel:
        """
        Get channel details.

        Raises:
            PluginError: If the channel cannot be loaded
        """
        pass

    @abstractmethod
    async def get_channel_contents(self, url: str, type: Optional[str] = None, order: Optional[str] = None,
                                   filters: Optional[Dict[str, List[str]]] = None) -> Pager:
        """Pager of the channel's ``PlatformVideo`` items."""
        pass

    @abstractmethod
    def is_content_details_url(self, url: str) -> bool:
        pass

    @abstractmethod
    async def get_content_details(self, url: str) -> PlatformVideoDetails:
        """
        Get full details of a video.

        Raises:
            PluginError: If the details cannot be loaded
        """
        pass

    async def get_comments(self, url: str) -> Pager:
        return empty_pager("comments", {"url": url})

    async def get_sub_comments(self, comment: Comment) -> Pager:
        return empty_pager("sub-comments", {"url": comment.context_url})

    async def get_playlist_contents(self, url: str) -> Pager:
        return empty_pager("playlist", {"url": url})

    async def cleanup(self) -> None:
        """Clean up resources used by the source."""
        if self._transport is not None:
            await self._transport.cleanup()

    def __str__(self) -> str:
        return f"{self.metadata.name} v{self.metadata.version}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.metadata.name}')"


__all__ = ["BaseSource", "SourceMetadata", "AUTH_TOKEN_ENDPOINT_CONSTANT"]
