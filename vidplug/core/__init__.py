"""
Core Layer - Configuration, data models and exceptions.

This module contains the plugin configuration schemas and manager, the
settings resolver consulted by the network layer, the host data model, and
the exception hierarchy. Auth state lives in ``vidplug.core.auth``.
"""

from vidplug.core.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    GraphQLError,
    InvalidDataError,
    NetworkError,
    NotFoundError,
    PluginError,
    ToolingError,
    VidPlugError,
)
from vidplug.core.config_schemas import PluginConfig, PluginSetting, ToolingSettings
from vidplug.core.config_manager import ConfigManager
from vidplug.core.settings import SourceSettings
from vidplug.core.models import (
    AuthorLink,
    Comment,
    PlatformChannel,
    PlatformID,
    PlatformVideo,
    PlatformVideoDetails,
    Thumbnail,
    Thumbnails,
    VideoSource,
)

__all__ = [
    # Data Models
    "PlatformID",
    "Thumbnail",
    "Thumbnails",
    "AuthorLink",
    "PlatformVideo",
    "PlatformVideoDetails",
    "VideoSource",
    "PlatformChannel",
    "Comment",
    # Configuration
    "PluginConfig",
    "PluginSetting",
    "ToolingSettings",
    "ConfigManager",
    "SourceSettings",
    # Exceptions
    "VidPlugError",
    "ConfigurationError",
    "NetworkError",
    "APIError",
    "GraphQLError",
    "PluginError",
    "AuthenticationError",
    "NotFoundError",
    "InvalidDataError",
    "ToolingError",
]
