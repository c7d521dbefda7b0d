"""
VidPlug - Toolkit for building video content source plugins.

Runtime helpers for sources (request executor with retries, GraphQL and
persisted queries, base-URL aware API client) and a Typer/Rich CLI for the
plugin developer workflow.
"""

__version__ = "0.1.0"
__author__ = "VidPlug Team"

# Package metadata
__title__ = "vidplug"
__description__ = "Toolkit for building video content source plugins"
__license__ = "MIT"

# Version info tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split(".")))

# Export main components for easy importing
from vidplug.core.models import PlatformVideo, PlatformVideoDetails, PlatformChannel
from vidplug.network import NetworkClient, GraphQLClient, APIClient
from vidplug.cli.main import cli_main

__all__ = [
    "__version__",
    "__author__",
    "PlatformVideo",
    "PlatformVideoDetails",
    "PlatformChannel",
    "NetworkClient",
    "GraphQLClient",
    "APIClient",
    "cli_main",
]
